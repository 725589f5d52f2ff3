"""
Handle account and region contexts for the constructs
"""

# std
from typing import Callable, Union, Dict, TypeVar, TYPE_CHECKING

# 3rd
from pulumi import ResourceOptions, export, Output

# local
from .exceptions import ContextNotSet

if TYPE_CHECKING:
    from .context.account import Account
    from .context.region import Region

# globals
CONTEXT: Union["Region", None] = None
ACCOUNT: Union["Account", None] = None

T = TypeVar("T")


def context_prefix() -> str:
    """
    Return the current context prefix
    """
    if CONTEXT is None:
        raise ContextNotSet("No Region context set")
    return f"{CONTEXT.account}-{CONTEXT.region}"


def context_export(name: str, target):
    """
    Export a stack output named after the current context
    """
    return export(f"{context_prefix()}-{name}", target)


def get_context() -> Union["Region", None]:
    """
    Return the current context
    """
    return CONTEXT


def get_account() -> Union["Account", None]:
    """
    Return the current account
    """
    return ACCOUNT


def set_context(context: "Region" = None):
    """
    Set the current context
    """
    global CONTEXT
    CONTEXT = context


def set_account(account: "Account" = None):
    """
    Set the current account
    """
    global ACCOUNT
    ACCOUNT = account


def lazy(factory: Callable[[], T]) -> Output:
    """
    Return an output whose value is computed by ``factory`` once Pulumi
    resolves it, which happens after the program body has finished.

    Anything the factory reads can keep changing until then.
    """
    return Output.from_input(True).apply(lambda _: factory())


# pylint: disable=too-many-arguments
def _build_resource_opts(
    name: str,
    opts: dict,
    tags: dict,
    prefix: str,
    provider,
    no_tags: bool = False,
) -> Dict:
    """
    Return a resource setup with the current provider
    """
    # needs to be a dict for the **opts
    opts = dict(opts) if opts else {}
    tags = dict(tags) if tags else {}

    # default the parent to the current provider if there isn't one.
    if not opts.get("parent"):
        opts["parent"] = provider

    if not tags.get("Name"):
        tags["Name"] = name

    tags["Name"] = f"{prefix}-{tags['Name']}"

    if not opts.get("provider"):
        opts["provider"] = provider

    payload = dict(
        opts=ResourceOptions(**opts),
        tags=tags,
        resource_name=f"{prefix}-{name}",
    )

    # if no_tags is set, don't add tags
    if no_tags:
        del payload["tags"]

    return payload


def stack_resource(name: str, opts: Dict = None, tags: Dict = None, no_tags: bool = False) -> Dict:
    """
    Return a resource setup with the current region provider
    """
    # fail if the context isn't set
    if CONTEXT is None:
        raise ContextNotSet("No Region context set")

    return _build_resource_opts(name, opts, tags, context_prefix(), CONTEXT.provider, no_tags)
