"""
Adopt an ECR repository created outside of the program
"""

# std
import json
import os
from dataclasses import dataclass
from typing import Dict, Union

# 3rd
from pulumi import FileArchive, Output, log
from pulumi_aws import iam, lambda_

# local
from . import policies
from .policies import PolicyDocument, PolicyStatement
from .provider import stack_resource, get_context, context_prefix, lazy


HANDLER_PATH = os.path.join(os.path.dirname(__file__), "adopt_repository")

ADOPT_ACTIONS = (
    "ecr:GetRepositoryPolicy",
    "ecr:SetRepositoryPolicy",
    "ecr:DeleteRepository",
    "ecr:ListImages",
    "ecr:BatchDeleteImage",
)

ADOPTERS = {}


@dataclass(frozen=True)
class AdoptedRepositoryProps:
    repository_name: str


def arn_for_local_repository(repository_name: str, context=None) -> str:
    """
    Render the ARN of a repository in the given, or current, account and region
    """
    context = context or get_context()
    return (
        f"arn:{context.partition}:ecr:{context.region}:{context.account_id}"
        f":repository/{repository_name}"
    )


class Adopter:
    """
    The Lambda function adopting repositories, one per account/region
    """

    def __init__(self):
        self.role = iam.Role(
            assume_role_policy=json.dumps(policies.get_role("lambda")),
            **stack_resource("ecr-adopter-role"),
        )

        iam.RolePolicyAttachment(
            role=self.role.name,
            policy_arn=policies.LAMBDA_BASIC_EXECUTION,
            **stack_resource("ecr-adopter-logs", dict(parent=self.role), no_tags=True),
        )

        self.function = lambda_.Function(
            role=self.role.arn,
            runtime="python3.12",
            handler="handler.handler",
            code=FileArchive(HANDLER_PATH),
            timeout=300,
            **stack_resource("ecr-adopter", dict(parent=self.role)),
        )

    def grant(self, name: str, repository_name: str) -> iam.RolePolicy:
        """
        Allow the function to manage one repository
        """
        statement = PolicyStatement().add_actions(*ADOPT_ACTIONS).add_resource(
            arn_for_local_repository(repository_name)
        )
        return iam.RolePolicy(
            role=self.role.id,
            policy=json.dumps(PolicyDocument().add_statement(statement).to_json()),
            **stack_resource(f"{name}-adopt-policy", dict(parent=self.role), no_tags=True),
        )


def get_adopter() -> Adopter:
    """
    Get the adopter for the current context, creating it on first use
    """
    prefix = context_prefix()
    adopter = ADOPTERS.get(prefix)
    if adopter is None:
        adopter = ADOPTERS[prefix] = Adopter()
    return adopter


class AdoptedRepository:
    """
    An ECR repository created by a build tool rather than by this program.

    Adopting makes it part of the stack: its resource policy is managed here
    and it gets deleted, images and all, when the stack is destroyed.
    """

    def __init__(self, name: str, props: AdoptedRepositoryProps, opts: Dict = None):
        self.name = name
        self.props = props
        self.policy_document = PolicyDocument()

        adopter = get_adopter()
        grant = adopter.grant(name, props.repository_name)

        opts = dict(opts or {})
        opts.setdefault("parent", adopter.function)
        opts["depends_on"] = list(opts.get("depends_on", [])) + [grant]

        self.resource = lambda_.Invocation(
            function_name=adopter.function.name,
            input=lazy(self._render_input),
            lifecycle_scope="CRUD",
            **stack_resource(name, opts, no_tags=True),
        )

        # reading the name back from the invocation makes consumers depend on
        # the adoption having happened
        self.repository_name: Output = self.resource.result.apply(
            lambda result: json.loads(result)["RepositoryName"]
        )
        context = get_context()
        self.repository_arn: Output = self.repository_name.apply(
            lambda repository_name: arn_for_local_repository(repository_name, context)
        )
        log.info(f"Adopting ECR repository {props.repository_name}")

    def _render_input(self) -> Union[str, Output]:
        return Output.json_dumps(
            {
                "RepositoryName": self.props.repository_name,
                "PolicyDocument": self.policy_document.to_json(),
            }
        )

    def add_to_resource_policy(self, statement: PolicyStatement):
        """
        Add a statement to the repository policy the adopter applies
        """
        self.policy_document.add_statement(statement)

    def export(self) -> AdoptedRepositoryProps:
        return self.props
