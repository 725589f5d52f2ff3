"""
Handle region switching for the constructs
"""

# 3rd
from pulumi import ResourceOptions
import pulumi_aws as aws

# local
from ..exceptions import ContextNotSet
from ..provider import set_context, get_account
from .session import get_session, get_profile


PROVIDERS = {}


class Region:
    def __init__(self, region: str):
        account = get_account()

        # fail if the account isn't set
        if account is None:
            raise ContextNotSet("No Account context set")

        # instance variables
        self.region = region
        self.account = account.account
        self.account_id = account.account_id
        self.role_arn = account.role_arn
        self.partition = account.partition

        args = dict(profile=get_profile(), allowed_account_ids=[self.account_id], region=region)
        if self.account != "root":
            args["assume_role"] = aws.ProviderAssumeRoleArgs(
                role_arn=self.role_arn, session_name=get_session()
            )

        # one provider per account/region, re-entering reuses it
        tag = f"{self.account}-{self.region}-provider"
        if tag not in PROVIDERS:
            PROVIDERS[tag] = aws.Provider(
                tag,
                args=aws.ProviderArgs(**args),
                opts=ResourceOptions(parent=account.account_provider),
            )

        self.provider = PROVIDERS[tag]

    def __enter__(self):
        # set region context
        set_context(self)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        # set region context
        set_context()
