"""
Handle account switching for the constructs
"""

# std
from typing import Union

# 3rd
import boto3
from pulumi import InvokeOptions, log
import pulumi_aws as aws

# local
from ..provider import set_account
from .session import get_session, get_profile


def get_current_account_id() -> str:
    """
    Resolve the account id of the calling credentials
    """
    client = boto3.Session(profile_name=get_profile()).client("sts")
    return client.get_caller_identity()["Account"]


class Account:
    ROOT_ACCOUNT = None

    @staticmethod
    def set_root_account(account: str):
        Account.ROOT_ACCOUNT = account

    def __init__(
        self,
        account: str,
        account_id: Union[str, None] = None,
        admin_role: str = "OrganizationAccountAccessRole",
    ):
        # instance variables
        self.account = "root" if account == Account.ROOT_ACCOUNT else account
        self.account_id = account_id or get_current_account_id()
        self.role_arn = f"arn:aws:iam::{self.account_id}:role/{admin_role}"

        args = dict(profile=get_profile(), allowed_account_ids=[self.account_id])
        if self.account != "root":
            args["assume_role"] = aws.ProviderAssumeRoleArgs(
                role_arn=self.role_arn,
                session_name=get_session(),
            )

        self.account_provider = aws.Provider(
            f"{self.account}-provider",
            aws.ProviderArgs(**args),
        )
        self.partition = aws.get_partition(
            opts=InvokeOptions(provider=self.account_provider)
        ).partition
        log.info(f"Account: {self.account} ({self.account_id})")

    def __enter__(self):
        # set account context
        set_account(self)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        # set account context
        set_account()
