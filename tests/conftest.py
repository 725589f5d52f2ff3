"""
Shared fixtures: Pulumi mocks and a region context that needs no AWS account
"""

from types import SimpleNamespace
from typing import List

import pulumi
import pytest

from stackkit import adopted_repository
from stackkit.provider import set_context, set_account


class StackMocks(pulumi.runtime.Mocks):
    """Record every registered resource and echo its inputs back."""

    def __init__(self):
        self.resources: List[pulumi.runtime.MockResourceArgs] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(args)
        outputs = dict(args.inputs)

        if args.typ == "aws:lambda/invocation:Invocation":
            # the adopter echoes the repository name back
            outputs["result"] = args.inputs["input"]
        if args.typ == "aws:sns/topic:Topic":
            outputs["arn"] = f"arn:aws:sns:us-east-1:123456789012:{args.name}"
            outputs.setdefault("name", args.name)

        return [f"{args.name}_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if args.token == "aws:index/getPartition:getPartition":
            return {"partition": "aws", "dnsSuffix": "amazonaws.com", "id": "aws", "reverseDnsPrefix": "com.amazonaws"}
        return {}

    def registered(self, typ: str) -> List[pulumi.runtime.MockResourceArgs]:
        return [resource for resource in self.resources if resource.typ == typ]


MOCKS = StackMocks()
pulumi.runtime.set_mocks(MOCKS, preview=False)


@pytest.fixture
def mocks():
    """Pulumi mocks with an empty resource log."""
    MOCKS.resources.clear()
    return MOCKS


@pytest.fixture
def region():
    """A region context for account 'test' in us-east-1."""
    context = SimpleNamespace(
        account="test",
        region="us-east-1",
        account_id="123456789012",
        partition="aws",
        role_arn="arn:aws:iam::123456789012:role/OrganizationAccountAccessRole",
        provider=None,
    )
    set_context(context)
    adopted_repository.ADOPTERS.clear()
    yield context
    set_context()
    set_account()
