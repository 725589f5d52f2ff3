# std
import json
import os
from typing import Dict, List, Union

# 3rd
from pulumi import Output


LAMBDA_BASIC_EXECUTION = "arn:aws:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole"


def get_role(name: str) -> Dict:
    """
    Get a trust policy by name
    """
    role = os.path.abspath(f"{__file__}/../custom_roles/{name}.json")
    with open(role, "r", encoding="utf-8") as role_file:
        return json.loads(role_file.read())


class PolicyStatement:
    """
    A single IAM policy statement, built up fluently
    """

    def __init__(self, effect: str = "Allow"):
        self.effect = effect
        self.actions: List[str] = []
        self.resources: List[Union[str, Output]] = []
        self.principals: Dict[str, List[str]] = {}

    def add_action(self, action: str) -> "PolicyStatement":
        self.actions.append(action)
        return self

    def add_actions(self, *actions: str) -> "PolicyStatement":
        for action in actions:
            self.add_action(action)
        return self

    def add_resource(self, arn: Union[str, Output]) -> "PolicyStatement":
        self.resources.append(arn)
        return self

    def add_resources(self, *arns: Union[str, Output]) -> "PolicyStatement":
        for arn in arns:
            self.add_resource(arn)
        return self

    def add_aws_principal(self, arn: str) -> "PolicyStatement":
        self.principals.setdefault("AWS", []).append(arn)
        return self

    def add_service_principal(self, service: str) -> "PolicyStatement":
        self.principals.setdefault("Service", []).append(service)
        return self

    def to_json(self) -> Dict:
        statement = {"Effect": self.effect, "Action": list(self.actions)}
        if self.resources:
            statement["Resource"] = list(self.resources)
        if self.principals:
            statement["Principal"] = {key: list(values) for key, values in self.principals.items()}
        return statement


class PolicyDocument:
    def __init__(self):
        self.statements: List[PolicyStatement] = []

    def add_statement(self, statement: PolicyStatement) -> "PolicyDocument":
        self.statements.append(statement)
        return self

    def is_empty(self) -> bool:
        return not self.statements

    def to_json(self) -> Dict:
        return {
            "Version": "2012-10-17",
            "Statement": [statement.to_json() for statement in self.statements],
        }
