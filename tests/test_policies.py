"""
Unit tests for IAM policy documents.
"""

from stackkit import policies
from stackkit.policies import PolicyDocument, PolicyStatement


def test_lambda_trust_policy():
    """The Lambda trust policy lets the service assume the role."""
    role = policies.get_role("lambda")

    statement = role["Statement"][0]
    assert statement["Action"] == "sts:AssumeRole"
    assert statement["Principal"] == {"Service": "lambda.amazonaws.com"}


def test_statement_to_json():
    """Statements collect actions, resources and principals."""
    statement = (
        PolicyStatement()
        .add_actions("ecr:ListImages", "ecr:BatchDeleteImage")
        .add_resource("arn:aws:ecr:us-east-1:123456789012:repository/web")
        .add_aws_principal("arn:aws:iam::123456789012:root")
        .add_service_principal("codebuild.amazonaws.com")
    )

    assert statement.to_json() == {
        "Effect": "Allow",
        "Action": ["ecr:ListImages", "ecr:BatchDeleteImage"],
        "Resource": ["arn:aws:ecr:us-east-1:123456789012:repository/web"],
        "Principal": {
            "AWS": ["arn:aws:iam::123456789012:root"],
            "Service": ["codebuild.amazonaws.com"],
        },
    }


def test_statement_without_resources():
    """Resource policies may leave out the resource."""
    statement = PolicyStatement("Deny").add_action("sns:Publish")

    assert statement.to_json() == {"Effect": "Deny", "Action": ["sns:Publish"]}


def test_document():
    document = PolicyDocument()
    assert document.is_empty()

    document.add_statement(PolicyStatement().add_action("s3:GetObject"))

    assert not document.is_empty()
    assert document.to_json() == {
        "Version": "2012-10-17",
        "Statement": [{"Effect": "Allow", "Action": ["s3:GetObject"]}],
    }
