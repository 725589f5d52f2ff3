"""
Unit tests for the ECR adoption Lambda handler.
"""

import json
from unittest.mock import patch

import boto3
import pytest
from botocore.stub import Stubber

from stackkit.adopt_repository import handler


@pytest.fixture
def client():
    return boto3.client(
        "ecr",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def document():
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Action": ["ecr:BatchGetImage"],
                "Principal": {"Service": ["codebuild.amazonaws.com"]},
            }
        ],
    }


class TestAdopt:
    """Test cases for the adopt entrypoint."""

    def test_create_sets_policy(self, client, document):
        """Creating applies the policy document."""
        with Stubber(client) as stubber:
            stubber.add_response(
                "set_repository_policy",
                {},
                {"repositoryName": "web-images", "policyText": json.dumps(document)},
            )

            result = handler.adopt(
                client,
                {"RepositoryName": "web-images", "PolicyDocument": document, "tf": {"action": "create"}},
            )

            stubber.assert_no_pending_responses()

        assert result == {"RepositoryName": "web-images"}

    def test_update_without_statements_removes_policy(self, client):
        """An empty document removes a previously set policy."""
        with Stubber(client) as stubber:
            stubber.add_response("delete_repository_policy", {}, {"repositoryName": "web-images"})

            handler.adopt(
                client,
                {
                    "RepositoryName": "web-images",
                    "PolicyDocument": {"Version": "2012-10-17", "Statement": []},
                    "tf": {"action": "update"},
                },
            )

            stubber.assert_no_pending_responses()

    def test_missing_policy_is_fine(self, client):
        """Removing a policy that isn't there is not an error."""
        with Stubber(client) as stubber:
            stubber.add_client_error(
                "delete_repository_policy",
                service_error_code="RepositoryPolicyNotFoundException",
            )

            result = handler.adopt(client, {"RepositoryName": "web-images"})

        assert result == {"RepositoryName": "web-images"}

    def test_delete_removes_images_in_batches(self, client):
        """Deleting removes every image, at most 100 per call."""
        image_ids = [{"imageDigest": f"sha256:{index:064x}"} for index in range(150)]

        with Stubber(client) as stubber:
            stubber.add_response("list_images", {"imageIds": image_ids}, {"repositoryName": "web-images"})
            stubber.add_response(
                "batch_delete_image",
                {"imageIds": image_ids[:100], "failures": []},
                {"repositoryName": "web-images", "imageIds": image_ids[:100]},
            )
            stubber.add_response(
                "batch_delete_image",
                {"imageIds": image_ids[100:], "failures": []},
                {"repositoryName": "web-images", "imageIds": image_ids[100:]},
            )
            stubber.add_response("delete_repository", {}, {"repositoryName": "web-images"})

            handler.adopt(client, {"RepositoryName": "web-images", "tf": {"action": "delete"}})

            stubber.assert_no_pending_responses()

    def test_delete_empty_repository(self, client):
        """An empty repository is deleted without any batch deletes."""
        with Stubber(client) as stubber:
            stubber.add_response("list_images", {}, {"repositoryName": "web-images"})
            stubber.add_response("delete_repository", {}, {"repositoryName": "web-images"})

            handler.adopt(client, {"RepositoryName": "web-images", "tf": {"action": "delete"}})

            stubber.assert_no_pending_responses()

    def test_delete_missing_repository(self, client):
        """A repository that is already gone counts as deleted."""
        with Stubber(client) as stubber:
            stubber.add_client_error("list_images", service_error_code="RepositoryNotFoundException")

            result = handler.adopt(client, {"RepositoryName": "web-images", "tf": {"action": "delete"}})

        assert result == {"RepositoryName": "web-images"}


def test_handler_uses_ecr_client():
    """The Lambda entrypoint builds an ECR client and adopts."""
    with patch.object(handler.boto3, "client") as make_client, patch.object(handler, "adopt") as adopt:
        adopt.return_value = {"RepositoryName": "web-images"}

        result = handler.handler({"RepositoryName": "web-images"}, None)

    make_client.assert_called_once_with("ecr")
    adopt.assert_called_once_with(make_client.return_value, {"RepositoryName": "web-images"})
    assert result == {"RepositoryName": "web-images"}
