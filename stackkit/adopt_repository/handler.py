"""
Lambda handler adopting an ECR repository into a stack.

Invoked through a CRUD scoped ``aws.lambda_.Invocation``, which adds the
lifecycle action under the ``tf`` key of the event.
"""

# std
import json
import logging

# 3rd
import boto3

logger = logging.getLogger()
logger.setLevel(logging.INFO)

# BatchDeleteImage accepts at most 100 image ids per call
BATCH_SIZE = 100


def apply_policy(client, repository_name: str, policy_document: dict):
    """
    Set the repository policy, or remove it when there are no statements
    """
    if policy_document and policy_document.get("Statement"):
        logger.info("Setting repository policy on %s", repository_name)
        client.set_repository_policy(
            repositoryName=repository_name,
            policyText=json.dumps(policy_document),
        )
        return

    try:
        client.delete_repository_policy(repositoryName=repository_name)
        logger.info("Removed repository policy from %s", repository_name)
    except client.exceptions.RepositoryPolicyNotFoundException:
        pass


def delete_repository(client, repository_name: str):
    """
    Delete every image in the repository, then the repository itself
    """
    try:
        image_ids = []
        for page in client.get_paginator("list_images").paginate(repositoryName=repository_name):
            image_ids.extend(page.get("imageIds", []))

        for start in range(0, len(image_ids), BATCH_SIZE):
            client.batch_delete_image(
                repositoryName=repository_name,
                imageIds=image_ids[start:start + BATCH_SIZE],
            )

        client.delete_repository(repositoryName=repository_name)
        logger.info("Deleted repository %s and %d images", repository_name, len(image_ids))
    except client.exceptions.RepositoryNotFoundException:
        logger.info("Repository %s is already gone", repository_name)


def adopt(client, event: dict) -> dict:
    action = event.get("tf", {}).get("action", "create")
    repository_name = event["RepositoryName"]

    if action == "delete":
        delete_repository(client, repository_name)
    else:
        apply_policy(client, repository_name, event.get("PolicyDocument"))

    return {"RepositoryName": repository_name}


def handler(event, context):  # pylint: disable=unused-argument
    logger.info("Event: %s", json.dumps(event))
    return adopt(boto3.client("ecr"), event)
