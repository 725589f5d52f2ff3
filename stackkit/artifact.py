"""
CodePipeline artifacts and the expressions that read from them
"""

# std
import json
from typing import Dict, List, Mapping, Union

# 3rd
from pulumi import Output
from pulumi_aws.codepipeline import PipelineStageActionArgs


class Artifact:
    """
    An output artifact of a pipeline action, other actions can take it as input
    """

    def __init__(self, name: str):
        self.name = name

    def at_path(self, file_name: str) -> "ArtifactPath":
        """
        Return a path to a file within this artifact
        """
        return ArtifactPath(self, file_name)

    @property
    def bucket_name(self) -> Dict:
        """
        Name of the S3 bucket the artifact is stored in
        """
        return artifact_attribute(self, "BucketName")

    @property
    def object_key(self) -> Dict:
        """
        Name of the .zip file CodePipeline generated for the artifact, such as 1ABCyZZ.zip
        """
        return artifact_attribute(self, "ObjectKey")

    @property
    def url(self) -> Dict:
        """
        S3 URL of the artifact
        """
        return artifact_attribute(self, "URL")

    def get_param(self, json_file: str, key_name: str) -> Dict:
        """
        Return an expression for a value inside a JSON file within this artifact
        """
        return artifact_get_param(self, json_file, key_name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Artifact({self.name!r})"


class ArtifactPath:
    """
    A file within an artifact, most commonly a template for a CloudFormation action
    """

    def __init__(self, artifact: Artifact, file_name: str):
        self.artifact = artifact
        self.file_name = file_name

    @property
    def location(self) -> str:
        return f"{self.artifact.name}::{self.file_name}"

    def __str__(self) -> str:
        return self.location


def artifact_attribute(artifact: Artifact, attribute_name: str) -> Dict:
    return {"Fn::GetArtifactAtt": [artifact.name, attribute_name]}


def artifact_get_param(artifact: Artifact, json_file: str, key_name: str) -> Dict:
    return {"Fn::GetParam": [artifact.name, json_file, key_name]}


def parameter_overrides(values: Mapping[str, Union[str, Dict]]) -> str:
    """
    Render CloudFormation parameter overrides, values may be artifact expressions
    """
    return json.dumps(dict(values), sort_keys=True)


# pylint: disable=too-many-arguments
def cloudformation_deploy_action(
    name: str,
    stack_name: str,
    template_path: ArtifactPath,
    input_artifacts: List[Artifact] = None,
    overrides: Mapping[str, Union[str, Dict]] = None,
    role_arn: Union[str, Output] = None,
    run_order: int = None,
) -> PipelineStageActionArgs:
    """
    Build a CloudFormation CREATE_UPDATE action deploying a template out of an artifact
    """
    artifacts = list(input_artifacts or [])
    if template_path.artifact not in artifacts:
        artifacts.insert(0, template_path.artifact)

    configuration = {
        "ActionMode": "CREATE_UPDATE",
        "StackName": stack_name,
        "TemplatePath": template_path.location,
    }
    if overrides:
        configuration["ParameterOverrides"] = parameter_overrides(overrides)
    if role_arn is not None:
        configuration["RoleArn"] = role_arn

    return PipelineStageActionArgs(
        name=name,
        category="Deploy",
        owner="AWS",
        provider="CloudFormation",
        version="1",
        input_artifacts=[str(artifact) for artifact in artifacts],
        configuration=configuration,
        run_order=run_order,
    )
