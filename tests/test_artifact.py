"""
Unit tests for pipeline artifacts.
"""

import json

from stackkit.artifact import Artifact, cloudformation_deploy_action, parameter_overrides


class TestArtifact:
    """Test cases for Artifact and ArtifactPath."""

    def test_path_location(self):
        """Paths render as <artifact>::<file>."""
        path = Artifact("BuildOutput").at_path("template.yaml")

        assert path.location == "BuildOutput::template.yaml"
        assert str(path) == "BuildOutput::template.yaml"

    def test_str_is_name(self):
        assert str(Artifact("Source")) == "Source"

    def test_attributes(self):
        """Artifact attributes are GetArtifactAtt expressions."""
        artifact = Artifact("BuildOutput")

        assert artifact.bucket_name == {"Fn::GetArtifactAtt": ["BuildOutput", "BucketName"]}
        assert artifact.object_key == {"Fn::GetArtifactAtt": ["BuildOutput", "ObjectKey"]}
        assert artifact.url == {"Fn::GetArtifactAtt": ["BuildOutput", "URL"]}

    def test_get_param(self):
        """JSON values inside an artifact are GetParam expressions."""
        param = Artifact("BuildOutput").get_param("outputs.json", "ImageTag")

        assert param == {"Fn::GetParam": ["BuildOutput", "outputs.json", "ImageTag"]}


class TestDeployAction:
    """Test cases for the CloudFormation deploy action."""

    def test_parameter_overrides(self):
        """Overrides render as JSON with expressions kept intact."""
        artifact = Artifact("BuildOutput")
        rendered = json.loads(parameter_overrides({"Bucket": artifact.bucket_name, "Stage": "prod"}))

        assert rendered == {
            "Bucket": {"Fn::GetArtifactAtt": ["BuildOutput", "BucketName"]},
            "Stage": "prod",
        }

    def test_action(self):
        """The template artifact is always an input."""
        source = Artifact("Source")
        build = Artifact("BuildOutput")

        action = cloudformation_deploy_action(
            name="Deploy",
            stack_name="web",
            template_path=build.at_path("template.yaml"),
            input_artifacts=[source],
            overrides={"Key": build.object_key},
        )

        assert action.category == "Deploy"
        assert action.provider == "CloudFormation"
        assert action.input_artifacts == ["BuildOutput", "Source"]
        assert action.configuration["TemplatePath"] == "BuildOutput::template.yaml"
        assert action.configuration["StackName"] == "web"
        assert json.loads(action.configuration["ParameterOverrides"]) == {
            "Key": {"Fn::GetArtifactAtt": ["BuildOutput", "ObjectKey"]}
        }
        assert "RoleArn" not in action.configuration

    def test_action_without_overrides(self):
        """A template already listed as input isn't added twice."""
        build = Artifact("BuildOutput")

        action = cloudformation_deploy_action(
            name="Deploy",
            stack_name="web",
            template_path=build.at_path("template.yaml"),
            input_artifacts=[build],
            role_arn="arn:aws:iam::123456789012:role/deploy",
        )

        assert action.input_artifacts == ["BuildOutput"]
        assert "ParameterOverrides" not in action.configuration
        assert action.configuration["RoleArn"] == "arn:aws:iam::123456789012:role/deploy"
