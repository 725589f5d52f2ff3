"""
SNS topics
"""

# std
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Union

# 3rd
from pulumi import Output, StackReference
from pulumi_aws import sns

# local
from .policies import PolicyDocument, PolicyStatement
from .provider import stack_resource, context_export, lazy


@dataclass(frozen=True)
class TopicImportProps:
    topic_arn: Union[str, Output]
    topic_name: Union[str, Output]

    @classmethod
    def from_stack(cls, stack: StackReference, prefix: str) -> "TopicImportProps":
        """
        Reference a topic exported by another stack under ``<prefix>-topic-arn/-name``
        """
        return cls(
            topic_arn=stack.get_output(f"{prefix}-topic-arn"),
            topic_name=stack.get_output(f"{prefix}-topic-name"),
        )


class TopicBase(ABC):
    """
    Behaviour shared by owned and imported topics
    """

    auto_create_policy = False

    def __init__(self, name: str):
        self.name = name
        self.topic_arn: Union[str, Output, None] = None
        self.topic_name: Union[str, Output, None] = None
        self.policy: Union[PolicyDocument, None] = None
        self.policy_resource: Union[sns.TopicPolicy, None] = None

    def add_to_resource_policy(self, statement: PolicyStatement):
        """
        Add a statement to the topic policy.

        The policy resource is created with the first statement. Imported
        topics don't own their policy, the statement is dropped.
        """
        if not self.auto_create_policy:
            return

        if self.policy is None:
            self.policy = PolicyDocument()
            self.policy_resource = sns.TopicPolicy(
                arn=self.topic_arn,
                policy=lazy(lambda: Output.json_dumps(self.policy.to_json())),
                **stack_resource(f"{self.name}-policy", self._policy_opts(), no_tags=True),
            )

        self.policy.add_statement(statement)

    def grant_publish(self, principal_arn: str):
        """
        Allow an AWS principal to publish to this topic
        """
        self.add_to_resource_policy(
            PolicyStatement()
            .add_action("sns:Publish")
            .add_resource(self.topic_arn)
            .add_aws_principal(principal_arn)
        )

    def _policy_opts(self) -> Union[Dict, None]:
        return None

    @abstractmethod
    def export(self) -> TopicImportProps:
        pass


class Topic(TopicBase):
    """
    A new SNS topic
    """

    auto_create_policy = True

    @staticmethod
    def import_topic(name: str, props: TopicImportProps) -> "ImportedTopic":
        """
        Reference a topic defined elsewhere
        """
        return ImportedTopic(name, props)

    def __init__(
        self,
        name: str,
        display_name: str = None,
        topic_name: str = None,
        tags: Dict[str, str] = None,
        opts: Dict = None,
    ):
        super().__init__(name)
        self.resource = sns.Topic(
            display_name=display_name,
            name=topic_name,
            **stack_resource(name, opts, tags),
        )
        self.topic_arn = self.resource.arn
        self.topic_name = self.resource.name

    def _policy_opts(self) -> Dict:
        return dict(parent=self.resource)

    def export(self) -> TopicImportProps:
        """
        Export this topic as stack outputs
        """
        context_export(f"{self.name}-topic-arn", self.topic_arn)
        context_export(f"{self.name}-topic-name", self.topic_name)
        return TopicImportProps(topic_arn=self.topic_arn, topic_name=self.topic_name)


class ImportedTopic(TopicBase):
    def __init__(self, name: str, props: TopicImportProps):
        super().__init__(name)
        self.props = props
        self.topic_arn = props.topic_arn
        self.topic_name = props.topic_name

    def export(self) -> TopicImportProps:
        return self.props
