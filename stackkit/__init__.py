from .context import Account, Region, set_profile, set_session
from .exceptions import ConfigurationError, ContextNotSet
from .peers import Peer, CidrIPv4, AnyIPv4, CidrIPv6, AnyIPv6
from .ports import (
    PortRange,
    TcpPort,
    TcpPortRange,
    TcpAllPorts,
    UdpPort,
    UdpPortRange,
    UdpAllPorts,
    IcmpTypeAndCode,
    IcmpType,
    IcmpPing,
    IcmpAllTypes,
    AllTraffic,
)
from .security import (
    Rule,
    RuleSet,
    EgressState,
    ALLOW_ALL,
    MATCH_NO_TRAFFIC,
    SecurityGroup,
    SecurityGroupBase,
    ImportedSecurityGroup,
    SecurityGroupImportProps,
)
from .artifact import Artifact, ArtifactPath, cloudformation_deploy_action, parameter_overrides
from .adopted_repository import AdoptedRepository, AdoptedRepositoryProps
from .topic import Topic, ImportedTopic, TopicImportProps
from .policies import PolicyDocument, PolicyStatement
