"""
Security groups and the rule sets they render
"""

# std
import re
from abc import abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

# 3rd
from pulumi import Output, StackReference, log
from pulumi_aws import ec2

# local
from .exceptions import ConfigurationError
from .peers import Peer, PeerFields
from .ports import PortRange, PortFields
from .provider import stack_resource, context_prefix, context_export, lazy


@dataclass(frozen=True)
class Rule:
    """
    A single ingress or egress rule.

    Two rules that only differ in their description are the same rule, that
    is also how EC2 compares them.
    """

    protocol: str
    from_port: Union[int, Output]
    to_port: Union[int, Output]
    cidr_block: Union[str, Output, None] = None
    cidr_block_v6: Union[str, Output, None] = None
    peer_group_id: Union[str, Output, None] = None
    self_reference: bool = False
    description: Optional[str] = field(default=None, compare=False)

    def is_all_traffic(self) -> bool:
        return self.cidr_block == "0.0.0.0/0" and self.protocol == "-1"

    def _inline_args(self) -> Dict:
        return dict(
            protocol=self.protocol,
            from_port=self.from_port,
            to_port=self.to_port,
            cidr_blocks=[self.cidr_block] if self.cidr_block else None,
            ipv6_cidr_blocks=[self.cidr_block_v6] if self.cidr_block_v6 else None,
            security_groups=[self.peer_group_id] if self.peer_group_id else None,
            self=self.self_reference or None,
            description=self.description,
        )

    def to_ingress_args(self) -> ec2.SecurityGroupIngressArgs:
        return ec2.SecurityGroupIngressArgs(**self._inline_args())

    def to_egress_args(self) -> ec2.SecurityGroupEgressArgs:
        return ec2.SecurityGroupEgressArgs(**self._inline_args())

    def to_standalone_args(self) -> Dict:
        """
        Keyword arguments for a standalone ``ec2.SecurityGroupRule``
        """
        return dict(
            protocol=self.protocol,
            from_port=self.from_port,
            to_port=self.to_port,
            cidr_blocks=[self.cidr_block] if self.cidr_block else None,
            ipv6_cidr_blocks=[self.cidr_block_v6] if self.cidr_block_v6 else None,
            source_security_group_id=self.peer_group_id,
            self=self.self_reference or None,
            description=self.description,
        )


def build_rule(peer: PeerFields, port: PortFields, description: str = None) -> Rule:
    """
    Combine the peer and port projections into a rule
    """
    return Rule(
        protocol=port.protocol,
        from_port=port.from_port,
        to_port=port.to_port,
        cidr_block=peer.cidr_block,
        cidr_block_v6=peer.cidr_block_v6,
        peer_group_id=peer.group_id,
        self_reference=peer.self_reference,
        description=description,
    )


# No machine can ever have the 255.255.255.255 address, and ICMP type 252
# code 86 doesn't exist either.
MATCH_NO_TRAFFIC = Rule(
    cidr_block="255.255.255.255/32",
    protocol="icmp",
    from_port=252,
    to_port=86,
    description="Disallow all traffic",
)

ALLOW_ALL = Rule(
    cidr_block="0.0.0.0/0",
    protocol="-1",
    from_port=0,
    to_port=0,
    description="Allow all outbound traffic by default",
)


class EgressState(Enum):
    ALL_OUTBOUND_DEFAULT = "all-outbound-default"
    DENY_BY_DEFAULT = "deny-by-default"
    RULES_ADDED = "rules-added"


def _append_unique(rules: List[Rule], rule: Rule) -> bool:
    if rule in rules:
        return False
    rules.append(rule)
    return True


class RuleSet:
    """
    Inline ingress and egress rules of one security group.

    EC2 allows all outbound traffic unless a group carries at least one
    egress rule, so the egress side always renders something:

    - ``ALL_OUTBOUND_DEFAULT``: only ``ALLOW_ALL``, further egress rules are
      ignored since it already covers them.
    - ``DENY_BY_DEFAULT``: only ``MATCH_NO_TRAFFIC``, which exists to switch
      the implicit rule off.
    - ``RULES_ADDED``: the explicit egress rules. There is no way back.
    """

    def __init__(self, allow_all_outbound: bool = True):
        self.state: Union[EgressState, None] = None
        self._ingress: List[Rule] = []
        self._egress: List[Rule] = []
        self.initialize(allow_all_outbound)

    def initialize(self, allow_all_outbound: bool):
        """
        Pick the default egress posture, only ever called from __init__
        """
        if allow_all_outbound:
            self.state = EgressState.ALL_OUTBOUND_DEFAULT
        else:
            self.state = EgressState.DENY_BY_DEFAULT

    @property
    def allow_all_outbound(self) -> bool:
        return self.state is EgressState.ALL_OUTBOUND_DEFAULT

    @property
    def ingress_rules(self) -> Tuple[Rule, ...]:
        return tuple(self._ingress)

    @property
    def egress_rules(self) -> Tuple[Rule, ...]:
        if self.state is EgressState.ALL_OUTBOUND_DEFAULT:
            return (ALLOW_ALL,)
        if self.state is EgressState.DENY_BY_DEFAULT:
            return (MATCH_NO_TRAFFIC,)
        return tuple(self._egress)

    def add_ingress(self, peer: Peer, port: PortRange, description: str = None) -> bool:
        """
        Add an ingress rule, returns False if an equal rule is already there
        """
        if description is None:
            description = f"from {peer.unique_id}:{port}"

        rule = build_rule(peer.to_ingress_fields(), port.to_rule_fields(), description)
        return _append_unique(self._ingress, rule)

    def add_egress(self, peer: Peer, port: PortRange, description: str = None) -> bool:
        """
        Add an egress rule, returns False if it was ignored or already there
        """
        if self.state is EgressState.ALL_OUTBOUND_DEFAULT:
            return False

        if description is None:
            description = f"to {peer.unique_id}:{port}"

        rule = build_rule(peer.to_egress_fields(), port.to_rule_fields(), description)
        if rule.is_all_traffic():
            # it would silently disappear again as soon as any other rule
            # got added, so it has to come from allow_all_outbound
            raise ConfigurationError(
                'Cannot add an "all traffic" egress rule in this way; '
                "set allow_all_outbound=True on the SecurityGroup instead."
            )

        self.state = EgressState.RULES_ADDED
        return _append_unique(self._egress, rule)


@dataclass(frozen=True)
class SecurityGroupImportProps:
    security_group_id: Union[str, Output]

    @classmethod
    def from_stack(cls, stack: StackReference, output_name: str) -> "SecurityGroupImportProps":
        """
        Reference a security group exported by another stack
        """
        return cls(security_group_id=stack.get_output(output_name))


def _rule_resource_name(rule_id: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "-", rule_id).strip("-").lower()

class SecurityGroupBase(Peer):
    """
    Behaviour shared by owned and imported security groups: a group is a
    peer of other groups' rules through its id.
    """

    def __init__(self, name: str):
        self.name = name
        self.security_group_id: Union[str, Output, None] = None

    @property
    def unique_id(self) -> str:
        return self.name

    def to_ingress_fields(self) -> PeerFields:
        return PeerFields(group_id=self.security_group_id)

    def to_egress_fields(self) -> PeerFields:
        return PeerFields(group_id=self.security_group_id)

    @abstractmethod
    def add_ingress_rule(self, peer: Peer, port: PortRange, description: str = None):
        pass

    @abstractmethod
    def add_egress_rule(self, peer: Peer, port: PortRange, description: str = None):
        pass

    @abstractmethod
    def export(self) -> SecurityGroupImportProps:
        pass


class _SelfReference(Peer):
    """
    The owning group as the peer of its own rule, rendered as ``self = true``
    since the group can't list its own id before it exists.
    """

    def __init__(self, group: SecurityGroupBase):
        self.group = group

    @property
    def unique_id(self) -> str:
        return self.group.unique_id

    def to_ingress_fields(self) -> PeerFields:
        return PeerFields(self_reference=True)

    def to_egress_fields(self) -> PeerFields:
        return PeerFields(self_reference=True)


class SecurityGroup(SecurityGroupBase):
    """
    A security group owned by this program.

    Every rule is rendered inline on the ``ec2.SecurityGroup`` through its
    ``RuleSet``, other groups included (``security_groups = [id]``). The
    provider overwrites inline rules with standalone ``SecurityGroupRule``
    resources and the other way round, so a managed group never gets both.
    """

    @staticmethod
    def import_group(name: str, props: SecurityGroupImportProps) -> "ImportedSecurityGroup":
        """
        Reference a security group that lives outside of this program
        """
        return ImportedSecurityGroup(name, props)

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        name: str,
        vpc_id: Union[str, Output],
        description: str = None,
        group_name: str = None,
        allow_all_outbound: bool = True,
        tags: Dict[str, str] = None,
        opts: Dict = None,
    ):
        super().__init__(name)
        self.rule_set = RuleSet(allow_all_outbound)
        # managed groups whose ids this group's inline rules depend on
        self.referenced_groups: List["SecurityGroup"] = []

        self.resource = ec2.SecurityGroup(
            vpc_id=vpc_id,
            name=group_name,
            description=description or f"{context_prefix()}-{name}",
            ingress=lazy(lambda: [rule.to_ingress_args() for rule in self.rule_set.ingress_rules]),
            egress=lazy(lambda: [rule.to_egress_args() for rule in self.rule_set.egress_rules]),
            **stack_resource(name, opts, tags),
        )

        self.security_group_id = self.resource.id
        self.group_name = self.resource.name
        self.vpc_id = self.resource.vpc_id

    @property
    def allow_all_outbound(self) -> bool:
        return self.rule_set.allow_all_outbound

    @property
    def ingress_rules(self) -> Tuple[Rule, ...]:
        return self.rule_set.ingress_rules

    @property
    def egress_rules(self) -> Tuple[Rule, ...]:
        return self.rule_set.egress_rules

    def references(self, group: "SecurityGroup") -> bool:
        """
        True if this group's inline rules depend on ``group``, directly or
        through other managed groups
        """
        seen = set()
        pending = list(self.referenced_groups)
        while pending:
            current = pending.pop()
            if current is group:
                return True
            if id(current) in seen:
                continue
            seen.add(id(current))
            pending.extend(current.referenced_groups)
        return False

    def _inline_peer(self, peer: Peer, port: PortRange) -> Peer:
        if not peer.can_inline_rule or not port.can_inline_rule:
            raise ConfigurationError(
                f"Rule {peer.unique_id}:{port} can't be inlined on security group '{self.name}'; "
                "add it to an imported reference of a group this program doesn't own."
            )

        if peer is self:
            return _SelfReference(self)

        if isinstance(peer, SecurityGroup) and peer.references(self):
            raise ConfigurationError(
                f"Security groups '{self.name}' and '{peer.name}' would reference each other inline, "
                "neither could be created before the other."
            )

        return peer

    def _record_reference(self, peer: Peer):
        if isinstance(peer, SecurityGroup) and peer not in self.referenced_groups:
            self.referenced_groups.append(peer)

    def add_ingress_rule(self, peer: Peer, port: PortRange, description: str = None):
        peer = self._inline_peer(peer, port)
        if not self.rule_set.add_ingress(peer, port, description):
            log.debug(f"{self.name}: skipping duplicate ingress rule from {peer.unique_id}:{port}")
        self._record_reference(peer)

    def add_egress_rule(self, peer: Peer, port: PortRange, description: str = None):
        if self.allow_all_outbound:
            # the single allow-all rule already covers it
            log.debug(f"{self.name}: ignoring egress to {peer.unique_id}:{port}, all outbound is allowed")
            return

        peer = self._inline_peer(peer, port)
        if not self.rule_set.add_egress(peer, port, description):
            log.debug(f"{self.name}: skipping duplicate egress rule to {peer.unique_id}:{port}")
        self._record_reference(peer)

    def export(self) -> SecurityGroupImportProps:
        """
        Export the group id as a stack output for use in other stacks
        """
        context_export(f"{self.name}-security-group-id", self.security_group_id)
        return SecurityGroupImportProps(security_group_id=self.security_group_id)


class ImportedSecurityGroup(SecurityGroupBase):
    """
    A security group known only by its id.

    The group's own definition lives elsewhere, so rules added here become
    standalone ``ec2.SecurityGroupRule`` resources, one per distinct peer and
    port.
    """

    def __init__(self, name: str, props: SecurityGroupImportProps):
        super().__init__(name)
        self.props = props
        self.security_group_id = props.security_group_id
        self.standalone_rules: Dict[str, ec2.SecurityGroupRule] = {}

    def add_ingress_rule(self, peer: Peer, port: PortRange, description: str = None):
        rule_id = f"from {peer.unique_id}:{port}"
        rule = build_rule(peer.to_ingress_fields(), port.to_rule_fields(), description or rule_id)
        self._add_standalone_rule("ingress", rule_id, rule)

    def add_egress_rule(self, peer: Peer, port: PortRange, description: str = None):
        rule_id = f"to {peer.unique_id}:{port}"
        rule = build_rule(peer.to_egress_fields(), port.to_rule_fields(), description or rule_id)
        self._add_standalone_rule("egress", rule_id, rule)

    def _add_standalone_rule(self, direction: str, rule_id: str, rule: Rule):
        # skip duplicates
        if rule_id in self.standalone_rules:
            log.debug(f"{self.name}: skipping duplicate {direction} rule '{rule_id}'")
            return

        self.standalone_rules[rule_id] = ec2.SecurityGroupRule(
            type=direction,
            security_group_id=self.security_group_id,
            **rule.to_standalone_args(),
            **stack_resource(f"{self.name}-{_rule_resource_name(rule_id)}", no_tags=True),
        )

    def export(self) -> SecurityGroupImportProps:
        return self.props
