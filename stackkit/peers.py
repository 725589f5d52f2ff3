"""
Sources and destinations of security group rules
"""

# std
from abc import ABC, abstractmethod
from typing import NamedTuple, Union

# 3rd
from pulumi import Output


class PeerFields(NamedTuple):
    cidr_block: Union[str, Output, None] = None
    cidr_block_v6: Union[str, Output, None] = None
    group_id: Union[str, Output, None] = None
    self_reference: bool = False


class Peer(ABC):
    """
    Something a rule can allow traffic from (ingress) or to (egress).

    ``unique_id`` names the peer in rule descriptions and resource names.
    ``can_inline_rule`` is False for peers that can only be expressed as a
    standalone rule resource.
    """

    can_inline_rule = True

    @property
    @abstractmethod
    def unique_id(self) -> str:
        pass

    @abstractmethod
    def to_ingress_fields(self) -> PeerFields:
        pass

    @abstractmethod
    def to_egress_fields(self) -> PeerFields:
        pass


class CidrIPv4(Peer):
    def __init__(self, cidr_ip: Union[str, Output]):
        self.cidr_ip = cidr_ip

    @property
    def unique_id(self) -> str:
        return "{IndirectCidr}" if isinstance(self.cidr_ip, Output) else self.cidr_ip

    def to_ingress_fields(self) -> PeerFields:
        return PeerFields(cidr_block=self.cidr_ip)

    def to_egress_fields(self) -> PeerFields:
        return PeerFields(cidr_block=self.cidr_ip)


class AnyIPv4(CidrIPv4):
    def __init__(self):
        super().__init__("0.0.0.0/0")


class CidrIPv6(Peer):
    def __init__(self, cidr_ipv6: Union[str, Output]):
        self.cidr_ipv6 = cidr_ipv6

    @property
    def unique_id(self) -> str:
        return "{IndirectCidr}" if isinstance(self.cidr_ipv6, Output) else self.cidr_ipv6

    def to_ingress_fields(self) -> PeerFields:
        return PeerFields(cidr_block_v6=self.cidr_ipv6)

    def to_egress_fields(self) -> PeerFields:
        return PeerFields(cidr_block_v6=self.cidr_ipv6)


class AnyIPv6(CidrIPv6):
    def __init__(self):
        super().__init__("::/0")
