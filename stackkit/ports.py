"""
Port ranges a security group rule can match
"""

# std
from abc import ABC, abstractmethod
from typing import NamedTuple, Union

# 3rd
from pulumi import Output

Port = Union[int, Output]


class PortFields(NamedTuple):
    protocol: str
    from_port: Port
    to_port: Port


def _resolved(*ports) -> bool:
    return not any(isinstance(port, Output) for port in ports)


class PortRange(ABC):
    """
    Base class for the protocol/port part of a rule.

    Ports may be Pulumi outputs, they render inline like any other input.
    ``str()`` only shows a placeholder for them since the value is not known
    while the program runs.
    """

    can_inline_rule = True

    @abstractmethod
    def to_rule_fields(self) -> PortFields:
        pass

    @abstractmethod
    def __str__(self) -> str:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"


class TcpPort(PortRange):
    def __init__(self, port: Port):
        self.port = port

    def to_rule_fields(self) -> PortFields:
        return PortFields("tcp", self.port, self.port)

    def __str__(self) -> str:
        return str(self.port) if _resolved(self.port) else "{IndirectPort}"


class TcpPortRange(PortRange):
    def __init__(self, start: Port, end: Port):
        self.start = start
        self.end = end

    def to_rule_fields(self) -> PortFields:
        return PortFields("tcp", self.start, self.end)

    def __str__(self) -> str:
        if not _resolved(self.start, self.end):
            return "{IndirectPortRange}"
        return f"{self.start}-{self.end}"


class TcpAllPorts(PortRange):
    def to_rule_fields(self) -> PortFields:
        return PortFields("tcp", 0, 65535)

    def __str__(self) -> str:
        return "ALL PORTS"


class UdpPort(PortRange):
    def __init__(self, port: Port):
        self.port = port

    def to_rule_fields(self) -> PortFields:
        return PortFields("udp", self.port, self.port)

    def __str__(self) -> str:
        return f"UDP {self.port}" if _resolved(self.port) else "UDP {IndirectPort}"


class UdpPortRange(PortRange):
    def __init__(self, start: Port, end: Port):
        self.start = start
        self.end = end

    def to_rule_fields(self) -> PortFields:
        return PortFields("udp", self.start, self.end)

    def __str__(self) -> str:
        if not _resolved(self.start, self.end):
            return "UDP {IndirectPortRange}"
        return f"UDP {self.start}-{self.end}"


class UdpAllPorts(PortRange):
    def to_rule_fields(self) -> PortFields:
        return PortFields("udp", 0, 65535)

    def __str__(self) -> str:
        return "UDP ALL PORTS"


class IcmpTypeAndCode(PortRange):
    """
    ICMP traffic of one type and code, ports carry the type and code
    """

    def __init__(self, icmp_type: int, code: int):
        self.icmp_type = icmp_type
        self.code = code

    def to_rule_fields(self) -> PortFields:
        return PortFields("icmp", self.icmp_type, self.code)

    def __str__(self) -> str:
        return f"ICMP Type {self.icmp_type} Code {self.code}"


class IcmpType(IcmpTypeAndCode):
    """
    ICMP traffic of one type, any code
    """

    def __init__(self, icmp_type: int):
        super().__init__(icmp_type, -1)

    def __str__(self) -> str:
        return f"ICMP Type {self.icmp_type}"


class IcmpPing(IcmpType):
    def __init__(self):
        super().__init__(8)

    def __str__(self) -> str:
        return "ICMP PING"


class IcmpAllTypes(PortRange):
    def to_rule_fields(self) -> PortFields:
        return PortFields("icmp", -1, -1)

    def __str__(self) -> str:
        return "ALL ICMP"


class AllTraffic(PortRange):
    def to_rule_fields(self) -> PortFields:
        return PortFields("-1", 0, 0)

    def __str__(self) -> str:
        return "ALL TRAFFIC"
