"""
Scenario configuration.

Two isolated point-to-point segments:

        10.1.1.0 Network          10.1.2.0 Network
      n0 (client A)              n2 (client B)
           |  5Mbps, 2ms              |  5Mbps, 2ms
      n1 (server A)              n3 (server B)

Everything that the scenario used to set as a process-wide default
(TCP segment size) travels in ScenarioConfig and is applied by the
driver before any node is created.
"""
import ipaddress
from dataclasses import dataclass, field
from typing import List, Optional

from duallink.errors import ConfigurationError


@dataclass
class SegmentConfig:
    name: str
    network: str
    mask: str = "255.255.255.0"
    data_rate: str = "5Mbps"
    delay: str = "2ms"
    udp_port: int = 9
    tcp_port: int = 8080

    @property
    def block(self) -> ipaddress.IPv4Network:
        return ipaddress.IPv4Network(f"{self.network}/{self.mask}")


def default_segments() -> List[SegmentConfig]:
    return [
        SegmentConfig("A", "10.1.1.0", udp_port=9, tcp_port=8080),
        SegmentConfig("B", "10.1.2.0", udp_port=10, tcp_port=8081),
    ]


@dataclass
class ScenarioConfig:
    use_tcp: bool = True
    verbose: bool = False
    max_packets: int = 10
    packet_size: int = 1024     # bytes, also the BulkSend SendSize
    interval: float = 0.5       # seconds between echo requests
    segment_size: int = 1024    # ns3::TcpSocket::SegmentSize
    sink_start: float = 1.0
    sender_start: float = 2.0
    app_stop: float = 12.0
    stop_time: float = 10.0     # global simulation horizon
    segments: List[SegmentConfig] = field(default_factory=default_segments)
    flowmon_xml: Optional[str] = None

    @property
    def transport(self) -> str:
        return "TCP" if self.use_tcp else "UDP"

    @property
    def max_bytes(self) -> int:
        return self.max_packets * self.packet_size

    def validate(self) -> List[str]:
        """
        Check the invariants of the scenario.

        Raises ConfigurationError on a broken invariant and returns a
        list of warnings for settings that are legal but suspicious,
        e.g. applications scheduled to stop after the simulation ends.
        """
        if not self.segments:
            raise ConfigurationError("at least one segment is required")
        if self.max_packets < 1:
            raise ConfigurationError(f"max_packets must be positive, got {self.max_packets}")
        if self.packet_size < 1:
            raise ConfigurationError(f"packet_size must be positive, got {self.packet_size}")
        if self.segment_size < 1:
            raise ConfigurationError(f"segment_size must be positive, got {self.segment_size}")
        if self.stop_time <= 0.0:
            raise ConfigurationError(f"stop_time must be positive, got {self.stop_time}")
        if self.sink_start > self.sender_start:
            raise ConfigurationError(
                f"sinks start at {self.sink_start}s, after their senders at {self.sender_start}s")

        seen_names = set()
        ports = set()
        for i, seg in enumerate(self.segments):
            if seg.name in seen_names:
                raise ConfigurationError(f"duplicate segment name {seg.name!r}")
            seen_names.add(seg.name)
            try:
                block = seg.block
            except ValueError as err:
                raise ConfigurationError(f"segment {seg.name}: bad address block: {err}") from err
            if block.num_addresses < 4:
                raise ConfigurationError(f"segment {seg.name}: block {block} cannot hold two hosts")
            for other in self.segments[:i]:
                if block.overlaps(other.block):
                    raise ConfigurationError(
                        f"segments {other.name} and {seg.name} overlap ({other.block} / {block})")
            port = seg.tcp_port if self.use_tcp else seg.udp_port
            if port in ports:
                raise ConfigurationError(f"segment {seg.name}: port {port} already in use")
            ports.add(port)

        warnings = []
        if self.app_stop > self.stop_time:
            warnings.append(
                f"applications stop at {self.app_stop}s but the simulation stops at "
                f"{self.stop_time}s; traffic is cut off by the horizon")
        if not self.use_tcp:
            last_send = self.sender_start + (self.max_packets - 1) * self.interval
            if last_send >= min(self.app_stop, self.stop_time):
                warnings.append(
                    f"last echo request is due at {last_send}s, not before the end of the run")
        return warnings
