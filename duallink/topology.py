import logging
from dataclasses import dataclass

from ns import ns

from duallink.config import SegmentConfig

logger = logging.getLogger(__name__)

# node roles inside a segment container
SENDER = 0
RECEIVER = 1


@dataclass
class Segment:
    config: SegmentConfig
    nodes: object       # ns.NodeContainer
    devices: object     # ns.NetDeviceContainer
    interfaces: object  # ns.Ipv4InterfaceContainer

    @property
    def sender(self):
        return self.nodes.Get(SENDER)

    @property
    def receiver(self):
        return self.nodes.Get(RECEIVER)

    def address(self, role: int):
        return self.interfaces.GetAddress(role)

    @property
    def sender_address(self):
        return self.address(SENDER)

    @property
    def receiver_address(self):
        return self.address(RECEIVER)


def build_segment(seg: SegmentConfig) -> Segment:
    """Two nodes, one point-to-point link, one /24; nothing shared with other segments."""
    nodes = ns.NodeContainer()
    nodes.Create(2)

    pointToPoint = ns.PointToPointHelper()
    pointToPoint.SetDeviceAttribute("DataRate", ns.StringValue(seg.data_rate))
    pointToPoint.SetChannelAttribute("Delay", ns.StringValue(seg.delay))
    devices = pointToPoint.Install(nodes)

    stack = ns.InternetStackHelper()
    stack.Install(nodes)

    address = ns.Ipv4AddressHelper()
    address.SetBase(ns.Ipv4Address(seg.network), ns.Ipv4Mask(seg.mask))
    interfaces = address.Assign(devices)

    logger.info("segment %s: %s/%s, %s, %s", seg.name, seg.network, seg.mask, seg.data_rate, seg.delay)
    return Segment(seg, nodes, devices, interfaces)


def build_segments(config):
    # the address generator is process-wide; forget blocks handed out by earlier runs
    ns.Ipv4AddressGenerator.Reset()
    return [build_segment(seg) for seg in config.segments]
