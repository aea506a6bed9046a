import logging
from dataclasses import dataclass

from ns import ns

logger = logging.getLogger(__name__)

TCP_SOCKET_FACTORY = "ns3::TcpSocketFactory"
ENGINE_LOG_COMPONENTS = ("UdpEchoClientApplication", "UdpEchoServerApplication", "TcpSocketBase")


@dataclass
class SegmentApps:
    segment: object  # topology.Segment
    server_apps: object
    client_apps: object
    port: int
    packet_sink: bool = False

    def sink_rx_bytes(self):
        """Bytes delivered to the PacketSink; None for echo servers."""
        if not self.packet_sink:
            return None
        return int(self.server_apps.Get(0).GetTotalRx())


def schedule(apps, start: float, stop: float):
    apps.Start(ns.Seconds(start))
    apps.Stop(ns.Seconds(stop))


def attach_udp_echo(segment, config) -> SegmentApps:
    port = segment.config.udp_port

    echoServer = ns.UdpEchoServerHelper(port)
    serverApps = echoServer.Install(segment.receiver)
    schedule(serverApps, config.sink_start, config.app_stop)

    echoClient = ns.UdpEchoClientHelper(segment.receiver_address.ConvertTo(), port)
    echoClient.SetAttribute("MaxPackets", ns.UintegerValue(config.max_packets))
    echoClient.SetAttribute("Interval", ns.TimeValue(ns.Seconds(config.interval)))
    echoClient.SetAttribute("PacketSize", ns.UintegerValue(config.packet_size))
    clientApps = echoClient.Install(segment.sender)
    schedule(clientApps, config.sender_start, config.app_stop)

    logger.info("segment %s: udp echo %d x %dB every %gs to port %d",
                segment.config.name, config.max_packets, config.packet_size, config.interval, port)
    return SegmentApps(segment, serverApps, clientApps, port)


def attach_tcp_bulk(segment, config) -> SegmentApps:
    port = segment.config.tcp_port
    sinkAddress = ns.InetSocketAddress(segment.receiver_address, port).ConvertTo()

    sinkHelper = ns.PacketSinkHelper(TCP_SOCKET_FACTORY, sinkAddress)
    serverApps = sinkHelper.Install(segment.receiver)
    schedule(serverApps, config.sink_start, config.app_stop)

    bulk = ns.BulkSendHelper(TCP_SOCKET_FACTORY, sinkAddress)
    bulk.SetAttribute("MaxBytes", ns.UintegerValue(config.max_bytes))
    bulk.SetAttribute("SendSize", ns.UintegerValue(config.packet_size))
    clientApps = bulk.Install(segment.sender)
    schedule(clientApps, config.sender_start, config.app_stop)

    logger.info("segment %s: tcp bulk send of %d bytes to port %d",
                segment.config.name, config.max_bytes, port)
    return SegmentApps(segment, serverApps, clientApps, port, packet_sink=True)


def attach_traffic(segment, config) -> SegmentApps:
    if config.use_tcp:
        return attach_tcp_bulk(segment, config)
    return attach_udp_echo(segment, config)


def log_components(config):
    # echo applications always log
    components = ["UdpEchoClientApplication", "UdpEchoServerApplication"]
    if config.verbose and config.use_tcp:
        components.append("TcpSocketBase")
    return components


def enable_logging(config):
    # log levels are process-wide; switch off what this run does not ask for
    enabled = log_components(config)
    for name in ENGINE_LOG_COMPONENTS:
        if name not in enabled:
            ns.LogComponentDisable(name, ns.LOG_LEVEL_ALL)
    for name in enabled:
        ns.LogComponentEnable(name, ns.LOG_LEVEL_INFO)
