import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ns import ns

from duallink.config import ScenarioConfig, SegmentConfig
from duallink.monitor import FlowStatsCollector
from duallink.report import FlowRecord
from duallink.topology import build_segments
from duallink.traffic import attach_traffic, enable_logging

logger = logging.getLogger(__name__)


@dataclass
class SegmentRun:
    config: SegmentConfig
    sender: str
    receiver: str
    port: int
    sink_rx_bytes: Optional[int] = None


@dataclass
class ScenarioResult:
    config: ScenarioConfig
    segments: List[SegmentRun] = field(default_factory=list)
    flows: List[FlowRecord] = field(default_factory=list)


def apply_defaults(config: ScenarioConfig):
    ns.Config.SetDefault("ns3::TcpSocket::SegmentSize", ns.UintegerValue(config.segment_size))


def run_scenario(config: ScenarioConfig) -> ScenarioResult:
    """
    Build the segments, attach traffic, run until config.stop_time and
    collect the flow statistics.

    The simulator is destroyed before returning, so calls can follow
    each other in one process.
    """
    for warning in config.validate():
        logger.warning(warning)

    try:
        apply_defaults(config)
        enable_logging(config)

        segments = build_segments(config)
        apps = [attach_traffic(seg, config) for seg in segments]
        collector = FlowStatsCollector()

        logger.info("running %s scenario until %gs", config.transport, config.stop_time)
        ns.Simulator.Stop(ns.Seconds(config.stop_time))
        ns.Simulator.Run()

        result = ScenarioResult(config)
        result.flows = collector.records()
        for a in apps:
            result.segments.append(SegmentRun(
                config=a.segment.config,
                sender=str(a.segment.sender_address),
                receiver=str(a.segment.receiver_address),
                port=a.port,
                sink_rx_bytes=a.sink_rx_bytes(),
            ))
        if config.flowmon_xml:
            collector.serialize(config.flowmon_xml)
    finally:
        ns.Simulator.Destroy()
    return result
