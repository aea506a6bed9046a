import ipaddress
import logging

import pytest

pytest.importorskip("ns")

from duallink.config import ScenarioConfig  # noqa: E402
from duallink import traffic  # noqa: E402
from duallink.scenario import run_scenario  # noqa: E402

SENDERS = {"A": "10.1.1.1", "B": "10.1.2.1"}
RECEIVERS = {"A": "10.1.1.2", "B": "10.1.2.2"}


def flows_from(result, source):
    return [f for f in result.flows if f.source == source]


def segment_named(result, name):
    return next(s for s in result.segments if s.config.name == name)


@pytest.fixture(scope="module")
def udp_result():
    return run_scenario(ScenarioConfig(use_tcp=False))


@pytest.fixture(scope="module")
def tcp_result():
    return run_scenario(ScenarioConfig(use_tcp=True))


def test_udp_segments_addressed_from_their_blocks(udp_result):
    assert [s.config.name for s in udp_result.segments] == ["A", "B"]
    for seg in udp_result.segments:
        assert seg.sender == SENDERS[seg.config.name]
        assert seg.receiver == RECEIVERS[seg.config.name]
        assert ipaddress.IPv4Address(seg.sender) in seg.config.block
        assert seg.sink_rx_bytes is None
    assert [s.port for s in udp_result.segments] == [9, 10]


def test_udp_echo_requests_all_answered(udp_result):
    for name in ("A", "B"):
        requests = flows_from(udp_result, SENDERS[name])
        assert len(requests) == 1
        flow = requests[0]
        assert flow.destination == RECEIVERS[name]
        assert flow.protocol_name == "UDP"
        assert flow.destination_port == segment_named(udp_result, name).port
        assert flow.tx_packets == 10
        assert flow.rx_packets == 10
        assert flow.lost_packets == 0

        replies = flows_from(udp_result, RECEIVERS[name])
        assert len(replies) == 1
        assert replies[0].rx_packets == 10


def test_flows_stay_inside_their_segment(udp_result):
    assert len(udp_result.flows) == 4
    for flow in udp_result.flows:
        src = ipaddress.IPv4Address(flow.source)
        dst = ipaddress.IPv4Address(flow.destination)
        blocks = [s.config.block for s in udp_result.segments if src in s.config.block]
        assert len(blocks) == 1
        assert dst in blocks[0]


def test_udp_throughput_and_delay_are_finite(udp_result):
    for flow in udp_result.flows:
        assert flow.rx_packets > 0
        assert 0.0 < flow.throughput_kbps() < float("inf")
        # 1052 byte frames over 5Mbps plus 2ms propagation
        assert 0.002 < flow.mean_delay() < 0.01


def test_tcp_bulk_delivers_requested_bytes(tcp_result):
    for seg in tcp_result.segments:
        assert seg.port in (8080, 8081)
        assert seg.sink_rx_bytes == 10 * 1024


def test_tcp_data_flows_lossless(tcp_result):
    for name in ("A", "B"):
        data = flows_from(tcp_result, SENDERS[name])
        assert len(data) == 1
        flow = data[0]
        assert flow.protocol_name == "TCP"
        assert flow.tx_packets == flow.rx_packets
        assert flow.tx_bytes == flow.rx_bytes
        # payload plus headers, handshake and teardown
        assert flow.rx_bytes > 10 * 1024
        assert flow.lost_packets == 0


def test_short_horizon_cuts_the_echo_train():
    result = run_scenario(ScenarioConfig(use_tcp=False, stop_time=3.0, app_stop=3.0))
    for name in ("A", "B"):
        flow = flows_from(result, SENDERS[name])[0]
        assert 1 <= flow.tx_packets < 10


def test_smaller_transfer(tmp_path):
    xml = tmp_path / "flowmon.xml"
    result = run_scenario(ScenarioConfig(use_tcp=True, max_packets=3, app_stop=10.0, flowmon_xml=str(xml)))
    assert [s.sink_rx_bytes for s in result.segments] == [3 * 1024, 3 * 1024]
    assert "FlowMonitor" in xml.read_text()


def test_flows_logged_with_protocol(caplog):
    with caplog.at_level(logging.INFO, logger="duallink.monitor"):
        run_scenario(ScenarioConfig(use_tcp=False, max_packets=2, app_stop=10.0))
    messages = [r.getMessage() for r in caplog.records if r.name == "duallink.monitor"]
    assert any("UDP 10.1.1.1:" in m and m.endswith("-> 10.1.1.2:9") for m in messages)
    assert "flow monitor saw 4 flows" in messages


class RecordingLog:
    LOG_LEVEL_ALL = "all"
    LOG_LEVEL_INFO = "info"

    def __init__(self):
        self.enabled = set()

    def LogComponentEnable(self, name, level):
        self.enabled.add(name)

    def LogComponentDisable(self, name, level):
        self.enabled.discard(name)


@pytest.mark.parametrize("use_tcp,verbose,expected", [
    (True, True, {"UdpEchoClientApplication", "UdpEchoServerApplication", "TcpSocketBase"}),
    (True, False, {"UdpEchoClientApplication", "UdpEchoServerApplication"}),
    (False, True, {"UdpEchoClientApplication", "UdpEchoServerApplication"}),
])
def test_verbose_selects_log_components(use_tcp, verbose, expected):
    assert set(traffic.log_components(ScenarioConfig(use_tcp=use_tcp, verbose=verbose))) == expected


def test_quiet_run_after_verbose_run_drops_tcp_logging(monkeypatch):
    log = RecordingLog()
    monkeypatch.setattr(traffic, "ns", log)
    traffic.enable_logging(ScenarioConfig(use_tcp=True, verbose=True))
    assert "TcpSocketBase" in log.enabled
    traffic.enable_logging(ScenarioConfig(use_tcp=True, verbose=False))
    assert log.enabled == {"UdpEchoClientApplication", "UdpEchoServerApplication"}
