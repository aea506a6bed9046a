"""
Per-flow statistics and their text rendering.

The numbers are printed the way an ns-3 C++ program prints doubles
through std::cout (six significant digits), so the output can be
diffed against runs of the C++ version of this scenario.
"""
import logging
import math
import sys
from dataclasses import dataclass

logger = logging.getLogger(__name__)

BANNER = "----------------------------------"
DIVIDER = "-------------------------------"

PROTOCOLS = {6: "TCP", 17: "UDP"}


def ieee_divide(num: float, den: float) -> float:
    # x/0.0 is inf, 0/0.0 is the negative nan x86-64 produces
    if den == 0:
        if num == 0 or math.isnan(num):
            return math.copysign(math.nan, -1.0)
        return math.copysign(math.inf, num) * math.copysign(1.0, den)
    return num / den


def fmt_number(value) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        # glibc prints the sign of a nan
        return "-nan" if math.copysign(1.0, value) < 0 else "nan"
    return f"{value:g}"


@dataclass(frozen=True)
class FlowRecord:
    flow_id: int
    source: str
    destination: str
    tx_packets: int
    rx_packets: int
    tx_bytes: int
    rx_bytes: int
    time_first_tx: float = 0.0
    time_last_rx: float = 0.0
    delay_sum: float = 0.0
    lost_packets: int = 0
    protocol: int = 0
    source_port: int = 0
    destination_port: int = 0

    @property
    def protocol_name(self) -> str:
        return PROTOCOLS.get(self.protocol, str(self.protocol))

    def throughput_kbps(self) -> float:
        """Received bits over [first tx, last rx], in units of 1024 bit/s."""
        active = self.time_last_rx - self.time_first_tx
        return ieee_divide(self.rx_bytes * 8.0, active) / 1024

    def mean_delay(self) -> float:
        return ieee_divide(self.delay_sum, self.rx_packets)


def transport_banner(transport: str) -> str:
    return f"Using {transport}\n"


def format_flow(record: FlowRecord) -> str:
    lines = [
        f"Flow ID: {record.flow_id} ({record.source} -> {record.destination})",
        f"Tx Packets: {record.tx_packets}",
        f"Rx Packets: {record.rx_packets}",
        f"Tx Bytes: {record.tx_bytes}",
        f"Rx Bytes: {record.rx_bytes}",
        f"Throughput: {fmt_number(record.throughput_kbps())} Kbps",
        f"Delay: {fmt_number(record.mean_delay())} s",
        f"Lost Packets: {record.lost_packets}",
        DIVIDER,
    ]
    return "\n".join(lines)


def format_flows(records) -> str:
    return "\n".join(format_flow(r) for r in records)


def print_report(records, file=None):
    file = file if file is not None else sys.stdout
    for record in records:
        if record.rx_packets == 0:
            logger.warning("flow %d (%s -> %s) received no packets; throughput and delay are undefined",
                           record.flow_id, record.source, record.destination)
    if records:
        print(format_flows(records), file=file)
