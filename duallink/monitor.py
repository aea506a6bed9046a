import logging

from ns import ns

from duallink.report import FlowRecord

logger = logging.getLogger(__name__)


class FlowStatsCollector:
    """FlowMonitor on every node, read back into FlowRecords after the run."""

    def __init__(self):
        self.helper = ns.FlowMonitorHelper()
        self.monitor = self.helper.InstallAll()

    def records(self):
        self.monitor.CheckForLostPackets()
        classifier = self.helper.GetClassifier()
        records = []
        for flow_id, st in self.monitor.GetFlowStats():
            t = classifier.FindFlow(flow_id)
            record = FlowRecord(
                flow_id=int(flow_id),
                source=str(t.sourceAddress),
                destination=str(t.destinationAddress),
                tx_packets=int(st.txPackets),
                rx_packets=int(st.rxPackets),
                tx_bytes=int(st.txBytes),
                rx_bytes=int(st.rxBytes),
                time_first_tx=st.timeFirstTxPacket.GetSeconds(),
                time_last_rx=st.timeLastRxPacket.GetSeconds(),
                delay_sum=st.delaySum.GetSeconds(),
                lost_packets=int(st.lostPackets),
                protocol=int(t.protocol),
                source_port=int(t.sourcePort),
                destination_port=int(t.destinationPort),
            )
            logger.info("flow %d %s %s:%d -> %s:%d", record.flow_id, record.protocol_name,
                        record.source, record.source_port, record.destination, record.destination_port)
            records.append(record)
        records.sort(key=lambda r: r.flow_id)
        logger.info("flow monitor saw %d flows", len(records))
        return records

    def serialize(self, path):
        self.monitor.SerializeToXmlFile(str(path), True, True)
        logger.info("flow monitor results saved to %s", path)
