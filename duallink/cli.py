import logging
import sys
from ctypes import c_bool, c_double, c_int

from ns import ns

from duallink.config import ScenarioConfig
from duallink.errors import ConfigurationError
from duallink.report import BANNER, print_report, transport_banner
from duallink.scenario import run_scenario

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_args(argv) -> ScenarioConfig:
    defaults = ScenarioConfig()
    useTcp = c_bool(defaults.use_tcp)
    verbose = c_bool(defaults.verbose)
    maxPackets = c_int(defaults.max_packets)
    stopTime = c_double(defaults.stop_time)
    appStopTime = c_double(defaults.app_stop)

    cmd = ns.CommandLine(__file__)
    cmd.AddValue("useTcp", "Use TCP if true, UDP if false", useTcp)
    cmd.AddValue("verbose", "Tell echo applications to log if true", verbose)
    cmd.AddValue("maxPackets", "Echo requests per client, or bulk size in packets", maxPackets)
    cmd.AddValue("stopTime", "Simulation horizon in seconds", stopTime)
    cmd.AddValue("appStopTime", "Stop time of every application in seconds", appStopTime)
    cmd.Parse(argv)

    return ScenarioConfig(
        use_tcp=useTcp.value,
        verbose=verbose.value,
        max_packets=maxPackets.value,
        stop_time=stopTime.value,
        app_stop=appStopTime.value,
    )


def setup_logging(verbose: bool):
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.INFO if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def main(argv=None):
    if argv is None:
        argv = sys.argv
    print(BANNER)

    config = parse_args(argv)
    setup_logging(config.verbose)
    if ns.Time.GetResolution() != ns.Time.NS:
        ns.Time.SetResolution(ns.Time.NS)

    try:
        config.validate()
    except ConfigurationError as err:
        logger.error("invalid scenario: %s", err)
        return 1

    print(transport_banner(config.transport))
    result = run_scenario(config)

    print_report(result.flows)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
