from duallink.config import ScenarioConfig, SegmentConfig, default_segments
from duallink.errors import ConfigurationError, ScenarioError
from duallink.report import FlowRecord

__all__ = [
    "ConfigurationError",
    "FlowRecord",
    "ScenarioConfig",
    "ScenarioError",
    "SegmentConfig",
    "default_segments",
]

__version__ = "0.1.0"
