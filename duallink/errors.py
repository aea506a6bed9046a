class ScenarioError(Exception):
    """Base class for errors raised by the scenario driver."""


class ConfigurationError(ScenarioError, ValueError):
    """A scenario configuration breaks one of its invariants."""
