"""
Exception types raised by the RaiseCoach pipeline.

All errors are surfaced to the caller synchronously; nothing in the core
retries or swallows them.
"""


class RaiseCoachError(Exception):
    """Base class for every error raised by raisecoach."""


class InvalidSampleError(RaiseCoachError, ValueError):
    """A sample (or derived angle) contains a non-finite numeric field."""


class InvalidConfigurationError(RaiseCoachError, ValueError):
    """Rep thresholds are out of order, non-positive or unknown."""


class SensorParseError(RaiseCoachError, ValueError):
    """A sensor text line matched the pattern but held an unparseable number."""
