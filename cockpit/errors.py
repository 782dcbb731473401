"""
Error taxonomy for the cockpit backend.

All errors propagate to the request boundary in service.py, which translates
them into HTTP responses.
"""


class CockpitError(RuntimeError):
    """Base class for cockpit failures."""


class UnresolvedRoute(CockpitError):
    """Trailing path segment does not name a cockpit operation."""

    def __init__(self, segment: str):
        self.segment = segment
        super().__init__(
            f"Could not resolve {segment} to a handler. "
            "Please make sure that you are using a compatible version of the ee-cockpit backend."
        )


class UnknownAggregateType(CockpitError):
    """Requested aggregate type is not described by the compiled configuration."""

    def __init__(self, aggregate_type: str):
        self.aggregate_type = aggregate_type
        super().__init__(f"Unknown aggregate type {aggregate_type}")


class ConfigurationIntegrityFault(CockpitError):
    """Compiled configuration references a name its schema maps do not define."""
