class WorldGraphError(Exception):
    """Base class for errors raised by the World Graph pipeline."""


class NotFoundError(WorldGraphError):
    """No stored triple matches the requested canonical pair."""


class StoreError(WorldGraphError):
    """The persistence layer failed to read or write."""


class OracleError(WorldGraphError):
    """A single completion call failed (network, timeout or protocol)."""


class TemplateError(WorldGraphError):
    """The prompt template could not be rendered."""
