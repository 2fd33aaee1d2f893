"""Exception types shared across the arena."""


class ArenaError(Exception):
    """Base class for arena failures."""


class OracleFailure(ArenaError):
    """The move oracle timed out, failed in transport, or returned an unusable reply."""


class StoreUnavailable(ArenaError):
    """The persistent store could not complete a read or write."""


class ConfigError(ArenaError):
    """A configuration value is missing or invalid."""
