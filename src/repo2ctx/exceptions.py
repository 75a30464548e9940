"""Exception types raised by repo2ctx."""


class ConfigError(ValueError):
    """Invalid configuration, detected before any scanning starts."""


class SourceError(RuntimeError):
    """A source tree could not be resolved to a local directory."""
