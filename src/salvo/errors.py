class SalvoError(Exception):
    """Base class for every error raised by salvo."""


class ActionError(SalvoError):
    """A single invocation failed; recorded and counted, the run continues."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ConnectionUnusableError(SalvoError):
    """The backend connection can no longer serve requests. Aborts the run."""


class ConfigError(SalvoError):
    """The sampler configuration could not be loaded or is malformed."""
