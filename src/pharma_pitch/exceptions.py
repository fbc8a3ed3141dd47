"""Error types raised by pharma-pitch.

Everything the CLI reports as a plain error message derives from
``PharmaPitchError``. Any other exception is treated as an unexpected fault
and handed to the recovery boundary.
"""


class PharmaPitchError(Exception):
    """Expected, user-reportable failure.

    ``message`` is shown to the user as is; ``details`` carries the underlying
    cause (file path, API reply) and is appended on its own line.
    """

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message}\n  Details: {self.details}"


class ConfigurationError(PharmaPitchError):
    """Raised when configuration is missing or invalid."""

    pass


class ValidationError(PharmaPitchError):
    """Raised when input validation fails."""

    pass


class StorageError(PharmaPitchError):
    """Raised when a durable storage backend fails to read, write or delete."""

    pass


class BrandNotFoundError(PharmaPitchError, ValueError):
    """Raised when a brand doesn't exist."""

    pass


class DoctorNotFoundError(PharmaPitchError, ValueError):
    """Raised when a doctor doesn't exist."""

    pass


class SlideNotFoundError(PharmaPitchError, ValueError):
    """Raised when a slide doesn't exist in its brand."""

    pass


class ConversionError(PharmaPitchError):
    """Raised when an uploaded document cannot be turned into slide images."""

    pass


class AnalysisError(PharmaPitchError):
    """Raised when the content-analysis service returns an unusable answer."""

    pass


class DisplayModeError(PharmaPitchError):
    """Raised when the host refuses the exclusive display mode."""

    pass
