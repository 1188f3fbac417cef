# /namer/core/exceptions.py

"""
Service-level exception taxonomy.

Services raise these; routers translate them to HTTP status codes and
background jobs translate them into a terminal `failed` state. None of them
carry HTTP concerns except the optional `status_code` hint on provider
errors, which routers may surface as-is.
"""

from typing import Optional


class NamerError(Exception):
    """Base class for every expected, domain-level failure."""


class NotFoundError(NamerError):
    """The entity does not exist (or is not visible to the caller)."""


class ForbiddenError(NamerError):
    """The entity exists but belongs to someone else."""


class GoneError(NamerError):
    """The entity existed but has expired."""


class InvalidTransitionError(NamerError):
    """The requested state change is not allowed from the current state."""


class CannotCancelError(InvalidTransitionError):
    pass


class UpstreamFailureError(NamerError):
    """An AI, domain or image provider call failed."""


class StorageFailureError(NamerError):
    """Reading or writing a blob failed."""


class ShareAccessError(NamerError):
    """A public share cannot be served; `reason` tells the router why."""

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason


class ExportGenerationError(NamerError):
    """Raised when an export file could not be produced."""

    @classmethod
    def render_failed(cls, export_type: str, detail: str) -> "ExportGenerationError":
        return cls(f"Failed to generate {export_type} export: {detail}")


class LogoGenerationError(UpstreamFailureError):
    """
    Failure raised by the logo pipeline.

    `permanent` errors abort the whole generation; the rest are skipped
    per logo.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 503,
        retry_after: Optional[int] = None,
        permanent: bool = False,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.status_code = status_code
        self.retry_after = retry_after
        self.permanent = permanent

    @classmethod
    def connection_failed(cls, detail: str = "") -> "LogoGenerationError":
        message = "Unable to connect to the image generation service"
        if detail:
            message = f"{message}: {detail}"
        return cls(message, "CONNECTION_FAILED", 503, retry_after=60, permanent=True)

    @classmethod
    def rate_limited(cls, retry_after: int = 60) -> "LogoGenerationError":
        return cls("Image generation rate limit exceeded", "RATE_LIMITED", 429, retry_after=retry_after)

    @classmethod
    def invalid_response(cls, detail: str = "") -> "LogoGenerationError":
        message = "Invalid response from the image generation service"
        if detail:
            message = f"{message}: {detail}"
        return cls(message, "INVALID_RESPONSE", 422)

    @classmethod
    def quota_exceeded(cls) -> "LogoGenerationError":
        return cls("Image generation quota exceeded", "QUOTA_EXCEEDED", 503, retry_after=3600, permanent=True)

    @classmethod
    def authentication_failed(cls) -> "LogoGenerationError":
        return cls("Image generation service rejected the API key", "AUTHENTICATION_FAILED", 503, permanent=True)

    @classmethod
    def download_failed(cls, url: str) -> "LogoGenerationError":
        return cls(f"Failed to download generated image from {url}", "DOWNLOAD_FAILED", 503, retry_after=30)

    @classmethod
    def file_not_found(cls, path: str) -> "LogoGenerationError":
        return cls(f"Logo file not found: {path}", "FILE_NOT_FOUND", 404)

    @classmethod
    def color_processing_failed(cls, detail: str) -> "LogoGenerationError":
        return cls(f"Failed to apply color scheme: {detail}", "COLOR_PROCESSING_FAILED", 422)
