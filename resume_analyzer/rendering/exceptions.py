class RenderError(Exception):
    """Base exception for all document rendering errors."""


class DocumentValidationError(RenderError):
    """Raised when a source document is empty or not a PDF."""


class EngineInitializationError(RenderError):
    """Raised when the rendering engine cannot be loaded."""


class EncodingError(RenderError):
    """Raised when a rendered page cannot be encoded to image bytes."""
