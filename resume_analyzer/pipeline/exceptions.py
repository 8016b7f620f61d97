class PipelineError(Exception):
    """Base exception for all analysis pipeline errors."""


class TransportError(PipelineError):
    """Raised when a backend call reports an error or fails to respond."""


class StageTimeoutError(PipelineError):
    """Raised when a backend call exceeds its stage deadline."""


class FeedbackParseError(PipelineError):
    """Raised when the inference reply is not a structured feedback object."""
