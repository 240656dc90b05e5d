"""Turnstile exception hierarchy.

Request outcomes are never exceptions: rejections travel as ``Terminate``
results carrying a response. These types are reserved for programmer errors
such as a mis-configured builder.
"""


class TurnstileError(Exception):
    """Base for all turnstile-specific errors."""


class ConfigurationError(TurnstileError):
    """Raised when pipeline or middleware configuration is invalid.

    Typically raised while assembling a pipeline with ``PipelineBuilder``.
    """
