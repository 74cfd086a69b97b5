"""Exception hierarchy for the brush engine."""


class BrushEngineError(Exception):
    """Base class for all brush engine errors."""


class ConfigurationError(BrushEngineError, ValueError):
    """Brush configuration cannot be used.

    Raised for an unknown brush kind at draw time, or for a configuration
    value that cannot be clamped into range (e.g. a non-numeric size).
    """


class RenderingFailure(BrushEngineError):
    """A renderer failed while painting a single segment."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(f"Brush '{kind}' failed to render: {message}")
        self.kind = kind


class SurfaceBusyError(BrushEngineError):
    """The drawing surface is already owned by another engine."""


class ThreadAffinityError(BrushEngineError):
    """An engine was called from a thread other than the one that created it."""
