"""Custom exceptions for the marker vision pipeline."""


class VisionError(Exception):
    """Base vision pipeline error."""
    pass


class ConfigError(VisionError):
    """Invalid configuration or command-line arguments."""
    pass


class SourceUnavailableError(VisionError):
    """Capture source could not be opened."""
    pass


class FrameError(VisionError):
    """Frame does not meet the pipeline's input requirements."""
    pass
