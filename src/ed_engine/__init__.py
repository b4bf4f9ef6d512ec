"""Line-oriented ``ed``-style command engine."""

__all__ = [
    "adapters",
    "buffer",
    "commands",
    "errors",
    "fileio",
    "runtime",
    "session",
]

__version__ = "0.1.0"
