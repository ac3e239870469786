"""Live code-block line highlighting engine for plain-text editors."""

__all__ = [
    "actions",
    "adapters",
    "config",
    "document",
    "engine",
    "markers",
    "rendering",
    "runtime",
]

__version__ = "0.1.0"
