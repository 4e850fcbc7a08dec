"""Terminal review of Git working tree diffs."""

__version__ = "0.1.0"
__all__ = ["__version__"]