"""A folder-based desktop audio player with a library tree, a play queue and pygame playback."""

__version__ = "0.1.0"
__all__ = ["__version__"]