"""Version information for quillpress."""

__version__ = "0.3.0"
