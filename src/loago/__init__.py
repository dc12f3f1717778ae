"""Track how long ago you last did things."""

__version__ = "0.1.0"
