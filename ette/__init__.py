"""ette: an encrypted, line-oriented text editor core."""

__version__ = "0.0.1"
