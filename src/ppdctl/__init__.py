"""ppdctl — paperdoll instance store and slot selection."""

__version__ = "0.1.0"
