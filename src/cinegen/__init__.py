"""CineGen - AI storyboard generation with credit-metered scenes."""

__version__ = "0.1.0"
