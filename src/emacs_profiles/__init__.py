"""Switch between named editor configuration profiles."""

__version__ = "0.1.0"
