"""Event-triggered image transcoding into fixed-size variants."""

__version__ = "0.1.0"
