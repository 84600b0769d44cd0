"""Sleep Tracker - per-user sleep logs and rolling sleep statistics."""

__version__ = "1.0.0"
