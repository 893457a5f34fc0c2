"""Over/under status service and broadcast overlay."""

__version__ = "1.0.0"
