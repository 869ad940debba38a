"""RECLAIM — wallet account password recovery."""

__version__ = "1.0.0"
