"""Docker Compose Manager — compose project discovery and reconciliation."""

__version__ = "0.1.0"
