"""Set the status of a Helm release revision."""

__version__ = "0.3.0"
