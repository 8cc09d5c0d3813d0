"""boxy: an in-memory mock of an iRODS-style data repository."""

__version__ = "0.1.0"
