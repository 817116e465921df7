"""Header detection and propagation for object-store folders."""

__version__ = "0.1.0"
