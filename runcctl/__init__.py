"""Client for the runc container runtime and parser for container shim flags."""

__version__ = "0.1.0"