"""enginectl — remote connection registry for a container-engine client."""

__version__ = "0.1.0"
