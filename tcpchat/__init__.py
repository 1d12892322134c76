"""TCP echo and chat servers and clients built on plain sockets."""

__version__ = "0.1.0"
__all__ = ["__version__"]