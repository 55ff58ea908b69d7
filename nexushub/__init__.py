"""nexushub: personal productivity hub backend."""

__version__ = "0.1.0"
