"""amctl — foreground command bridge for sandboxed workers."""

__version__ = "0.1.0"
