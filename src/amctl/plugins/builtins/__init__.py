"""Built-in platform plugins."""
