"""Client core for a remote-file-sync backend."""

__version__ = "0.1.0"
