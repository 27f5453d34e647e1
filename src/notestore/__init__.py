"""notestore: notes over a JSON RPC surface with pluggable storage."""

__version__ = "0.1.0"
