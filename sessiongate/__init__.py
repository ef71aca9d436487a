"""Credential & session gate: registration, JWT login and token-guarded resources."""

__version__ = "0.1.0"
