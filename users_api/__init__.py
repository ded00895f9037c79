"""Users API - user resource service."""

__version__ = "0.1.0"
