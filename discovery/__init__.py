"""Provider discovery and matching engine for the service marketplace client."""

__version__ = "1.0.0"
