"""SAMM Router - output-specified quotes and shard routing for SAMM pools."""

__version__ = "0.1.0"
__all__ = ["__version__"]
