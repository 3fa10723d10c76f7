"""Maturion Core: document chunking and feedback pattern learning."""

__version__ = "1.0.0"
