"""Finsight: AI spending insights with a resilient model pipeline."""

__version__ = "1.0.0"
