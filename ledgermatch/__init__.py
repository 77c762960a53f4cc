"""Reconcile system transactions against bank statements read from CSV files."""

__version__ = "0.1.0"
__all__ = ["__version__"]