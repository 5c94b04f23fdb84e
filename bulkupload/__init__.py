"""Bulk CSV validation & submission tool for the PSP billing platform."""

__version__ = "0.1.0"
