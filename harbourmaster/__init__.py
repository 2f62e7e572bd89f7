"""Harbourmaster transcript ingestion service."""

__version__ = "1.0.0"
