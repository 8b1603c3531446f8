"""Sitewatch: HTTP endpoint availability monitor with a live dashboard."""

__version__ = "0.1.0"
