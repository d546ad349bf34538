"""Markdown to PDF conversion with a live-reload preview server."""

__version__ = "0.1.0"
