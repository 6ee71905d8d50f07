"""Render diagnostics with labelled source snippets as graphical, narrated, JSON or debug text."""

__version__ = "0.1.0"