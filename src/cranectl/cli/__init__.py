# src/cranectl/cli/__init__.py
"""
cranectl CLI Package

This package exposes the top-level Typer `app` so tests and the console
entrypoint can import `cranectl.cli.app`.
"""

from .main import app

__all__ = ["app"]
