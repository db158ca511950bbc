"""Command line interface for the OpenAI connector."""

from .main import app, main


__all__ = ["app", "main"]
