"""Command modules for the OpenAI connector CLI."""

from .config import app as config_app
from .files import app as files_app
from .models import app as models_app


__all__ = ["config_app", "files_app", "models_app"]
