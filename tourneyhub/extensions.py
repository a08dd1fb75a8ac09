"""Flask extensions and per-app services."""

from flask import current_app
from flask_wtf.csrf import CSRFProtect

csrf = CSRFProtect()

EXTENSION_KEY = "tourneyhub"


def get_store():
    """The record store configured for the current app."""
    return current_app.extensions[EXTENSION_KEY]["store"]


def get_session():
    """The tournament session owned by the current app."""
    return current_app.extensions[EXTENSION_KEY]["session"]
