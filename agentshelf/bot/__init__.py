"""Telegram catalog bot."""
from .application import create_application
from .middleware import auth_middleware

__all__ = ["create_application", "auth_middleware"]
