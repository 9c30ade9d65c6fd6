"""Email adapters."""

from .console import ConsoleEmailSender, activation_url

__all__ = ["ConsoleEmailSender", "activation_url"]
