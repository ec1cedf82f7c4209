"""
bot/handlers/__init__.py
─────────────────────────
Exporta todos los handlers registrables en la aplicación.
"""

from .callbacks import callback_handler
from .messages import message_handler
from .start import cancel_handler, start_handler

__all__ = [
    "start_handler",
    "cancel_handler",
    "callback_handler",
    "message_handler",
]
