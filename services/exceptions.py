"""
services/exceptions.py
───────────────────────
Errores de validación de la conversación.
"""


class ValidationError(Exception):
    """
    Entrada del usuario inválida para el paso actual.
    El mensaje se muestra tal cual como re-pregunta; el paso no avanza.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
