"""
database/exceptions.py
───────────────────────
Errores del almacenamiento. Separados de repositories.py para que la
conversación pueda capturarlos sin importar el cliente de Google.
"""


class StoreUnavailable(Exception):
    """La hoja no respondió (red, timeout, credenciales o permisos)."""
