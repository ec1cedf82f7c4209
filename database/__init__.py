"""
database/__init__.py
────────────────────
Expone los componentes principales del módulo de base de datos.
Se importan solo los modelos para evitar tocar Google Sheets al importar.
"""

from .models import CATEGORIES, ExpenseRecord, PaymentMethod

__all__ = ["CATEGORIES", "ExpenseRecord", "PaymentMethod"]
