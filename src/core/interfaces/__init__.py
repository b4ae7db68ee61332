"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.product_store import IProductStore

__all__ = [
    # Storage interfaces
    "IProductStore",
]
