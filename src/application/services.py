"""
Service factory functions for dependency injection.

Wires process-wide collaborators shared by the use cases.
"""

from src.application.locks import ProductLockRegistry

# Singleton instances
_lock_registry: ProductLockRegistry | None = None


def get_lock_registry() -> ProductLockRegistry:
    """Get the process-wide per-product lock registry.

    All use cases touching the same SKU must share one registry, otherwise
    the locks do not serialize anything.
    """
    global _lock_registry
    if _lock_registry is None:
        _lock_registry = ProductLockRegistry()
    return _lock_registry


def reset_services() -> None:
    """Reset all singleton instances (for testing)."""
    global _lock_registry
    _lock_registry = None
