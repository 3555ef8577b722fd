"""
easy_orm - lightweight REST data-access layer.

This package maps CRUD operations on declaratively configured models onto
an HTTP API, with a store that resolves models by type name.
"""

__version__ = "0.1.0"

from easy_orm.core.registry import ModelRegistry

# Global model registry instance
registry = ModelRegistry()

__all__ = ["registry", "__version__"]
