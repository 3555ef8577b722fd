"""
Core components for easy_orm.

This module contains the model base class, the model registry, the store
facade and the transport abstraction.
"""

from .record import Record
from .transport import HttpxTransport, Transport, TransportError
from .model import Model, ModelConfigurationError, attr, is_blank
from .registry import ModelRegistry
from .store import Store

__all__ = [
    "Record",
    "HttpxTransport",
    "Transport",
    "TransportError",
    "Model",
    "ModelConfigurationError",
    "attr",
    "is_blank",
    "ModelRegistry",
    "Store",
]
