"""
Model Registry - Plugin Architecture for REST Models

Models register themselves by type name so the store can resolve
``store.find("user", ...)`` to a ``UserModel`` instance at call time.
"""

from typing import Dict, List, Type, Optional
import logging

from easy_orm.core.model import Model

logger = logging.getLogger(__name__)


class ModelRegistry:
    """
    Central registry mapping type names to model classes.

    A fresh instance is created for every lookup through ``get_model``;
    there is no identity map.
    """

    def __init__(self):
        self._models: Dict[str, Type[Model]] = {}

    def register(self, model_class: Type[Model], name: Optional[str] = None) -> None:
        """
        Register a model class in the registry.

        Args:
            model_class: Model subclass
            name: Type name (default: ``model_class.name``, then lower-cased class name)

        Example:
            registry.register(UserModel, name="user")
        """
        if not isinstance(model_class, type) or not issubclass(model_class, Model):
            raise ValueError(f"Model {model_class} must inherit from Model")

        type_name = name or model_class.name or model_class.__name__.lower()

        if type_name in self._models:
            logger.warning(f"Overriding existing model: {type_name}")

        self._models[type_name] = model_class
        logger.info(f"Registered model: {type_name}")

    def unregister(self, name: str) -> None:
        """Remove a model class; unknown names are ignored."""
        self._models.pop(name, None)

    def lookup(self, name: str) -> Optional[Type[Model]]:
        """Return the model class registered under ``name``, or None."""
        return self._models.get(name)

    def get_model(self, name: str, **kwargs) -> Model:
        """
        Get a model instance by name.

        Args:
            name: Model name as registered
            **kwargs: Arguments passed to model constructor
        """
        if name not in self._models:
            available = list(self._models.keys())
            raise ValueError(f"Model '{name}' not found. Available: {available}")

        model_class = self._models[name]
        return model_class(**kwargs)

    def list_models(self) -> List[str]:
        """Return list of registered model names."""
        return sorted(self._models.keys())

    def decorator(self, model_class: Type[Model]) -> Type[Model]:
        """
        Decorator for registering models.

        Usage:
            @registry.decorator
            class UserModel(Model):
                name = "user"
        """
        self.register(model_class)
        return model_class
