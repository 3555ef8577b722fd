"""
Store - type-name facade over registered models

Resolves a model type name through the registry and forwards CRUD calls to
a freshly created model instance bound to the store's transport.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from easy_orm.core.model import Model, is_blank
from easy_orm.core.record import Record
from easy_orm.core.registry import ModelRegistry
from easy_orm.core.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


class Store:
    """
    CRUD facade dispatching by model type name.

    Example:
        store = Store()
        users = await store.find("user", {"page": 1})
        user = store.create_record("user", {"name": "x"})
        await store.save("user", user)
    """

    def __init__(self,
                 registry: Optional[ModelRegistry] = None,
                 request: Optional[Transport] = None):
        """
        Initialize store.

        Args:
            registry: Model registry (default: package-level registry)
            request: Transport shared by created models (default: HttpxTransport)
        """
        if registry is None:
            from easy_orm import registry as default_registry
            registry = default_registry

        self.registry = registry
        self._request = request

    @property
    def request(self) -> Transport:
        if self._request is None:
            self._request = HttpxTransport()
        return self._request

    def model_for(self, type: str) -> Union[Model, Record]:
        """
        Create the model registered under ``type``.

        Unknown types log a warning and yield an empty Record placeholder.
        """
        model_class = self.registry.lookup(type)
        if model_class is None:
            logger.warning(f"model:{type} is not found")
            return Record()
        return model_class(request=self.request)

    async def find(self, type: str, params: Optional[Mapping] = None) -> Any:
        return await self.model_for(type).find(params)

    async def find_one(self, type: str, id: Union[str, int], data: Optional[Mapping] = None) -> Any:
        return await self.model_for(type).find_one(id, data)

    def create_record(self, type: str, init: Optional[Mapping] = None) -> Record:
        return self.model_for(type).create_record(init)

    async def delete_record(self, type: str, record: Union[str, int, Mapping, None], data: Optional[Mapping] = None) -> Any:
        return await self.model_for(type).delete_record(record, data)

    async def save(self, type: str, record: Mapping) -> Any:
        return await self.model_for(type).save(record)

    def empty_attrs(self,
                    type: str,
                    record: Any,
                    filter_keys: Optional[Iterable[str]] = None,
                    unfilter_keys: Optional[Iterable[str]] = None) -> List[str]:
        """
        List fields of ``record`` that are still blank.

        Args:
            type: Model type name
            record: Record (or any mapping/object) to inspect
            filter_keys: Keys to check (default: the model schema keys)
            unfilter_keys: Keys never reported

        Returns:
            Blank keys in check order
        """
        if filter_keys is None:
            schema = getattr(self.model_for(type), "model", None) or {}
            filter_keys = list(schema.keys())

        excluded = set(unfilter_keys or [])
        empty_keys = []
        for key in filter_keys:
            if not isinstance(key, str) or key in excluded:
                continue
            if isinstance(record, Mapping):
                value = record.get(key)
            else:
                value = getattr(record, key, None)
            if is_blank(value):
                empty_keys.append(key)

        return empty_keys
