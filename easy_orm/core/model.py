"""
Model - REST resource mapping for CRUD operations

A model declares where a resource lives (host + namespace + url), what its
records look like (the ``model`` schema) and how responses are unwrapped
(``root_key`` / ``display_model``). Subclasses override the ``url_for_*``
builders and ``*_serializer`` hooks for endpoints that do not follow the
defaults.

Example:
    from easy_orm import registry
    from easy_orm.core import Model, attr

    @registry.decorator
    class PicModel(Model):
        name = "pic"
        url = "/v1/pic"
        root_key = "resp"
        model = {
            "refer": attr("string"),
            "desc": attr("string"),
            "tags": attr("array"),
        }
"""

import json
import logging
import numbers
from typing import Any, Dict, List, Mapping, Optional, Union

from easy_orm.core.record import Record
from easy_orm.core.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)

_MISSING = object()

_ATTR_DEFAULTS = {
    "string": "",
    "boolean": True,
    "number": 0,
    "array": list,
    "object": dict,
}


class ModelConfigurationError(Exception):
    """Raised when a model is constructed with invalid configuration."""
    pass


def attr(kind: Optional[str] = None, default_value: Any = _MISSING) -> Any:
    """
    Build a schema default for a model field.

    Args:
        kind: Field kind: string|boolean|number|array|object
        default_value: Explicit default, wins over ``kind``

    Returns:
        A literal default, or a factory for array/object fields
    """
    if default_value is not _MISSING:
        return default_value
    return _ATTR_DEFAULTS.get(kind)


def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


class Model:
    """
    Base class for REST-backed models.

    Configuration is declared as class attributes and may be overridden per
    instance through keyword arguments.
    """

    name: str = ""

    # API host, e.g. "https://api.example.com"; empty means same host
    host: str = ""
    # API namespace, e.g. "/v1"
    namespace: str = ""
    # Resource url, e.g. "/users"
    url: str = ""
    # Envelope key of the business payload: {"code": 0, "resp": ..., "msg": ""}
    root_key: str = ""
    primary_key: str = "_id"
    # Multi-key response shape, e.g. {"user": "array", "avatar": "object"}
    display_model: Optional[Dict[str, str]] = None
    # Field name -> default literal or zero-argument factory
    model: Dict[str, Any] = {}

    def __init__(self, request: Optional[Transport] = None, **options):
        for key, value in options.items():
            declared = getattr(type(self), key, _MISSING)
            if key.startswith("_") or declared is _MISSING or callable(declared) or isinstance(declared, property):
                raise TypeError(f"{type(self).__name__} got an unexpected configuration option '{key}'")
            setattr(self, key, value)

        if not isinstance(self.root_key, str):
            raise ModelConfigurationError(
                f"root_key only allows str, got {type(self.root_key).__name__}: {self.root_key!r}"
            )

        self._request = request

    @property
    def request(self) -> Transport:
        """Transport used for HTTP calls, created on first use."""
        if self._request is None:
            self._request = HttpxTransport()
        return self._request

    @request.setter
    def request(self, transport: Transport) -> None:
        self._request = transport

    @property
    def api(self) -> str:
        """Base API url: host + namespace + url."""
        return self.host + self.namespace + self.url

    # URL builders

    def url_for_find(self, params: Optional[Mapping] = None) -> str:
        return self.api

    def url_for_find_one(self, id: Union[str, int], data: Optional[Mapping] = None) -> str:
        return f"{self.api}/{id}"

    def url_for_save(self, id: Optional[Union[str, int]], record: Optional[Mapping] = None) -> str:
        return f"{self.api}/{id}" if id else self.api

    def url_for_delete(self, id: Optional[Union[str, int]], data: Optional[Mapping] = None) -> str:
        return f"{self.api}/{id}" if id else self.api

    # CRUD

    async def find(self, params: Optional[Mapping] = None) -> Any:
        """
        Find records matching query params.

        Blank params are dropped before the request is sent.

        Returns:
            Output of ``find_serializer``
        """
        url = self.url_for_find(params)
        filtered = self._filter_params(params)
        options = {"data": filtered} if filtered is not None else {}

        logger.debug(f"GET {url} params={filtered}")
        data = await self.request.get(url, options)
        return self.find_serializer(data)

    async def find_one(self, id: Union[str, int], data: Optional[Mapping] = None) -> Any:
        """Find a single record by primary id."""
        url = self.url_for_find_one(id, data)
        options = {"data": data} if data else {}

        logger.debug(f"GET {url}")
        response = await self.request.get(url, options)
        return self.find_one_serializer(response)

    async def save(self, record: Mapping) -> Any:
        """
        Create or update a record.

        A record carrying a primary key value is updated with PUT, anything
        else is created with POST.

        Returns:
            Output of ``save_serializer``
        """
        primary_key = self.primary_key
        record_id = record.get(primary_key)
        url = self.url_for_save(record_id, record)
        payload = self._build_payload(record)

        if record_id:
            payload[primary_key] = record_id
            logger.debug(f"PUT {url}")
            data = await self.request.put(url, {"data": payload})
        else:
            logger.debug(f"POST {url}")
            data = await self.request.post(url, {"data": payload})

        return self.save_serializer(data)

    async def delete_record(self, record: Any, data: Optional[Mapping] = None) -> Any:
        """
        Delete a record by id or by record object.

        Args:
            record: Raw id, a record holding ``primary_key``, or None for a
                collection-level delete
            data: Extra payload passed to the backend
        """
        if record is None or isinstance(record, (str, numbers.Number)):
            record_id = record
        elif isinstance(record, Mapping):
            record_id = record.get(self.primary_key)
        else:
            record_id = getattr(record, self.primary_key, None)

        url = self.url_for_delete(record_id, data)
        options = {"data": data} if data else {}

        logger.debug(f"DELETE {url}")
        response = await self.request.delete(url, options)
        return self.delete_serializer(response)

    def create_record(self, init: Optional[Mapping] = None) -> Record:
        """Create a new record from schema defaults, overlaid with ``init``."""
        record = Record()
        for key, default in self.model.items():
            record[key] = default() if callable(default) else default

        if isinstance(init, Mapping):
            record.update(init)

        return record

    # Serializers

    def find_serializer(self, data: Any) -> Any:
        """Normalize a find response into a list (or a display_model dict)."""
        if self.display_model:
            return self._display_serializer(data, "find_serializer")

        if data is None:
            logger.error("find_serializer response data is None")
            return self.to_array()

        if not self.root_key:
            return self.to_array(data if isinstance(data, list) else [data])

        payload = data.get(self.root_key) if isinstance(data, Mapping) else None
        if not isinstance(payload, list):
            logger.error(f"find_serializer payload under '{self.root_key}' is not a list")
            logger.warning(f"Response: {data}")
            return self.to_array()

        return self.to_array(payload)

    def find_one_serializer(self, data: Any) -> Any:
        """Normalize a find_one response into a record (or a display_model dict)."""
        if self.display_model:
            return self._display_serializer(data, "find_one_serializer")

        if data is None:
            logger.error("find_one_serializer response data is None")
            return self.to_object()

        if not self.root_key:
            return data

        payload = data.get(self.root_key) if isinstance(data, Mapping) else None
        if payload is None:
            logger.error(f"find_one_serializer payload under '{self.root_key}' is None")
            return self.to_object()

        if not isinstance(payload, Mapping):
            logger.error(f"find_one_serializer payload under '{self.root_key}' is not a mapping")
            logger.warning(f"Response: {data}")
            return self.to_object()

        return self.to_object(payload)

    def save_serializer(self, data: Any) -> Any:
        logger.info(f"{type(self).__name__}: override save_serializer to shape save responses")
        return data

    def delete_serializer(self, data: Any) -> Any:
        logger.info(f"{type(self).__name__}: override delete_serializer to shape delete responses")
        return data

    def to_array(self, data: Optional[List] = None) -> List:
        return list(data or [])

    def to_object(self, data: Optional[Mapping] = None) -> Record:
        return Record(data or {})

    # Helpers

    def _display_serializer(self, data: Any, source: str) -> Dict[str, Any]:
        if not isinstance(data, Mapping):
            logger.error(f"{source} response data is not a mapping: {data!r}")
            data = {}

        result = {}
        for key, kind in self.display_model.items():
            value = data.get(key)
            if kind == "array":
                if value is not None and not isinstance(value, (list, tuple)):
                    logger.error(f"{source} '{key}' is not a list: {value!r}")
                    value = None
                result[key] = self.to_array(value)
            elif kind == "object":
                if value is not None and not isinstance(value, Mapping):
                    logger.error(f"{source} '{key}' is not a mapping: {value!r}")
                    value = None
                result[key] = self.to_object(value)
            else:
                result[key] = value
        return result

    def _filter_params(self, params: Optional[Mapping]) -> Optional[Dict]:
        if not params:
            return None
        return {k: v for k, v in params.items() if not is_blank(v)}

    def _build_payload(self, record: Mapping) -> Dict[str, Any]:
        payload = {}
        for key, default in self.model.items():
            value = record.get(key, _MISSING)

            if callable(default) and isinstance(value, Mapping):
                payload[key] = json.dumps(value)
                continue

            if isinstance(value, (list, tuple)):
                payload[key] = [
                    json.dumps(item) if isinstance(item, (Mapping, list, tuple)) else item
                    for item in value
                ]
                continue

            if value is _MISSING:
                value = default() if callable(default) else default
            payload[key] = value

        return payload
