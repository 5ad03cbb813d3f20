"""In-process memoization of introspection results.

There is no invalidation signal from the server: callers clear the cache
after installing or upgrading modules.
"""

from __future__ import annotations

from odoo_toolbox.introspection.types import FieldDescriptor, ModelDescriptor, ModelMetadata


class IntrospectionCache:
    def __init__(self) -> None:
        self._models: list[ModelDescriptor] | None = None
        self._models_include_transient = False
        self._fields: dict[str, list[FieldDescriptor]] = {}
        self._metadata: dict[str, ModelMetadata] = {}

    def get_models(self, include_transient: bool = False) -> list[ModelDescriptor] | None:
        """Return the cached model list if it covers the request."""
        if self._models is None:
            return None
        if include_transient and not self._models_include_transient:
            return None
        return list(self._models)

    def set_models(self, models: list[ModelDescriptor], include_transient: bool) -> None:
        self._models = list(models)
        self._models_include_transient = include_transient

    def get_fields(self, model: str) -> list[FieldDescriptor] | None:
        fields = self._fields.get(model)
        return list(fields) if fields is not None else None

    def set_fields(self, model: str, fields: list[FieldDescriptor]) -> None:
        self._fields[model] = list(fields)

    def get_metadata(self, model: str) -> ModelMetadata | None:
        return self._metadata.get(model)

    def set_metadata(self, model: str, metadata: ModelMetadata) -> None:
        self._metadata[model] = metadata

    def clear(self) -> None:
        self._models = None
        self._models_include_transient = False
        self._fields.clear()
        self._metadata.clear()

    def clear_model(self, model: str) -> None:
        self._fields.pop(model, None)
        self._metadata.pop(model, None)
