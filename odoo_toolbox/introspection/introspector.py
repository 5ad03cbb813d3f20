"""
Runtime introspection of models and fields via ``ir.model`` and
``ir.model.fields``.

``get_fields`` on an unknown model returns an empty list while
``get_model_metadata`` raises MISSING_ERROR. Both behaviours are relied upon
by callers and are kept as they are.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from odoo_toolbox.errors import OdooError
from odoo_toolbox.introspection.cache import IntrospectionCache
from odoo_toolbox.introspection.types import FieldDescriptor, ModelDescriptor, ModelMetadata

if TYPE_CHECKING:
    from odoo_toolbox.client.odoo_client import OdooClient

logger = logging.getLogger("odoo_toolbox.introspection")

MODEL_FIELDS = ["model", "name", "info", "transient", "modules"]
FIELD_FIELDS = [
    "name",
    "field_description",
    "ttype",
    "required",
    "readonly",
    "relation",
    "help",
    "selection",
    "compute",
    "model",
]


def filter_models(
    models: list[ModelDescriptor],
    include_transient: bool = False,
    modules: list[str] | None = None,
) -> list[ModelDescriptor]:
    filtered = models
    if not include_transient:
        filtered = [m for m in filtered if not m.transient]
    if modules:
        wanted = set(modules)
        filtered = [m for m in filtered if wanted.intersection(m.module_list)]
    return filtered


class Introspector:
    """Queries the server's model and field registries, with memoization."""

    def __init__(self, client: OdooClient) -> None:
        self._client = client
        self._cache = IntrospectionCache()

    @property
    def cache(self) -> IntrospectionCache:
        return self._cache

    async def get_models(
        self,
        include_transient: bool = False,
        modules: list[str] | None = None,
        bypass_cache: bool = False,
    ) -> list[ModelDescriptor]:
        """List models, excluding transient (wizard) models by default."""
        if not bypass_cache:
            cached = self._cache.get_models(include_transient)
            if cached is not None:
                return filter_models(cached, include_transient, modules)

        domain: list = []
        if not include_transient:
            domain.append(["transient", "=", False])

        records = await self._client.search_read(
            "ir.model", domain, fields=MODEL_FIELDS, order="model"
        )
        models = [ModelDescriptor.from_record(r) for r in records]
        logger.debug("Loaded %d models from ir.model", len(models))

        self._cache.set_models(models, include_transient)
        return filter_models(models, include_transient, modules)

    async def get_fields(self, model: str, bypass_cache: bool = False) -> list[FieldDescriptor]:
        """List the fields of ``model``; an unknown model yields ``[]``."""
        if not bypass_cache:
            cached = self._cache.get_fields(model)
            if cached is not None:
                return cached

        records = await self._client.search_read(
            "ir.model.fields", [["model", "=", model]], fields=FIELD_FIELDS, order="name"
        )
        fields = [FieldDescriptor.from_record(r) for r in records]
        logger.debug("Loaded %d fields for %s", len(fields), model)

        self._cache.set_fields(model, fields)
        return fields

    async def get_model_metadata(self, model: str, bypass_cache: bool = False) -> ModelMetadata:
        """Return the model descriptor with its fields.

        Raises MISSING_ERROR when the model does not exist.
        """
        if not bypass_cache:
            cached = self._cache.get_metadata(model)
            if cached is not None:
                return cached

        models = await self.get_models(include_transient=True, bypass_cache=bypass_cache)
        descriptor = next((m for m in models if m.model == model), None)
        if descriptor is None:
            raise OdooError.missing(
                f"Model '{model}' not found in Odoo instance", {"model": model}
            )

        fields = await self.get_fields(model, bypass_cache=bypass_cache)
        metadata = ModelMetadata(model=descriptor, fields=fields)
        self._cache.set_metadata(model, metadata)
        return metadata

    def clear_cache(self) -> None:
        self._cache.clear()

    def clear_model_cache(self, model: str) -> None:
        self._cache.clear_model(model)
