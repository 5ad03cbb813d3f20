"""
Reading and updating properties fields on records.

The server replaces the whole properties set on every write. ``update``
therefore reads the current values and writes back the merged map unless
``merge=False`` is passed, in which case every property missing from
``values`` is reset.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from odoo_toolbox.errors import ErrorKind, OdooError
from odoo_toolbox.properties.codec import (
    PROPERTY_DEFINITION_SOURCES,
    PROPERTY_FIELD_MAPPINGS,
    merge_write_format,
)
from odoo_toolbox.properties.types import (
    PropertiesDefinition,
    PropertiesReadFormat,
    PropertiesWriteFormat,
)

if TYPE_CHECKING:
    from odoo_toolbox.client.odoo_client import OdooClient

logger = logging.getLogger("odoo_toolbox.properties")


class PropertiesService:
    def __init__(self, client: OdooClient) -> None:
        self._client = client

    async def find_properties_field(self, model: str) -> str:
        """Return the name of ``model``'s properties field."""
        try:
            fields = await self._client.search_read(
                "ir.model.fields",
                [["model", "=", model], ["ttype", "=", "properties"]],
                fields=["name"],
                limit=1,
            )
        except OdooError as e:
            if e.kind is not ErrorKind.ACCESS:
                raise
            logger.debug("Cannot read ir.model.fields, using known mappings: %s", e.message)
            fields = []

        if fields:
            return fields[0]["name"]
        if model in PROPERTY_FIELD_MAPPINGS:
            return PROPERTY_FIELD_MAPPINGS[model]
        raise OdooError.validation(f"No properties field found for model: {model}")

    async def read(
        self, model: str, res_id: int, field: str | None = None
    ) -> PropertiesReadFormat:
        field = field or await self.find_properties_field(model)
        records = await self._client.read(model, res_id, [field])
        if not records:
            raise OdooError.missing(f"Record not found: {model}/{res_id}")
        return records[0].get(field) or []

    async def update(
        self,
        model: str,
        res_id: int,
        values: PropertiesWriteFormat,
        field: str | None = None,
        merge: bool = True,
    ) -> None:
        """Write property values.

        With ``merge`` (the default) unrelated properties keep their values.
        Without it, ``values`` becomes the complete set.
        """
        field = field or await self.find_properties_field(model)

        final_values = dict(values)
        if merge:
            current = await self.read(model, res_id, field)
            final_values = merge_write_format(current, values)
            logger.debug(
                "Merged %d new values with %d existing properties",
                len(values), len(current),
            )

        await self._client.write(model, res_id, {field: final_values})

    async def get_definitions(self, model: str, parent_id: int) -> PropertiesDefinition:
        parent_model, parent_field = self._definition_source(model)
        records = await self._client.read(parent_model, parent_id, [parent_field])
        if not records:
            raise OdooError.missing(f"Parent record not found: {parent_model}/{parent_id}")
        return records[0].get(parent_field) or []

    async def set_definitions(
        self,
        model: str,
        parent_id: int,
        definitions: PropertiesDefinition,
        merge: bool = False,
    ) -> None:
        """Store property definitions on the parent record.

        With ``merge``, definitions are overlaid by name onto the existing ones.
        """
        parent_model, parent_field = self._definition_source(model)

        final_definitions = list(definitions)
        if merge:
            by_name = {d["name"]: d for d in await self.get_definitions(model, parent_id)}
            for definition in definitions:
                by_name[definition["name"]] = definition
            final_definitions = list(by_name.values())

        await self._client.write(parent_model, parent_id, {parent_field: final_definitions})

    @staticmethod
    def _definition_source(model: str) -> tuple[str, str]:
        if model not in PROPERTY_DEFINITION_SOURCES:
            raise OdooError.validation(
                f"Property definitions not supported for model: {model}"
            )
        return PROPERTY_DEFINITION_SOURCES[model]
