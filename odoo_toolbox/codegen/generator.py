"""Generate a typed declarations module from a live Odoo instance."""

from __future__ import annotations

import logging
from pathlib import Path

from odoo_toolbox.codegen.formatter import generate_complete_file
from odoo_toolbox.errors import ErrorKind, OdooError
from odoo_toolbox.introspection.introspector import Introspector
from odoo_toolbox.introspection.types import ModelMetadata

logger = logging.getLogger("odoo_toolbox.codegen")


class CodeGenerator:
    def __init__(self, introspector: Introspector) -> None:
        self._introspector = introspector

    async def collect(
        self,
        models: list[str] | None = None,
        include_transient: bool = False,
        modules: list[str] | None = None,
        bypass_cache: bool = False,
    ) -> list[ModelMetadata]:
        """Fetch metadata for the selected models.

        With an explicit ``models`` list, an unknown name raises MISSING_ERROR.
        Otherwise models that vanish mid-run are skipped with a warning.
        """
        if models:
            return [
                await self._introspector.get_model_metadata(name, bypass_cache=bypass_cache)
                for name in models
            ]

        descriptors = await self._introspector.get_models(
            include_transient=include_transient, modules=modules, bypass_cache=bypass_cache
        )
        logger.info("Found %d models", len(descriptors))

        result: list[ModelMetadata] = []
        for descriptor in descriptors:
            try:
                result.append(
                    await self._introspector.get_model_metadata(
                        descriptor.model, bypass_cache=bypass_cache
                    )
                )
            except OdooError as e:
                if e.kind is not ErrorKind.MISSING:
                    raise
                logger.warning("Skipping %s: %s", descriptor.model, e.message)
        return result

    async def generate(
        self,
        output: str | Path | None = None,
        models: list[str] | None = None,
        include_transient: bool = False,
        modules: list[str] | None = None,
        bypass_cache: bool = False,
    ) -> str:
        """Render the declarations module, writing it to ``output`` if given."""
        metadatas = await self.collect(models, include_transient, modules, bypass_cache)
        code = generate_complete_file(metadatas)

        if output is not None:
            path = Path(output)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(code, encoding="utf-8")
            logger.info("Wrote %d model declarations to %s", len(metadatas), path)

        return code
