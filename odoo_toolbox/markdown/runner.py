"""
Execution of testable markdown blocks against a live Odoo instance.

Each ``python`` block becomes the body of an async function whose
parameters are the injected dependencies; the block ``return``s its result.
Records named by ``creates`` are unlinked after the block, newest first.
"""

from __future__ import annotations

import asyncio
import builtins
import logging
import textwrap
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from odoo_toolbox.client.module_manager import ModuleManager
from odoo_toolbox.client.odoo_client import OdooClient
from odoo_toolbox.errors import OdooError
from odoo_toolbox.introspection.introspector import Introspector
from odoo_toolbox.markdown.extractor import TestableBlock

logger = logging.getLogger("odoo_toolbox.markdown")

EXECUTABLE_LANGUAGES = frozenset({"python", "py"})
DEFAULT_TIMEOUT = 30.0
_ENTRY_POINT = "__testable_block__"


class Outcome(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class RunResult:
    block: TestableBlock
    outcome: Outcome
    result: Any = None
    error: str | None = None
    duration: float = 0.0


@dataclass
class RunContext:
    """Objects made available to a running block."""

    client: OdooClient
    introspector: Introspector | None = None
    module_manager: ModuleManager | None = None
    created_records: list[tuple[str, int]] = field(default_factory=list)

    def track_record(self, model: str, record_id: int) -> None:
        self.created_records.append((model, record_id))

    @staticmethod
    def unique_name(prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex[:8]}"


def create_context(client: OdooClient, needs: list[str]) -> RunContext:
    ctx = RunContext(client=client)
    if "introspector" in needs:
        ctx.introspector = Introspector(client)
    if "module-manager" in needs:
        ctx.module_manager = ModuleManager(client)
    return ctx


async def cleanup_context(ctx: RunContext) -> None:
    """Unlink tracked records in reverse creation order, ignoring failures."""
    while ctx.created_records:
        model, record_id = ctx.created_records.pop()
        try:
            await ctx.client.unlink(model, record_id)
        except OdooError as e:
            logger.debug("Cleanup of %s/%d failed: %s", model, record_id, e.message)


def wrap_code(code: str) -> str:
    body = textwrap.indent(code.strip("\n"), "    ") if code.strip() else "    pass"
    return (
        f"async def {_ENTRY_POINT}(ctx, client, introspector, module_manager,"
        f" track_record, unique_name):\n{body}\n"
    )


async def execute_code_block(block: TestableBlock, ctx: RunContext) -> Any:
    """Run ``block`` with the context injected and return its result."""
    namespace: dict[str, Any] = {"__name__": f"testable:{block.id}", "asyncio": asyncio}
    source = wrap_code(block.code)
    exec(compile(source, f"{block.source_file}:{block.line_number}", "exec"), namespace)

    coroutine = namespace[_ENTRY_POINT](
        ctx,
        ctx.client,
        ctx.introspector,
        ctx.module_manager,
        ctx.track_record,
        ctx.unique_name,
    )
    result = await asyncio.wait_for(coroutine, block.timeout or DEFAULT_TIMEOUT)

    if block.creates and isinstance(result, int) and not isinstance(result, bool):
        ctx.track_record(block.creates, result)
    return result


def evaluate_expect(expression: str, result: Any, ctx: RunContext) -> bool:
    """Evaluate an ``expect`` expression with result, ctx, id and session in scope."""
    if isinstance(result, int) and not isinstance(result, bool):
        record_id = result
    elif isinstance(result, dict):
        record_id = result.get("id")
    else:
        record_id = None

    scope = {
        "result": result,
        "ctx": ctx,
        "id": record_id,
        "session": ctx.client.get_session(),
    }
    return bool(eval(expression, {"__builtins__": builtins}, scope))


async def check_dependencies(block: TestableBlock, ctx: RunContext) -> str | None:
    """Return a skip reason when a ``<name>-module`` need is not installed."""
    for need in block.needs:
        if not need.endswith("-module"):
            continue
        module = need[: -len("-module")]
        manager = ctx.module_manager or ModuleManager(ctx.client)
        if not await manager.is_module_installed(module):
            return f"Module '{module}' not installed"
    return None


class ExampleRunner:
    """Runs testable blocks with an authenticated client."""

    def __init__(self, client: OdooClient) -> None:
        self._client = client

    async def run_block(self, block: TestableBlock) -> RunResult:
        if block.skip is not None:
            return RunResult(block, Outcome.SKIPPED, error=block.skip or "skipped")
        if block.language not in EXECUTABLE_LANGUAGES:
            return RunResult(
                block, Outcome.SKIPPED, error=f"Unsupported language: {block.language}"
            )

        ctx = create_context(self._client, block.needs)
        start = time.monotonic()
        try:
            reason = await check_dependencies(block, ctx)
            if reason:
                return RunResult(block, Outcome.SKIPPED, error=reason)

            result = await execute_code_block(block, ctx)
            if block.expect and not evaluate_expect(block.expect, result, ctx):
                return RunResult(
                    block,
                    Outcome.FAILED,
                    result=result,
                    error=f"Expectation failed: {block.expect}",
                    duration=time.monotonic() - start,
                )
            return RunResult(
                block, Outcome.PASSED, result=result, duration=time.monotonic() - start
            )
        except Exception as e:
            logger.debug("Block %s raised", block.id, exc_info=True)
            return RunResult(
                block,
                Outcome.FAILED,
                error=f"{type(e).__name__}: {e}",
                duration=time.monotonic() - start,
            )
        finally:
            await cleanup_context(ctx)

    async def run_all(self, blocks: list[TestableBlock]) -> list[RunResult]:
        results = []
        for block in blocks:
            result = await self.run_block(block)
            logger.info(
                "%s %s (%s:%d)",
                result.outcome.value.upper(), block.id, block.source_file, block.line_number,
            )
            results.append(result)
        return results
