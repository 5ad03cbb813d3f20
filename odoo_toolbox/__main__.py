"""CLI entry point for odoo-toolbox."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from odoo_toolbox.client.odoo_client import create_client
from odoo_toolbox.codegen.generator import CodeGenerator
from odoo_toolbox.config import DEFAULT_ENV_PREFIX
from odoo_toolbox.errors import OdooError
from odoo_toolbox.introspection.introspector import Introspector
from odoo_toolbox.markdown.extractor import extract_from_directory, extract_from_file, filter_blocks
from odoo_toolbox.markdown.runner import ExampleRunner, Outcome

logger = logging.getLogger("odoo_toolbox")


def _setup_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _comma_list(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="odoo-toolbox",
        description="Odoo JSON-RPC toolbox",
    )
    parser.add_argument(
        "--env-prefix",
        default=DEFAULT_ENV_PREFIX,
        help="Prefix of the connection environment variables (default: ODOO)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default="info",
        help="Log level (default: info)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Generate TypedDict declarations for models")
    generate.add_argument("--output", required=True, help="Output Python file path")
    generate.add_argument("--models", default=None, help="Comma-separated model names")
    generate.add_argument("--modules", default=None, help="Comma-separated module names")
    generate.add_argument(
        "--include-transient", action="store_true", help="Include transient (wizard) models"
    )

    models = sub.add_parser("models", help="List models as JSON")
    models.add_argument("--modules", default=None, help="Comma-separated module names")
    models.add_argument("--include-transient", action="store_true")

    docs = sub.add_parser("test-docs", help="Run testable code blocks from markdown")
    docs.add_argument("path", help="Markdown file or directory")
    docs.add_argument("--id", dest="ids", default=None, help="Comma-separated block ids")
    docs.add_argument("--needs", default=None, help="Only blocks with any of these needs")
    docs.add_argument("--include-skipped", action="store_true")

    sub.add_parser("serve", help="Run the MCP server over stdio")
    return parser


async def _generate(args: argparse.Namespace) -> int:
    async with await create_client(args.env_prefix) as client:
        generator = CodeGenerator(Introspector(client))
        await generator.generate(
            output=args.output,
            models=_comma_list(args.models),
            modules=_comma_list(args.modules),
            include_transient=args.include_transient,
        )
    return 0


async def _models(args: argparse.Namespace) -> int:
    async with await create_client(args.env_prefix) as client:
        models = await Introspector(client).get_models(
            include_transient=args.include_transient, modules=_comma_list(args.modules)
        )
    print(json.dumps([m.to_dict() for m in models], indent=2))
    return 0


async def _test_docs(args: argparse.Namespace) -> int:
    path = Path(args.path)
    blocks = extract_from_directory(path) if path.is_dir() else extract_from_file(path)
    blocks = filter_blocks(
        blocks,
        ids=_comma_list(args.ids),
        needs=_comma_list(args.needs),
        include_skipped=args.include_skipped,
    )
    if not blocks:
        logger.warning("No testable blocks found in %s", path)
        return 0

    async with await create_client(args.env_prefix) as client:
        results = await ExampleRunner(client).run_all(blocks)

    failed = [r for r in results if r.outcome is Outcome.FAILED]
    for r in failed:
        print(f"FAILED {r.block.id} ({r.block.source_file}:{r.block.line_number}): {r.error}",
              file=sys.stderr)
    counts: dict[str, Any] = {o.value: sum(r.outcome is o for r in results) for o in Outcome}
    print(json.dumps(counts))
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level)

    if args.command == "serve":
        from odoo_toolbox.server import run_server

        runner = run_server(args.env_prefix)
    else:
        handlers = {"generate": _generate, "models": _models, "test-docs": _test_docs}
        runner = handlers[args.command](args)

    try:
        exit_code = asyncio.run(runner)
    except KeyboardInterrupt:
        exit_code = 130
    except OdooError as exc:
        print(f"Fatal: [{exc.kind.value}] {exc.message}", file=sys.stderr)
        exit_code = 1
    except Exception as exc:
        print(f"Fatal: {exc}", file=sys.stderr)
        exit_code = 1
    sys.exit(exit_code or 0)


if __name__ == "__main__":
    main()
