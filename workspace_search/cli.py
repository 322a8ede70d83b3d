# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command line interface.

    workspace-search index ROOT
    workspace-search search ROOT QUERY [-n N] [--expand]
    workspace-search stats ROOT
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from workspace_search.codebase.query_expander import LLMQueryExpander, OllamaCompletion
from workspace_search.codebase.service import IndexService
from workspace_search.config import SearchSettings
from workspace_search.errors import WorkspaceSearchError

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workspace-search", description="Index and search a code workspace"
    )
    parser.add_argument("--config", type=Path, help="YAML settings file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Rebuild the index of a workspace")
    index_parser.add_argument("root", type=Path)

    search_parser = subparsers.add_parser("search", help="Search a workspace")
    search_parser.add_argument("root", type=Path)
    search_parser.add_argument("query")
    search_parser.add_argument("-n", "--max-results", type=int, default=None)
    search_parser.add_argument(
        "--expand", action="store_true", help="Expand sparse results with a local Ollama model"
    )
    search_parser.add_argument("--model", default="qwen2.5-coder:7b", help="Ollama model name")
    search_parser.add_argument("--ollama-url", default="http://localhost:11434")

    stats_parser = subparsers.add_parser("stats", help="Show cached index statistics")
    stats_parser.add_argument("root", type=Path)

    return parser


def _format_time(timestamp: Optional[float]) -> str:
    if timestamp is None:
        return "never"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


async def _run_index(service: IndexService, console: Console) -> int:
    stats = await service.index_workspace()

    table = Table(title=f"Indexed {service.root}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Files indexed", str(stats.files_indexed))
    table.add_row("Symbols extracted", str(stats.symbols_extracted))
    table.add_row("Files discovered", str(stats.files_discovered))
    table.add_row("Files skipped", str(stats.files_skipped))
    table.add_row("Duration", f"{stats.duration_ms:.0f} ms")
    table.add_row("Saved", "yes" if stats.persisted else "no")
    console.print(table)

    if stats.persist_error:
        console.print(f"[yellow]Warning:[/] {stats.persist_error}")
    return 0


async def _run_search(args: argparse.Namespace, service: IndexService, console: Console) -> int:
    if not service.load_cache():
        await service.index_workspace()

    completion = None
    if args.expand:
        completion = OllamaCompletion(model=args.model, base_url=args.ollama_url)
        service.expander = LLMQueryExpander(
            completion, max_terms=service.settings.max_expansion_terms
        )

    try:
        results = await service.search(
            args.query, max_results=args.max_results, use_expansion=args.expand
        )
    finally:
        if completion is not None:
            await completion.close()

    if not results:
        console.print(f"No results for [bold]{args.query}[/]")
        return 1

    table = Table(title=f"Results for {args.query!r}")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Location", style="cyan")
    table.add_column("Preview")
    table.add_column("Symbols", style="magenta")
    for result in results:
        try:
            location = Path(result.path).relative_to(service.root)
        except ValueError:
            location = Path(result.path)
        symbols = ", ".join(s.name for s in result.symbols[:5])
        if len(result.symbols) > 5:
            symbols += f" (+{len(result.symbols) - 5})"
        table.add_row(
            str(result.score), f"{location}:{result.line}", result.preview.strip(), symbols
        )
    console.print(table)
    return 0


def _run_stats(service: IndexService, console: Console) -> int:
    if not service.load_cache():
        console.print(f"No index cache for {service.root}; run 'workspace-search index' first")
        return 1

    stats = service.get_stats()
    table = Table(title=f"Index of {service.root}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Files", str(stats["files"]))
    table.add_row("Symbols", str(stats["symbols"]))
    table.add_row("Last indexed", _format_time(stats["last_indexed"]))
    table.add_row("Cache", str(service.snapshot_path))
    console.print(table)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    console = Console()

    settings = SearchSettings.load(args.config)
    try:
        service = IndexService(args.root, settings)
        if args.command == "index":
            return asyncio.run(_run_index(service, console))
        if args.command == "search":
            return asyncio.run(_run_search(args, service, console))
        return _run_stats(service, console)
    except WorkspaceSearchError as e:
        console.print(f"[red]Error:[/] {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
