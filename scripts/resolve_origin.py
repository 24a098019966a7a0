#!/usr/bin/env python3
"""Resolve every location reachable from an origin entity.

Walks the relation graph around the origin, then prints the resulting
markers (with the chains that reach them), the map bounds and the
connectors between directly related owners.

Usage
-----
Set environment variables and run::

    export RELMAP_BASE_URL="http://localhost:5000/api"
    python scripts/resolve_origin.py person:4

Options::

    --max-depth N        Walk depth (default: RELMAP_MAX_DEPTH or 2)
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --verbose            Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyrelmap import EntityRef, OriginUnresolvedError, RelMapClient, RelMapConfig, ResolutionResult  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _chain_text(chain: tuple[EntityRef, ...]) -> str:
    return " -> ".join(ref.key for ref in chain)


def _format_result(result: ResolutionResult) -> str:
    out: list[str] = [_section(f"ORIGIN  {result.origin.key}  depth={result.max_depth}")]
    out.append(f"  visited: {len(result.visited)} nodes, {len(result.edges)} edges")

    out.append(_section(f"MARKERS  ({len(result.markers)})"))
    for marker in result.markers:
        owner = marker.owner_ref.key if marker.owner_ref is not None else "-"
        out.append(
            f"  {marker.ref.key}  ({marker.lat:.6f}, {marker.lon:.6f})  {marker.relation.value}, {marker.hops} hops"
        )
        out.append(f"    label: {marker.label}")
        out.append(f"    owner: {owner}")
        for chain in marker.chains:
            out.append(f"    chain: {_chain_text(chain)}")

    out.append(_section("BOUNDS"))
    bounds = result.bounds
    if bounds.is_empty:
        out.append("  <empty>")
    else:
        out.append(f"  lat: {bounds.min_lat} .. {bounds.max_lat}")
        out.append(f"  lon: {bounds.min_lon} .. {bounds.max_lon}")

    out.append(_section(f"CONNECTORS  ({len(result.connectors)})"))
    for connector in result.connectors:
        out.append(f"  {connector.from_ref.key} -- {connector.to_ref.key}  {connector.reason}")
    return "\n".join(out)


def _result_to_json(result: ResolutionResult) -> dict[str, Any]:
    return {
        "timestamp": datetime.now(UTC).isoformat(),
        **result.model_dump(mode="json", by_alias=True, exclude={"visited", "edges"}),
    }


# ── main ─────────────────────────────────────────────────────


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Resolve and print every location reachable from an entity.",
    )
    parser.add_argument("origin", help="Origin entity as kind:id (e.g. person:4, inmueble:1)")
    parser.add_argument("--max-depth", type=int, default=None, help="Walk depth (default from config)")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        origin = EntityRef.parse(args.origin)
    except ValueError as exc:
        parser.error(str(exc))

    config = RelMapConfig.from_env()
    async with RelMapClient(config) as client:
        try:
            result = await client.resolve(origin, args.max_depth)
        except OriginUnresolvedError as exc:
            cause = exc.__cause__ or exc
            print(f"!! {exc}: {cause}", file=sys.stderr)
            return 1

    if result is None:
        print("!! resolution was cancelled", file=sys.stderr)
        return 1

    text = json.dumps(_result_to_json(result), indent=2, ensure_ascii=False) if args.json_mode else _format_result(result)

    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
