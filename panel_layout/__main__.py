"""
Panel layout — entry point.

Usage:
    python -m panel_layout layout --selection selection.json --out outputs/run1
    python -m panel_layout check-map --map config/PanelLayoutMap.json
    python -m panel_layout serve --port 3000
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from panel_layout.pipeline.mapping import SelectionError
from panel_layout.pipeline.run import run_layout, write_run
from panel_layout.rules import load_layout_map


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="panel_layout", description="OLS devices → DIN-rail panel layout")
    p.add_argument("-v", "--verbose", action="store_true", help="Log per-device decisions")
    sub = p.add_subparsers(dest="cmd", required=True)

    lo = sub.add_parser("layout", help="Map and pack an exported drawing selection")
    lo.add_argument("--selection", required=True, help="Path to selection JSON (list of block records)")
    lo.add_argument("--map", default=None, help="Path to PanelLayoutMap.json (optional)")
    lo.add_argument("--modules-per-row", type=int, default=None, help="Rail capacity (default: from map)")
    lo.add_argument("--strict", action="store_true", help="Report devices with no rule, key or modules")
    lo.add_argument("--blocks", default=None, help="Path to JSON list of available layout block names")
    lo.add_argument("--out", required=True, help="Output directory")

    cm = sub.add_parser("check-map", help="Validate a PanelLayoutMap.json")
    cm.add_argument("--map", default=None, help="Path to PanelLayoutMap.json (optional)")

    sv = sub.add_parser("serve", help="Start the web API server")
    sv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    sv.add_argument("--port", type=int, default=8000, help="Port to bind")

    return p


def _read_json(path: str):
    return json.loads(Path(path).read_text(encoding="utf-8-sig"))


def _cmd_layout(args) -> int:
    map_result = load_layout_map(Path(args.map) if args.map else None)
    if not map_result.ok:
        for err in map_result.errors:
            print(f"  {err}")
        print("Layout map has errors; fix it or run check-map.")
        return 1

    try:
        selection = _read_json(args.selection)
        blocks = _read_json(args.blocks) if args.blocks else None
    except (OSError, ValueError) as exc:
        print(f"Could not read input: {exc}")
        return 1

    try:
        run = run_layout(
            selection,
            map_result.config,
            modules_per_row=args.modules_per_row,
            strict=args.strict,
            available_blocks=blocks,
        )
    except SelectionError as exc:
        print(f"Invalid selection: {exc}")
        return 1

    out_dir = Path(args.out).resolve()
    layout_path = write_run(run, out_dir)
    print(f"Placed {len(run.mapped)}/{len(run.devices)} devices on {run.din_rows} rows "
          f"({len(run.reporter.issues)} skipped, {len(run.reporter.ambiguities)} ambiguous)")
    print(f"Wrote {layout_path}")
    return 0


def _cmd_check_map(args) -> int:
    result = load_layout_map(Path(args.map) if args.map else None)
    if result.ok:
        print(f"OK: selector={len(result.config.selector_rules)}, "
              f"legacy={len(result.config.legacy_rules)}, "
              f"modules per row={result.config.default_modules_per_row}")
        return 0
    for err in result.errors:
        print(f"  {err}")
    return 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "layout":
        return _cmd_layout(args)

    if args.cmd == "check-map":
        return _cmd_check_map(args)

    if args.cmd == "serve":
        from panel_layout.web.server import main as serve_main
        serve_main(host=args.host, port=args.port)
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
