"""
FastAPI web server — layout runs and rule map editing over HTTP.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from panel_layout.pipeline.mapping import SelectionError
from panel_layout.pipeline.run import run_layout, layout_run_to_dict
from panel_layout.rules import (
    LayoutMapError,
    load_layout_map, parse_layout_map, save_layout_map,
    layout_map_result_to_dict,
)



# ── .env loader ────────────────────────────────────────────────────

ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


def _load_env(path: Path = ENV_FILE) -> None:
    """Set PANEL_LAYOUT_MAP (and friends) from .env without overriding the shell."""
    if not path.exists():
        return
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        os.environ.setdefault(key, value.strip().strip("\"'"))

_load_env()

# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="Panel Layout")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Models ─────────────────────────────────────────────────────────

class LayoutRequest(BaseModel):
    selection: list[dict[str, Any]]
    layout_map: dict[str, Any] | None = None      # inline PanelLayoutMap.json; default: saved map
    modules_per_row: int | None = None
    strict: bool = False
    available_blocks: list[str] | None = None


class LayoutMapUpdateRequest(BaseModel):
    layout_map: dict[str, Any] = Field(default_factory=dict)


# ── Routes ─────────────────────────────────────────────────────────

@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.get("/api/layout_map")
def get_layout_map():
    """Return the saved rule map with any load-time validation errors."""
    return layout_map_result_to_dict(load_layout_map())


@app.put("/api/layout_map")
def put_layout_map(req: LayoutMapUpdateRequest):
    """Validate and save a rule map.  Rejects the whole map on any error."""
    result = parse_layout_map(req.layout_map)
    if not result.ok:
        raise HTTPException(400, detail=[str(e) for e in result.errors])
    try:
        path = save_layout_map(result.config)
    except LayoutMapError as exc:
        raise HTTPException(400, detail=[str(e) for e in exc.errors])
    saved = layout_map_result_to_dict(result)
    saved["path"] = str(path)
    return saved


@app.post("/api/layout")
def build_layout(req: LayoutRequest):
    """Map and pack a drawing selection."""
    if req.layout_map is not None:
        map_result = parse_layout_map(req.layout_map)
    else:
        map_result = load_layout_map()
    if not map_result.ok:
        raise HTTPException(400, detail=[str(e) for e in map_result.errors])

    try:
        run = run_layout(
            req.selection,
            map_result.config,
            modules_per_row=req.modules_per_row,
            strict=req.strict,
            available_blocks=req.available_blocks,
        )
    except SelectionError as exc:
        raise HTTPException(400, detail=str(exc))

    result = layout_run_to_dict(run)
    result["summary"] = run.reporter.summary()
    return result


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("panel_layout.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
