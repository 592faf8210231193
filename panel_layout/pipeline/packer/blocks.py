"""Render-time check: layout blocks missing from the drawing's templates."""

from __future__ import annotations

from panel_layout.core.reporting import IssueReporter, SkippedDeviceIssue
from panel_layout.pipeline.mapping.models import MappedDevice

from .models import PlacementRow


REASON_MISSING_BLOCK = "layout block not found: {name}"


def check_layout_blocks(
    rows: list[PlacementRow],
    available_blocks: list[str] | set[str],
    reporter: IssueReporter | None = None,
    mapped: list[MappedDevice] | None = None,
) -> list[SkippedDeviceIssue]:
    """Report every device whose layout block has no visual template.

    Names compare case-insensitively.  A split device is reported once,
    not once per segment.  When *mapped* is given, issues carry the
    device key and source block of the mapped device.
    """
    by_id = {m.id: m for m in mapped or []}
    known = {name.strip().casefold() for name in available_blocks}
    issues: list[SkippedDeviceIssue] = []
    reported: set[str] = set()
    for row in rows:
        if row.id in reported:
            continue
        if row.layout_block_name.strip().casefold() in known:
            continue
        reported.add(row.id)
        device = by_id.get(row.id)
        issue = SkippedDeviceIssue(
            id=row.id,
            reason=REASON_MISSING_BLOCK.format(name=row.layout_block_name),
            device_key=device.device_key if device else None,
            source_block_name=device.source_block_name if device else None,
        )
        issues.append(issue)
        if reporter is not None:
            reporter.skip(issue)
    return issues
