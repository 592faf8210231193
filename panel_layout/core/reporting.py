"""Issue reporting — skipped devices and rule ambiguities for one layout run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedDeviceIssue:
    """A device that produced no placement, and why."""

    id: str
    reason: str
    device_key: str | None = None
    source_block_name: str | None = None

    def __str__(self) -> str:
        parts = [f"{self.id}: {self.reason}"]
        if self.device_key:
            parts.append(f"key={self.device_key}")
        return " ".join(parts)


@dataclass(frozen=True)
class AmbiguityWarning:
    """Several equally specific, equal-priority selector rules matched a device."""

    device_id: str
    source_block_name: str
    visibility_value: str | None
    candidates: int
    chosen_layout_block_name: str

    def __str__(self) -> str:
        return (
            f"{self.device_id}: {self.candidates} rules tie for "
            f"{self.source_block_name}|{self.visibility_value or '*'}, "
            f"using {self.chosen_layout_block_name}"
        )


@dataclass
class IssueReporter:
    """Collects diagnostics from every stage of a layout run, in order."""

    issues: list[SkippedDeviceIssue] = field(default_factory=list)
    ambiguities: list[AmbiguityWarning] = field(default_factory=list)

    def skip(self, issue: SkippedDeviceIssue) -> None:
        log.warning("Skipped device %s", issue)
        self.issues.append(issue)

    def ambiguous(self, warning: AmbiguityWarning) -> None:
        log.warning("Ambiguous selector rules: %s", warning)
        self.ambiguities.append(warning)

    @property
    def ok(self) -> bool:
        return not self.issues and not self.ambiguities

    def summary(self) -> dict:
        return {
            "skipped": len(self.issues),
            "ambiguous": len(self.ambiguities),
        }


def write_report(
    out_dir: Path,
    reporter: IssueReporter,
    *,
    modules_per_row: int,
    device_count: int,
    mapped_count: int,
    row_count: int,
    din_rows: int,
) -> Path:
    lines = []
    lines.append("# Panel layout report")
    lines.append("")
    lines.append("## Parameters")
    lines.append(f"- Modules per row: {modules_per_row}")
    lines.append(f"- Devices selected: {device_count}")
    lines.append("")
    lines.append("## Placement")
    lines.append(f"- Devices placed: {mapped_count}")
    lines.append(f"- Segments: {row_count}")
    lines.append(f"- DIN rows used: {din_rows}")
    lines.append("")
    lines.append("## Skipped devices")
    if reporter.issues:
        for it in reporter.issues:
            lines.append(f"- {it}")
    else:
        lines.append("- None.")
    lines.append("")
    lines.append("## Rule ambiguities")
    if reporter.ambiguities:
        for w in reporter.ambiguities:
            lines.append(f"- {w}")
    else:
        lines.append("- None.")
    lines.append("")
    path = out_dir / "report.md"
    path.write_text("\n".join(lines), encoding="utf-8")
    return path
