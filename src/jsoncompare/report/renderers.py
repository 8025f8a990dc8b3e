from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jsoncompare.core.canonical import canonical_dumps
from jsoncompare.core.constants import REPORT_SCHEMA_VERSION
from jsoncompare.core.diff.models import CompareResult, DiffRecord

_MAX_VALUE_CHARS = 80


def _short(value: Any) -> str:
    text = canonical_dumps(value)
    if len(text) > _MAX_VALUE_CHARS:
        return text[: _MAX_VALUE_CHARS - 3] + "..."
    return text


def _describe(diff: DiffRecord) -> str:
    if diff.kind == "changed":
        return f"`{_short(diff.before)}` -> `{_short(diff.after)}`"
    if diff.kind == "removed":
        return f"was `{_short(diff.before)}`"
    return f"now `{_short(diff.after)}`"


def render_markdown(result: CompareResult, title: str = "Comparison") -> str:
    lines: list[str] = []
    lines.append(f"## jsoncompare Report: {title}")
    lines.append("")
    summary = result.summary()
    status = "Differences found" if result.has_differences else "Identical"
    lines.append(f"- Status: **{status}**")
    lines.append(f"- Diffs: **{summary['diff_count']}**")
    kinds = summary["kinds"]
    lines.append(
        f"- Added: **{kinds['added']}**, removed: **{kinds['removed']}**, changed: **{kinds['changed']}**"
    )

    lines.append("")
    lines.append("### Identity Keys")
    lines.append("")
    if not result.identity_keys:
        lines.append("No keyed arrays.")
    else:
        lines.append("| Array | Key | Left | Right |")
        lines.append("|---|---|---:|---:|")
        for info in result.identity_keys:
            lines.append(
                f"| `{info.array_pattern_path.value}` | `{info.identity_key}` | {info.size_left} | {info.size_right} |"
            )

    lines.append("")
    lines.append("### Diffs")
    lines.append("")
    if not result.diffs:
        lines.append("No differences.")
    else:
        for diff in result.diffs:
            lines.append(f"- `{diff.kind}` at `{diff.path.value}`: {_describe(diff)}")

    lines.append("")
    return "\n".join(lines)


def render_json(result: CompareResult) -> str:
    payload = {"schema_version": REPORT_SCHEMA_VERSION, **result.to_dict()}
    return json.dumps(payload, indent=2, sort_keys=True)


def write_reports(
    result: CompareResult,
    *,
    json_path: Path | None = None,
    md_path: Path | None = None,
    title: str = "Comparison",
) -> None:
    if json_path is not None:
        json_path.parent.mkdir(parents=True, exist_ok=True)
        json_path.write_text(render_json(result) + "\n", encoding="utf-8")
    if md_path is not None:
        md_path.parent.mkdir(parents=True, exist_ok=True)
        md_path.write_text(render_markdown(result, title=title), encoding="utf-8")
