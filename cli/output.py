"""Output helpers for the iamx CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel

FORMATS = ("text", "json", "md", "table")


def _default_serializer(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def render(data: Any, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(data, indent=2, default=_default_serializer)
    if fmt == "md":
        return _to_markdown(data)
    if fmt == "table":
        return _to_table(data)
    if fmt == "text":
        return _to_text(data)
    raise ValueError(f"Unsupported format: {fmt}")


def emit(data: Any, fmt: str, output_path: Path | None = None) -> None:
    rendered = render(data, fmt)
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered + ("\n" if not rendered.endswith("\n") else ""), encoding="utf-8")
    else:
        print(rendered)


def load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _to_text(data: Any) -> str:
    if isinstance(data, list):
        return "\n".join(f"\t[-] {item}" for item in data)
    if isinstance(data, dict):
        return json.dumps(data, indent=2, default=_default_serializer)
    return str(data)


def _columns(rows: list[dict[str, Any]]) -> list[str]:
    """Column names in the order rows first introduce them."""
    return list(dict.fromkeys(key for row in rows for key in row))


def _is_rows(data: Any) -> bool:
    return isinstance(data, list) and bool(data) and all(isinstance(row, dict) for row in data)


def _md_cell(value: Any) -> str:
    return str(value).replace("|", "\\|")


def _to_markdown(data: Any) -> str:
    if isinstance(data, dict):
        data = [{"key": key, "value": value} for key, value in data.items()]
    if _is_rows(data):
        columns = _columns(data)
        lines = [
            "| " + " | ".join(column.capitalize() for column in columns) + " |",
            "|" + "|".join(" --- " for _ in columns) + "|",
        ]
        lines.extend("| " + " | ".join(_md_cell(row.get(column, "")) for column in columns) + " |" for row in data)
        return "\n".join(lines)
    if isinstance(data, list):
        return "\n".join(f"- `{item}`" for item in data) if data else "_No matching actions._"
    return str(data)


def _to_table(data: Any) -> str:
    if isinstance(data, dict):
        data = [{"key": key, "value": value} for key, value in data.items()]
    if not _is_rows(data):
        return "\n".join(str(item) for item in data) if isinstance(data, list) else str(data)

    columns = _columns(data)
    cells = [[str(row.get(column, "")) for column in columns] for row in data]
    widths = [max(len(column), *(len(line[pos]) for line in cells)) for pos, column in enumerate(columns)]

    def fmt(values: list[str]) -> str:
        return "  ".join(value.ljust(width) for value, width in zip(values, widths)).rstrip()

    header = fmt([column.upper() for column in columns])
    rule = "  ".join("=" * width for width in widths)
    return "\n".join([header, rule, *(fmt(line) for line in cells)])


__all__ = ["FORMATS", "emit", "render", "load_json"]
