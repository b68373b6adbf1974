"""Shared output handlers for CLI commands."""

import csv
import io
import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from rich.console import Console

from gcweb.core.constants import FormattingConstants

console = Console()


def to_plain(item: Any) -> Any:
    """Convert models (and lists of them) into JSON-compatible data."""
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json")
    if isinstance(item, list | tuple):
        return [to_plain(i) for i in item]
    return item


def _write(content: str, output_path: Path | None) -> None:
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        console.print(f"[bold green]✓ Saved to:[/bold green] {output_path}")
    else:
        print(content)


def handle_json_output(
    data: Any,
    output_path: Path | None,
    transformer: Callable[[Any], Any] | None = None,
) -> None:
    """Handle JSON format output.

    Args:
        data: Data to output; pydantic models are dumped in JSON mode
        output_path: Optional file path to save output
        transformer: Optional function to transform data before serialization
    """
    output_data = transformer(data) if transformer else to_plain(data)
    _write(json.dumps(output_data, indent=FormattingConstants.JSON_INDENT, default=str), output_path)


def handle_csv_output(
    items: Sequence[Any],
    output_path: Path | None,
    row_transformer: Callable[[Any], dict[str, Any]] | None = None,
) -> None:
    """Handle CSV format output.

    Args:
        items: Rows to output, models or dicts
        output_path: Optional file path to save output
        row_transformer: Optional function turning an item into a flat row
    """
    rows = [row_transformer(item) if row_transformer else to_plain(item) for item in items]

    string_buffer = io.StringIO()
    if rows:
        # header from the first row keeps the model's field order
        writer = csv.DictWriter(string_buffer, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        for row in rows:
            # Flatten nested values for CSV
            flat = {}
            for key, value in row.items():
                if isinstance(value, dict | list):
                    flat[key] = json.dumps(value, default=str)
                else:
                    flat[key] = "" if value is None else value
            writer.writerow(flat)

    _write(string_buffer.getvalue(), output_path)
