from __future__ import annotations
import csv
import io
import json
from pathlib import Path
from typing import Optional, Sequence

from pqzkbench.metrics import FIELDNAMES, AggregatedResult

FORMATS = ("json", "csv")


def render(results: Sequence[AggregatedResult], fmt: str) -> str:
    rows = [r.as_row() for r in results]
    if fmt == "json":
        return json.dumps(rows, indent=2) + "\n"
    if fmt == "csv":
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=FIELDNAMES, lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
        return buf.getvalue()
    raise ValueError(f"Unsupported output format '{fmt}'. Valid options: {', '.join(FORMATS)}")


def write_results(results: Sequence[AggregatedResult], fmt: str, path: Optional[Path] = None) -> str:
    """Render `results`; also write them to `path` when one is given."""
    text = render(results, fmt)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return text
