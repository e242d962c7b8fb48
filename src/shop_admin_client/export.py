from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path

from .models import ExportFormat


def export_file_name(prefix: str, export_format: ExportFormat | str, today: date | None = None) -> str:
    export_format = ExportFormat(export_format)
    day = today or datetime.now(timezone.utc).date()
    return f"{prefix}_{day.isoformat()}.{export_format.value}"


def save_export(
    payload: bytes,
    *,
    prefix: str,
    export_format: ExportFormat | str,
    output_dir: Path,
    today: date | None = None,
) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / export_file_name(prefix, export_format, today)
    path.write_bytes(payload)
    return path
