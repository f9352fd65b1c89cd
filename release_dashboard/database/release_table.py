"""ReleaseTable - CSV persistence of canonical releases and period statistics."""

import csv
import io
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from release_dashboard.errors import MalformedReleaseTable
from release_dashboard.models import CanonicalRelease, PERIOD_STAT_COLUMNS, RELEASE_COLUMNS
from release_dashboard.utils.calendar import WEEKDAY_NAMES

logger = logging.getLogger(__name__)

_INT_FIELDS = {"release_id", "assets_count", "published_week"}
_BOOL_FIELDS = {"is_draft", "is_prerelease"}
_YEAR_RE = re.compile(r"\d{4}")
_MONTHS = {f"{m:02d}" for m in range(1, 13)}


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_bool(value: str) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"expected 'true' or 'false', got {value!r}")


def _render(rows: List[Dict[str, Any]], columns) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow([title for _, title in columns])
    for row in rows:
        writer.writerow([_format_value(row[attr]) for attr, _ in columns])
    return buf.getvalue()


def _read_rows(text: str, columns) -> List[Dict[str, str]]:
    reader = csv.DictReader(io.StringIO(text, newline=""))
    expected = [title for _, title in columns]
    if reader.fieldnames != expected:
        raise MalformedReleaseTable(f"unexpected header {reader.fieldnames!r}, expected {expected!r}")

    rows = []
    for line_no, row in enumerate(reader, start=2):
        if None in row or any(v is None for v in row.values()):
            raise MalformedReleaseTable(f"row {line_no}: wrong number of columns")
        rows.append({attr: row[title] for attr, title in columns})
    return rows


def serialize_releases(releases: List[CanonicalRelease]) -> str:
    """Render releases as CSV text, sorted by (repo, published_at, release_id)."""
    ordered = sorted(releases, key=lambda r: (r.repo, r.published_at, r.release_id))
    return _render([vars(r) for r in ordered], RELEASE_COLUMNS)


def _check_calendar_fields(row):
    if row["published_weekday"] not in WEEKDAY_NAMES:
        raise ValueError(f"unknown weekday {row['published_weekday']!r}")
    if not _YEAR_RE.fullmatch(row["published_year"]):
        raise ValueError(f"year {row['published_year']!r} is not four digits")
    if row["published_month"].zfill(2) not in _MONTHS:
        raise ValueError(f"month {row['published_month']!r} is not 01..12")
    row["published_month"] = row["published_month"].zfill(2)


def parse_releases(text: str) -> List[CanonicalRelease]:
    """Parse CSV text produced by serialize_releases back into CanonicalRelease values.

    Raises:
        MalformedReleaseTable: on a wrong header, ragged rows, unparseable values
            or calendar fields out of range.
    """
    releases = []
    for line_no, row in enumerate(_read_rows(text, RELEASE_COLUMNS), start=2):
        try:
            for attr in _INT_FIELDS:
                row[attr] = int(row[attr])
            for attr in _BOOL_FIELDS:
                row[attr] = _parse_bool(row[attr])
            _check_calendar_fields(row)
        except ValueError as e:
            raise MalformedReleaseTable(f"row {line_no}: {e}")
        releases.append(CanonicalRelease(**row))
    return releases


def serialize_period_stats(rows: List[Dict[str, Any]]) -> str:
    """Render {type, period, repo, count} rows, sorted by (repo, type, period)."""
    ordered = sorted(rows, key=lambda r: (r["repo"], r["type"], r["period"]))
    return _render(ordered, PERIOD_STAT_COLUMNS)


def parse_period_stats(text: str) -> List[Dict[str, Any]]:
    rows = _read_rows(text, PERIOD_STAT_COLUMNS)
    try:
        for row in rows:
            row["count"] = int(row["count"])
    except ValueError as e:
        raise MalformedReleaseTable(str(e))
    return rows


def _write_atomic(path: Path, text: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    os.replace(tmp_path, path)


class ReleaseTable:
    """File-backed table of canonical releases plus its period statistics table.

    Writes replace the whole file; readers never see a half-written table.
    """

    def __init__(self, raw_path: Path, stats_path: Optional[Path] = None):
        self.raw_path = Path(raw_path)
        self.stats_path = Path(stats_path) if stats_path else None

    def get_last_modified(self) -> Optional[float]:
        """mtime of the release table, or None if it has not been written yet."""
        try:
            return self.raw_path.stat().st_mtime
        except FileNotFoundError:
            return None

    def save_releases(self, releases: List[CanonicalRelease]):
        _write_atomic(self.raw_path, serialize_releases(releases))
        logger.info(f"Wrote {len(releases)} releases to {self.raw_path}")

    def load_releases(self) -> List[CanonicalRelease]:
        """Read the release table.

        Raises:
            MalformedReleaseTable: if the file is missing or malformed.
        """
        try:
            with open(self.raw_path, encoding="utf-8", newline="") as f:
                text = f.read()
        except FileNotFoundError:
            raise MalformedReleaseTable(f"release table {self.raw_path} does not exist")
        return parse_releases(text)

    def save_period_stats(self, rows: List[Dict[str, Any]]):
        if self.stats_path is None:
            raise ValueError("no stats_path configured for this table")
        _write_atomic(self.stats_path, serialize_period_stats(rows))
        logger.info(f"Wrote {len(rows)} period stats rows to {self.stats_path}")

    def load_period_stats(self) -> List[Dict[str, Any]]:
        if self.stats_path is None:
            raise ValueError("no stats_path configured for this table")
        try:
            with open(self.stats_path, encoding="utf-8", newline="") as f:
                text = f.read()
        except FileNotFoundError:
            raise MalformedReleaseTable(f"stats table {self.stats_path} does not exist")
        return parse_period_stats(text)
