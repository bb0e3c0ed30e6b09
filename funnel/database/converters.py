"""
Database value converters - Python values to SQLite columns and rows back
to dataclasses.
"""

import json
import math
import sqlite3
from datetime import datetime, timezone

from .models import DBContentItem, DBSource, FieldType


def to_utc_iso(value: datetime | str) -> str:
    """
    Normalize a datetime (or ISO-8601 string) to a UTC ISO string.

    Naive datetimes are taken to be UTC. A uniform format keeps string
    comparison in SQL equal to chronological comparison.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        raise ValueError(f"Expected datetime or ISO string, got {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def encode_value(field_type: FieldType, value):
    """
    Convert a Python value to its column representation.

    Raises:
        ValueError: If the value does not fit the field type
    """
    if value is None:
        return None

    if field_type == FieldType.BOOLEAN:
        if not isinstance(value, bool):
            raise ValueError(f"Expected boolean, got {value!r}")
        return int(value)

    if field_type == FieldType.INTEGER:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Expected integer, got {value!r}")
        return value

    if field_type == FieldType.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ValueError(f"Expected number, got {value!r}")
        return value

    if field_type == FieldType.DATETIME:
        return to_utc_iso(value)

    if field_type == FieldType.TEXT_LIST:
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise ValueError(f"Expected list of strings, got {value!r}")
        return json.dumps(list(value))

    if not isinstance(value, str):
        raise ValueError(f"Expected text, got {value!r}")
    return value


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _parse_list(value: str | None) -> list[str]:
    if not value:
        return []
    try:
        items = json.loads(value)
    except json.JSONDecodeError:
        return []
    return items if isinstance(items, list) else []


def row_to_source(row: sqlite3.Row) -> DBSource:
    """Convert a database row to a DBSource."""
    return DBSource(
        id=row["id"],
        name=row["name"],
        type=row["type"],
        url=row["url"],
        is_active=bool(row["is_active"]),
        categories=_parse_list(row["categories"]),
        owner=row["owner"],
        last_fetched_at=_parse_datetime(row["last_fetched_at"]),
        fetch_error=row["fetch_error"],
        created_at=_parse_datetime(row["created_at"]) or datetime.now(timezone.utc),
    )


def row_to_content_item(row: sqlite3.Row) -> DBContentItem:
    """Convert a database row to a DBContentItem."""
    return DBContentItem(
        id=row["id"],
        title=row["title"],
        original_url=row["original_url"],
        is_processed=bool(row["is_processed"]),
        created_at=_parse_datetime(row["created_at"]) or datetime.now(timezone.utc),
        content=row["content"],
        source_id=row["source_id"],
        publish_date=_parse_datetime(row["publish_date"]),
        hidden=bool(row["hidden"]),
        summary=row["summary"],
        keywords=_parse_list(row["keywords"]),
        bullet_points=_parse_list(row["bullet_points"]),
        category=row["category"],
        priority=row["priority"] or "medium",
        estimated_read_time=row["estimated_read_time"],
        philosophy_index=row["philosophy_index"],
        personal_index=row["personal_index"],
        history_index=row["history_index"],
        science_index=row["science_index"],
        ai_index=row["ai_index"],
    )
