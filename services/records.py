from datetime import date, datetime
from typing import Any


def get_field(record: Any, name: str, default: Any = None) -> Any:
    """Read a field from an ORM row, a dataclass/pydantic model or a plain dict."""
    if isinstance(record, dict):
        value = record.get(name, default)
    else:
        value = getattr(record, name, default)
    return default if value is None else value


def as_date(value: Any) -> date | None:
    """ISO yyyy-mm-dd string / datetime / date -> date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])
