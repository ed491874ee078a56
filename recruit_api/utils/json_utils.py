"""JSON serialization utilities."""
import json


def json_dump(payload: object) -> str:
    """Serialize object to compact JSON string."""
    return json.dumps(payload, ensure_ascii=False)


def json_load(data: str) -> object:
    """Deserialize JSON string to object."""
    return json.loads(data)


def load_str_list(data: str | None) -> list[str]:
    """Parse a JSON list of answer ids; anything else yields an empty list."""
    if not data:
        return []
    try:
        value = json_load(data)
    except (json.JSONDecodeError, TypeError):
        return []
    if isinstance(value, list):
        return [str(item) for item in value]
    # A bare scalar answer key is a single-answer list
    return [str(value)]


def load_list(data: str | None) -> list:
    """Parse a JSON list; anything else yields an empty list."""
    if not data:
        return []
    try:
        value = json_load(data)
    except (json.JSONDecodeError, TypeError):
        return []
    return value if isinstance(value, list) else []


def load_dict(data: str | None) -> dict | None:
    """Parse a JSON object; anything else yields None."""
    if not data:
        return None
    try:
        value = json_load(data)
    except (json.JSONDecodeError, TypeError):
        return None
    return value if isinstance(value, dict) else None
