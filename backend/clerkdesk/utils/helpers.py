"""
Utility helper functions
"""
import time
import uuid


def generate_uuid() -> str:
    """Generate UUID v4"""
    return str(uuid.uuid4())


def generate_employee_id(now_ms: int = None) -> str:
    """EMP- followed by the last six digits of the millisecond clock"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"EMP-{str(now_ms)[-6:]}"


def format_count(value) -> str:
    """Dashboard metrics are shown as strings; anything unusable reads '0'"""
    if value is None:
        return "0"
    try:
        return str(int(value))
    except (TypeError, ValueError):
        return "0"


def coerce_id(value):
    """Numeric ids travel as numbers; anything else (uuids) stays a string"""
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value
