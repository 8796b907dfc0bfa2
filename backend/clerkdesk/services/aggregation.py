"""
Client-side aggregation and search over fetched rows
"""
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Sequence


def _name_key(name: str):
    # Case-insensitive first; among equal letters lower case sorts first
    return (name.casefold(), name.swapcase())


def aggregate_societies(rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Count cases per society.

    Names are trimmed and compared case-sensitively; rows with a null or blank
    society are left out. Result is sorted alphabetically by name.
    """
    counts: Counter = Counter()
    for row in rows:
        value = row.get("society")
        if not isinstance(value, str):
            continue
        name = value.strip()
        if name:
            counts[name] += 1

    return [
        {"name": name, "count": counts[name]}
        for name in sorted(counts, key=_name_key)
    ]


def count_by_status(rows: Iterable[Mapping[str, Any]]) -> Dict[str, int]:
    counts: Counter = Counter()
    for row in rows:
        status = row.get("status")
        if status:
            counts[str(status)] += 1
    return dict(counts)


def matches_search(
    record: Mapping[str, Any],
    term: str,
    text_fields: Sequence[str] = (),
    number_fields: Sequence[str] = (),
) -> bool:
    """Case-insensitive substring match over text fields; numbers match on their digits."""
    if not term:
        return True
    needle = term.lower()
    for field in text_fields:
        value = record.get(field)
        if isinstance(value, str) and needle in value.lower():
            return True
    for field in number_fields:
        value = record.get(field)
        if value is not None and term in str(value):
            return True
    return False


def total_amount(transactions: Iterable[Mapping[str, Any]]) -> float:
    total = 0.0
    for row in transactions:
        try:
            total += float(row.get("amount") or 0)
        except (TypeError, ValueError):
            continue
    return total
