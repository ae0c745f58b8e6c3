"""Helpers shared by the graph services."""

from typing import Iterable, List, Optional


def unique_ids(ids: Iterable[int]) -> List[int]:
    """Drop repeated IDs, keeping first-seen order."""
    seen = set()
    result = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def normalize_attribution(value: Optional[str]) -> Optional[str]:
    """Blank attribution means none was given."""
    if value is None or not value.strip():
        return None
    return value.strip()
