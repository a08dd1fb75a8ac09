"""Core data types for the tourneyhub application."""

from typing import Any, Dict, Optional, TypedDict, Union  # noqa: UP035

# Anything the record store can hold at a key.
StoreValue = Union[Dict[str, Any], list, str, int, float, bool, None]  # noqa: UP006


class FixtureDict(TypedDict):
    """A single match between two named teams."""

    label: str
    teamA: str
    teamB: str
    scheduledAt: Optional[int]
