"""
Lifecycle and version data models

Structures for the applies_to grammar: a lifecycle word optionally followed by
a version specifier (`ga 9.1+`, `preview 9.0-9.1`, `removed =9.2`, `beta all`).
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Version = Tuple[int, ...]


class Lifecycle(str, Enum):
    """The nine applicability stages"""
    GA = "ga"
    PREVIEW = "preview"
    BETA = "beta"
    DEPRECATED = "deprecated"
    REMOVED = "removed"
    UNAVAILABLE = "unavailable"
    PLANNED = "planned"
    DEVELOPMENT = "development"
    DISCONTINUED = "discontinued"


LIFECYCLE_STATES: Tuple[str, ...] = tuple(state.value for state in Lifecycle)


@dataclass(frozen=True)
class ParsedVersionEntry:
    """
    One lifecycle + version clause

    Exactly one shape holds per entry:
        bare word / `all`: is_unbound, no start, no end
        exact `=X`:        is_exact, start == end
        range `X-Y`:       is_range, start and end both set
        `X` or `X+`:       is_unbound, start set, end None (to infinity)

    Attributes:
        original_entry: The trimmed entry text
        lifecycle: Lifecycle state
        version_spec: Raw token after the lifecycle word, None when absent
        is_range: Entry is an `X-Y` range
        is_exact: Entry is an `=X` exact version
        is_unbound: Entry has no upper version limit
        start_version: Parsed lower bound, None when absent or unparseable
        end_version: Parsed upper bound, None when absent, unbound or unparseable

    Example:
        "ga 9.1+" -> ParsedVersionEntry(lifecycle=GA, version_spec="9.1+",
                     is_unbound=True, start_version=(9, 1), end_version=None, ...)
    """
    original_entry: str
    lifecycle: Lifecycle
    version_spec: Optional[str]
    is_range: bool = False
    is_exact: bool = False
    is_unbound: bool = False
    start_version: Optional[Version] = None
    end_version: Optional[Version] = None


@dataclass(frozen=True)
class VersionOverlap:
    """Two entries covering the same version"""
    first: str
    second: str
    version: str


@dataclass
class AppliesAnalysis:
    """
    Result of one semantic pass over an applies_to value

    Attributes:
        has_implicit_entries: Some entry uses bare `state X.Y` syntax
        all_entries_implicit: Every versioned entry uses bare syntax
        unbound_count: Entries that are unbound and have a start version
        invalid_ranges: Range entries whose start is above their end
        removed_exact_as_highest: The highest entry, when it is `removed =X`
        overlap: First overlapping pair, if any
        parsed_entries: Every entry that parsed, in input order
    """
    has_implicit_entries: bool = False
    all_entries_implicit: bool = False
    unbound_count: int = 0
    invalid_ranges: List[ParsedVersionEntry] = field(default_factory=list)
    removed_exact_as_highest: Optional[ParsedVersionEntry] = None
    overlap: Optional[VersionOverlap] = None
    parsed_entries: List[ParsedVersionEntry] = field(default_factory=list)
