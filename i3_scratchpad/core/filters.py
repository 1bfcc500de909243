"""Window filters of the form property=regex.

Filters narrow a set of candidate windows. Each filter's regex is searched
(not anchored) in one window property, and a window must satisfy every
filter.

Examples:
    >>> filters = parse_filters(["window-title=^Notes", "workspace=2"])
    >>> apply_filters(window, filters)
    True
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Pattern

from ..errors import InvalidPatternError, MalformedFilterError, UnknownFilterPropertyError
from ..models.window import Window


FILTER_PROPERTIES: Dict[str, Callable[[Window], str]] = {
    "app-name": lambda w: w.app_name,
    "window-title": lambda w: w.window_title,
    "app-bundle-id": lambda w: w.app_bundle_id,
    "window-id": lambda w: str(w.id),
    "workspace": lambda w: w.workspace,
    "window-layout": lambda w: w.layout.value,
}


@dataclass(frozen=True)
class Filter:
    """A compiled property=regex filter."""

    property: str
    pattern: Pattern[str]

    def matches(self, window: Window) -> bool:
        """Search the pattern in the window's property.

        Raises:
            UnknownFilterPropertyError: If the property does not exist
        """
        extract = FILTER_PROPERTIES.get(self.property)
        if extract is None:
            raise UnknownFilterPropertyError(self.property)
        return self.pattern.search(extract(window)) is not None


def parse_filter(flag: str) -> Filter:
    """Parse one property=regex flag.

    Property names are checked when the filter is applied, not here.

    Raises:
        MalformedFilterError: If '=' is missing or a side is empty
        InvalidPatternError: If the regex does not compile
    """
    if "=" not in flag:
        raise MalformedFilterError(flag)

    prop, _, pattern = flag.partition("=")
    prop = prop.strip()
    pattern = pattern.strip()
    if not prop or not pattern:
        raise MalformedFilterError(flag, empty_side=True)

    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e), what="regex pattern") from e

    return Filter(property=prop, pattern=compiled)


def parse_filters(flags: Iterable[str]) -> List[Filter]:
    """Parse filter flags, failing on the first bad one."""
    return [parse_filter(flag) for flag in flags or ()]


def check_properties(filters: Iterable[Filter]) -> None:
    """Raise UnknownFilterPropertyError for the first unknown property."""
    for f in filters:
        if f.property not in FILTER_PROPERTIES:
            raise UnknownFilterPropertyError(f.property)


def apply_filters(window: Window, filters: Iterable[Filter]) -> bool:
    """True if the window satisfies every filter; an empty set matches.

    Raises:
        UnknownFilterPropertyError: If any filter names an unknown property
    """
    filters = list(filters)
    # An unknown property fails the whole set, even after a non-match
    check_properties(filters)
    return all(f.matches(window) for f in filters)
