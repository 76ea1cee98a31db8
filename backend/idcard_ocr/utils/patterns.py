"""
Pattern Utilities
Ordered regex fallback chains shared by the field extractors
"""
import re
from typing import Any, Callable, Dict, List, Optional, Tuple, Union


FieldValues = Dict[str, Any]
Builder = Callable[[Any], Optional[FieldValues]]


def collapse_whitespace(value: str) -> str:
    """Collapse runs of whitespace into single spaces and trim the ends"""
    return re.sub(r"\s+", " ", value).strip()


class FallbackChain:
    """
    Ordered list of (pattern, builder) pairs tried until one succeeds

    A builder turns a match into field values. It may return None to reject
    the match, in which case the next pattern is tried. With find_all=True
    each builder receives every non-overlapping match in document order
    instead of the first one.
    """

    def __init__(
        self,
        *matchers: Tuple[Union[str, re.Pattern], Builder],
        flags: int = 0,
        find_all: bool = False
    ):
        self.matchers: List[Tuple[re.Pattern, Builder]] = [
            (re.compile(pattern, flags) if isinstance(pattern, str) else pattern, builder)
            for pattern, builder in matchers
        ]
        self.find_all = find_all

    def search(self, text: str) -> FieldValues:
        """Return the fields built from the first accepted match, or {}"""
        for pattern, builder in self.matchers:
            if self.find_all:
                found = list(pattern.finditer(text))
            else:
                found = pattern.search(text)

            if not found:
                continue

            values = builder(found)
            if values is not None:
                return values

        return {}
