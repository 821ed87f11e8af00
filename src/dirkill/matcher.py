"""Directory name matching.

Target patterns are case-insensitive substrings of a directory's base name.
Ignore patterns are regular expressions searched in the base name, and they
win over targets: an ignored directory is neither reported nor entered.
"""

import re
from typing import Iterable, NamedTuple, Optional


class InvalidPatternError(ValueError):
    """An ignore pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid regex pattern: '{pattern}' ({reason})")
        self.pattern = pattern
        self.reason = reason


class MatchResult(NamedTuple):
    matched: bool
    ignored: bool
    pattern: Optional[str] = None


class IgnorePatterns:
    """Independently compiled ignore rules."""

    def __init__(self, patterns: Iterable[str] = ()):
        compiled = []
        for pattern in patterns:
            pattern = pattern.strip()
            if not pattern:
                continue
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise InvalidPatternError(pattern, str(e)) from e
        self._patterns: list[re.Pattern] = compiled

    @classmethod
    def parse(cls, patterns_str: str) -> "IgnorePatterns":
        """Build from a comma-separated string, e.g. ``"^\\.git$,vendor"``."""
        return cls(patterns_str.split(","))

    @property
    def patterns(self) -> list[str]:
        return [p.pattern for p in self._patterns]

    def should_ignore(self, name: str) -> bool:
        if not self._patterns:
            return False
        return any(p.search(name) for p in self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __repr__(self) -> str:
        return f"IgnorePatterns({self.patterns!r})"


class PatternMatcher:
    """Decide whether a directory name is a target, ignored, or neither."""

    def __init__(
        self,
        patterns: Iterable[str],
        ignore: IgnorePatterns | Iterable[str] | None = None,
    ):
        self.patterns = [p for p in (p.strip() for p in patterns) if p]
        self._needles = [(p, p.casefold()) for p in self.patterns]
        if isinstance(ignore, IgnorePatterns):
            self.ignore = ignore
        else:
            self.ignore = IgnorePatterns(ignore or ())

    @property
    def is_empty(self) -> bool:
        """An empty matcher matches nothing."""
        return not self._needles

    def match(self, name: str) -> MatchResult:
        if self.ignore.should_ignore(name):
            return MatchResult(matched=False, ignored=True)

        folded = name.casefold()
        for pattern, needle in self._needles:
            if needle in folded:
                return MatchResult(matched=True, ignored=False, pattern=pattern)

        return MatchResult(matched=False, ignored=False)
