"""Host rules — decide whether live updates apply to a page's hostname.

A rule is either a literal hostname or a pattern written the way browser
regex literals are, ``/body/flags``.  Patterns are compiled once, when a
rule is parsed, and the compiled form travels with the rule.

Matching walks the rules in order and stops at the first hit.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

_PATTERN_SYNTAX = re.compile(r"^/(.+)/([a-z]*)$", re.DOTALL)

# Regex-literal flags and their Python equivalents; 0 means "accepted, no effect".
_FLAG_MAP: dict[str, int] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "g": 0,
    "u": 0,
    "y": 0,
}


@dataclass(frozen=True, slots=True)
class LiteralRule:
    """Matches one hostname exactly."""

    host: str

    def matches(self, host: str) -> bool:
        return host == self.host

    def serialize(self) -> str:
        return self.host


@dataclass(frozen=True, slots=True)
class PatternRule:
    """Matches hostnames the compiled pattern finds a match in.

    Attributes:
        source: The rule as written, e.g. ``/^foo\\.bar$/i``.
        regex: The compiled pattern.

    """

    source: str
    regex: re.Pattern[str]

    def matches(self, host: str) -> bool:
        return self.regex.search(host) is not None

    def serialize(self) -> str:
        return self.source


type HostRule = LiteralRule | PatternRule


def _compile_flags(letters: str) -> int | None:
    flags = 0
    for letter in letters:
        if letter not in _FLAG_MAP:
            return None
        flags |= _FLAG_MAP[letter]
    return flags


def parse_host_rule(text: str) -> HostRule:
    """Parse a persisted rule string into a HostRule.

    ``/body/flags`` becomes a PatternRule; anything else, including a
    slash-delimited string with unknown flags, is a LiteralRule.

    Raises:
        re.error: If a pattern body does not compile.

    """
    m = _PATTERN_SYNTAX.match(text)
    if m:
        flags = _compile_flags(m.group(2))
        if flags is not None:
            return PatternRule(source=text, regex=re.compile(m.group(1), flags))
    return LiteralRule(host=text)


def serialize_host_rule(rule: HostRule) -> str:
    """The persisted string form of *rule*."""
    return rule.serialize()


def find_rule(rules: Iterable[HostRule], host: str) -> HostRule | None:
    """Return the first rule matching *host*, or None."""
    for rule in rules:
        if rule.matches(host):
            return rule
    return None


def matches(rules: Iterable[HostRule], host: str) -> bool:
    """Whether live updates are enabled for *host*."""
    return find_rule(rules, host) is not None
