"""Pattern registry: manufacturer-specific MPN extraction rules.

The registry is an immutable value. It is built once (see
``rules.default_registry``) and passed into every similarity call; hot
reload replaces the whole object rather than mutating it.
"""

import logging
import re
import unicodedata
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .taxonomy import ComponentType, resolve_category

logger = logging.getLogger(__name__)

# Groups that mark the start of the non-functional tail of an MPN
_TAIL_GROUPS = ("color", "bin", "variant", "package", "grade")

_WHITESPACE_RE = re.compile(r'\s+')


def normalize_mpn(value) -> str:
    """Normalize an MPN for comparison: NFKC, trim, collapse spaces, upper-case.

    Returns an empty string for None or non-string input.
    """
    if not isinstance(value, str):
        return ""
    value = unicodedata.normalize("NFKC", value)
    return _WHITESPACE_RE.sub(" ", value).strip().upper()


@dataclass(frozen=True)
class ExtractionRule:
    """One manufacturer numbering scheme.

    ``category`` is a refined type, so it also carries the manufacturer.
    ``prefixes`` narrow candidate rules before regex matching.
    ``critical`` names fields whose mismatch is a functional boundary even
    within a series (e.g. pin count on a fixed-length header).
    """

    category: ComponentType
    pattern: re.Pattern
    prefixes: tuple[str, ...] = ()
    critical: frozenset[str] = frozenset()
    name: str = ""

    @property
    def manufacturer(self) -> str | None:
        return self.category.manufacturer

    def matches_prefix(self, mpn: str) -> str | None:
        """Return the longest declared prefix ``mpn`` starts with."""
        best = None
        for prefix in self.prefixes:
            if mpn.startswith(prefix) and (best is None or len(prefix) > len(best)):
                best = prefix
        return best


@dataclass(frozen=True)
class ParsedFields:
    """Fields extracted from one MPN by one rule."""

    mpn: str
    category: ComponentType
    fields: Mapping[str, str]
    base: str
    critical: frozenset[str] = frozenset()
    rule: str = ""

    @property
    def manufacturer(self) -> str | None:
        return self.category.manufacturer

    @property
    def series(self) -> str | None:
        return self.fields.get("series") or self.fields.get("family")

    def get(self, name: str) -> str | None:
        return self.fields.get(name)


def _build_fields(match: re.Match) -> tuple[dict[str, str], str]:
    """Named groups that participated, plus the MPN base (text before the tail)."""
    fields = {k: v for k, v in match.groupdict().items() if v}
    mpn = match.string
    tail_start = len(mpn)
    for name in _TAIL_GROUPS:
        if name in fields:
            tail_start = min(tail_start, match.start(name))
    base = mpn[:tail_start].rstrip(" -_/")
    return fields, base or mpn


class PatternRegistry:
    """Read-only lookup of extraction rules, equivalence groups and dictionaries.

    Args:
        rules: Extraction rules, tried in the given order within a category
        equivalents: {base category: {group name: member tokens}}
        dictionaries: {dictionary name: {key: value}}
    """

    def __init__(
        self,
        rules: Iterable[ExtractionRule] = (),
        equivalents: Mapping[ComponentType, Mapping[str, Iterable[str]]] | None = None,
        dictionaries: Mapping[str, Mapping[str, str]] | None = None,
    ):
        grouped: dict[ComponentType, list[ExtractionRule]] = {}
        for rule in rules:
            grouped.setdefault(rule.category.base, []).append(rule)
        self._rules = MappingProxyType({k: tuple(v) for k, v in grouped.items()})

        # A token may belong to several groups (vendor line + clone family)
        index: dict[ComponentType, MappingProxyType] = {}
        for category, groups in (equivalents or {}).items():
            tokens: dict[str, set[str]] = {}
            for group_name, members in groups.items():
                for member in members:
                    tokens.setdefault(normalize_mpn(member), set()).add(group_name)
            index[category.base] = MappingProxyType(
                {token: frozenset(names) for token, names in tokens.items()}
            )
        self._equivalents = MappingProxyType(index)

        self._dictionaries = MappingProxyType({
            name: MappingProxyType({normalize_mpn(k): v for k, v in table.items()})
            for name, table in (dictionaries or {}).items()
        })

    def __len__(self) -> int:
        return sum(len(rules) for rules in self._rules.values())

    def __repr__(self) -> str:
        return f"PatternRegistry(rules={len(self)}, categories={len(self._rules)})"

    def rules_for(self, category) -> tuple[ExtractionRule, ...]:
        """Rules registered under the base of ``category``."""
        resolved = resolve_category(category)
        if resolved is None:
            return ()
        return self._rules.get(resolved.base, ())

    def _candidates(self, category, mpn: str) -> list[ExtractionRule]:
        """Rules ordered for ``mpn``: prefix hits (longest first), then the rest."""
        rules = self.rules_for(category)
        hits = []
        rest = []
        for rule in rules:
            prefix = rule.matches_prefix(mpn)
            if prefix is not None:
                hits.append((len(prefix), rule))
            else:
                rest.append(rule)
        hits.sort(key=lambda item: item[0], reverse=True)
        return [rule for _, rule in hits] + rest

    def parse(self, category, mpn) -> ParsedFields | None:
        """Extract fields from ``mpn`` using the rules for ``category``.

        Returns None if the MPN is empty or no rule matches.
        """
        normalized = normalize_mpn(mpn)
        if not normalized:
            return None
        for rule in self._candidates(category, normalized):
            match = rule.pattern.fullmatch(normalized)
            if match:
                fields, base = _build_fields(match)
                return ParsedFields(
                    mpn=normalized,
                    category=rule.category,
                    fields=MappingProxyType(fields),
                    base=base,
                    critical=rule.critical,
                    rule=rule.name,
                )
        logger.debug(f"No extraction rule for {normalized!r} in {category}")
        return None

    def equivalence_groups(self, category, token) -> frozenset[str]:
        """Names of the equivalence groups ``token`` belongs to."""
        resolved = resolve_category(category)
        if resolved is None:
            return frozenset()
        groups = self._equivalents.get(resolved.base)
        if not groups:
            return frozenset()
        return groups.get(normalize_mpn(token), frozenset())

    def are_equivalent(self, category, token1, token2) -> bool:
        """True if both tokens share at least one equivalence group."""
        groups = self.equivalence_groups(category, token1)
        return bool(groups and groups & self.equivalence_groups(category, token2))

    def lookup(self, dictionary: str, key) -> str | None:
        """Look up ``key`` in a named token dictionary."""
        table = self._dictionaries.get(dictionary)
        if table is None:
            return None
        return table.get(normalize_mpn(key))

    def detect_category(self, mpn) -> ComponentType | None:
        """Refined category of the first rule (any category) matching ``mpn``."""
        normalized = normalize_mpn(mpn)
        if not normalized:
            return None
        for base in self._rules:
            for rule in self._candidates(base, normalized):
                if rule.pattern.fullmatch(normalized):
                    return rule.category
        return None

    def categories(self) -> tuple[ComponentType, ...]:
        """Base categories that have at least one rule."""
        return tuple(self._rules)

    def manufacturers(self, category) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for rule in self.rules_for(category):
            if rule.manufacturer:
                seen.setdefault(rule.manufacturer, None)
        return tuple(seen)
