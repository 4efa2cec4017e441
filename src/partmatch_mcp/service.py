"""Matching service: category resolution, validation and result shaping.

Plain synchronous methods returning JSON-ready dicts. Invalid requests
return ``{"error": ..., "hint": ...}`` rather than raising, so the MCP tools
can pass results straight through.
"""

import logging
from typing import Any

from .config import DEFAULT_RANK_LIMIT, MAX_CANDIDATES, MAX_MPN_LENGTH, MAX_RANK_LIMIT
from .patterns import ParsedFields, PatternRegistry, normalize_mpn
from .rules import default_registry
from .similarity import CalculatorDispatcher, create_default_dispatcher
from .taxonomy import ComponentType, base_categories, refinements, resolve_category

logger = logging.getLogger(__name__)


def match_level(score: float) -> str:
    """Human-readable bucket for a similarity score."""
    if score >= 0.9:
        return "high"
    if score >= 0.7:
        return "medium"
    if score >= 0.4:
        return "low"
    return "none"


def _validate_mpn(value, label: str = "mpn") -> dict[str, str] | None:
    if not isinstance(value, str) or not value.strip():
        return {"error": f"{label} is required"}
    if len(value) > MAX_MPN_LENGTH:
        return {"error": f"{label} too long (max {MAX_MPN_LENGTH} characters)"}
    return None


def _fields_to_dict(parsed: ParsedFields | None) -> dict[str, Any] | None:
    if parsed is None:
        return None
    return {
        "manufacturer": parsed.manufacturer,
        "category": parsed.category.tag,
        "series": parsed.series,
        "fields": dict(parsed.fields),
    }


class PartMatcher:
    """Entry point for MPN comparison against a swappable rule registry.

    The registry reference is replaced wholesale by ``swap_registry``; calls
    already running keep the registry they started with.
    """

    def __init__(
        self,
        registry: PatternRegistry | None = None,
        dispatcher: CalculatorDispatcher | None = None,
    ):
        self._registry = registry if registry is not None else default_registry()
        self._dispatcher = dispatcher if dispatcher is not None else create_default_dispatcher()

    @property
    def registry(self) -> PatternRegistry:
        return self._registry

    @property
    def dispatcher(self) -> CalculatorDispatcher:
        return self._dispatcher

    def swap_registry(self, registry: PatternRegistry) -> PatternRegistry:
        """Install a new registry and return the previous one."""
        if not isinstance(registry, PatternRegistry):
            raise TypeError(f"Expected PatternRegistry, got {type(registry).__name__}")
        previous = self._registry
        self._registry = registry
        logger.info(f"Registry swapped: {previous!r} -> {registry!r}")
        return previous

    def _resolve(self, category, mpns: list[str], registry: PatternRegistry) -> tuple[ComponentType | None, str]:
        """Category to use and where it came from ("given", "detected", "default")."""
        if isinstance(category, str) and not category.strip():
            category = None
        if category is not None:
            return resolve_category(category), "given"

        detected = {registry.detect_category(mpn) for mpn in mpns} - {None}
        if len(detected) == 1:
            return detected.pop(), "detected"
        bases = {c.base for c in detected}
        if len(bases) == 1:
            # Same kind of part from different manufacturers
            return bases.pop(), "detected"
        # Nothing detected, or the MPNs disagree on the kind of part
        return ComponentType.GENERIC, "default"

    def compare(self, mpn1, mpn2, category=None) -> dict[str, Any]:
        """Score two MPNs.

        Args:
            mpn1: First manufacturer part number
            mpn2: Second manufacturer part number
            category: Category name or tag (e.g. "connector", "LED_CREE").
                Detected from the MPNs when omitted.

        Returns:
            Dict with similarity, match level, category and parsed fields,
            or an error dict.
        """
        for value, label in ((mpn1, "mpn1"), (mpn2, "mpn2")):
            error = _validate_mpn(value, label)
            if error:
                return error

        registry = self._registry
        resolved, source = self._resolve(category, [mpn1, mpn2], registry)
        if resolved is None:
            return {
                "error": f"Unknown category: '{category}'",
                "hint": "Use mpn_categories() to see available categories",
            }

        calculator = self._dispatcher.resolve(resolved)
        score = calculator.calculate_similarity(mpn1, mpn2, registry) if calculator else 0.0

        return {
            "mpn1": normalize_mpn(mpn1),
            "mpn2": normalize_mpn(mpn2),
            "similarity": round(score, 4),
            "match": match_level(score),
            "category": resolved.tag,
            "base_category": resolved.base.tag,
            "category_source": source,
            "calculator": calculator.name if calculator else None,
            "parsed": {
                "mpn1": _fields_to_dict(registry.parse(resolved, mpn1)),
                "mpn2": _fields_to_dict(registry.parse(resolved, mpn2)),
            },
        }

    def rank(
        self,
        mpn,
        candidates,
        category=None,
        limit: int = DEFAULT_RANK_LIMIT,
        min_score: float = 0.0,
    ) -> dict[str, Any]:
        """Rank candidate substitutes for ``mpn`` by similarity, best first."""
        error = _validate_mpn(mpn)
        if error:
            return error
        if not isinstance(candidates, (list, tuple)) or not candidates:
            return {"error": "candidates must be a non-empty list of MPNs"}
        if len(candidates) > MAX_CANDIDATES:
            return {"error": f"Too many candidates (max {MAX_CANDIDATES})"}
        limit = max(1, min(limit, MAX_RANK_LIMIT))

        registry = self._registry
        resolved, source = self._resolve(category, [mpn], registry)
        if resolved is None:
            return {
                "error": f"Unknown category: '{category}'",
                "hint": "Use mpn_categories() to see available categories",
            }
        calculator = self._dispatcher.resolve(resolved)

        scored = []
        skipped = 0
        seen: set[str] = set()
        for candidate in candidates:
            if _validate_mpn(candidate) is not None:
                skipped += 1
                continue
            normalized = normalize_mpn(candidate)
            if normalized in seen:
                continue
            seen.add(normalized)
            score = calculator.calculate_similarity(mpn, candidate, registry) if calculator else 0.0
            if score < min_score:
                continue
            parsed = registry.parse(resolved, candidate)
            scored.append({
                "mpn": normalized,
                "similarity": round(score, 4),
                "match": match_level(score),
                "manufacturer": parsed.manufacturer if parsed else None,
            })

        scored.sort(key=lambda item: (-item["similarity"], item["mpn"]))
        results = scored[:limit]
        return {
            "mpn": normalize_mpn(mpn),
            "category": resolved.tag,
            "category_source": source,
            "calculator": calculator.name if calculator else None,
            "results": results,
            "summary": {
                "scored": len(scored),
                "returned": len(results),
                "skipped": skipped,
            },
        }

    def detect_category(self, mpn) -> dict[str, Any]:
        """Identify the category and manufacturer of an MPN from its numbering scheme."""
        error = _validate_mpn(mpn)
        if error:
            return error
        registry = self._registry
        detected = registry.detect_category(mpn)
        if detected is None:
            return {
                "mpn": normalize_mpn(mpn),
                "category": None,
                "message": "No known numbering scheme matches this MPN",
            }
        return {
            "mpn": normalize_mpn(mpn),
            "category": detected.tag,
            "base_category": detected.base.tag,
            "manufacturer": detected.manufacturer,
            "parsed": _fields_to_dict(registry.parse(detected, mpn)),
        }

    def categories(self) -> dict[str, Any]:
        """Base categories with their refinements and the calculator that handles them."""
        registry = self._registry
        rows = []
        for base in base_categories():
            calculator = self._dispatcher.select(base)
            rows.append({
                "category": base.tag,
                "calculator": calculator.name if calculator else None,
                "refinements": [r.tag for r in refinements(base)],
                "manufacturers": list(registry.manufacturers(base)),
            })
        fallback = self._dispatcher.fallback
        return {
            "categories": rows,
            "fallback_calculator": fallback.name if fallback else None,
        }
