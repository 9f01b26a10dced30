"""Check registries.

A :class:`CheckRegistry` holds the ordered, immutable catalog of one
taxonomy and answers "which checks run for this configuration".
"""

from __future__ import annotations

from collections.abc import Iterable

from complyscan.catalogs.owasp import OWASP_CHECKS
from complyscan.catalogs.wcag import WCAG_CHECKS
from complyscan.config import parse_category
from complyscan.models import Category, CheckDefinition, Level, Taxonomy


class RegistryError(ValueError):
    """Raised when a check catalog is malformed."""


class CheckRegistry:
    """Ordered catalog of :class:`CheckDefinition` for one taxonomy.

    Raises:
        RegistryError: On a duplicate id, an id not matching the taxonomy's
            pattern, a category or severity from another taxonomy, or a WCAG
            check without a conformance level.
    """

    def __init__(self, taxonomy: Taxonomy, definitions: Iterable[CheckDefinition]) -> None:
        self.taxonomy = taxonomy
        checks = tuple(definitions)
        seen: set[str] = set()
        for check in checks:
            if check.id in seen:
                raise RegistryError(f"Duplicate check id: {check.id}")
            seen.add(check.id)
            self._validate(check)
        self._checks = checks

    def _validate(self, check: CheckDefinition) -> None:
        taxonomy = self.taxonomy
        if not taxonomy.id_pattern.match(check.id):
            raise RegistryError(f"{check.id}: id does not match the {taxonomy.value} pattern")
        if check.category not in taxonomy.categories:
            raise RegistryError(f"{check.id}: {check.category!r} is not a {taxonomy.value} category")
        if check.severity not in taxonomy.severities:
            raise RegistryError(
                f"{check.id}: severity {check.severity.value!r} is not used by {taxonomy.value}"
            )
        if taxonomy is Taxonomy.WCAG and check.level is None:
            raise RegistryError(f"{check.id}: WCAG checks need a conformance level")

    def __len__(self) -> int:
        return len(self._checks)

    def __iter__(self):
        return iter(self._checks)

    def get(self, check_id: str) -> CheckDefinition | None:
        for check in self._checks:
            if check.id == check_id:
                return check
        return None

    def list_checks(
        self,
        skip_categories: Iterable[Category | str] = (),
        level: Level | None = None,
    ) -> list[CheckDefinition]:
        """Return the checks to run, in registry order.

        Args:
            skip_categories: Categories whose checks are left out, as members,
                values or short codes.
            level: Highest conformance level to include (WCAG only).

        Raises:
            ConfigError: If a skip category is not one of this taxonomy's.
        """
        skipped = {parse_category(self.taxonomy, c) for c in skip_categories}
        selected = []
        for check in self._checks:
            if check.category in skipped:
                continue
            if level is not None and check.level is not None and check.level.rank > level.rank:
                continue
            selected.append(check)
        return selected


OWASP_REGISTRY = CheckRegistry(Taxonomy.OWASP, OWASP_CHECKS)
WCAG_REGISTRY = CheckRegistry(Taxonomy.WCAG, WCAG_CHECKS)

_REGISTRIES: dict[Taxonomy, CheckRegistry] = {
    Taxonomy.OWASP: OWASP_REGISTRY,
    Taxonomy.WCAG: WCAG_REGISTRY,
}


def get_registry(taxonomy: Taxonomy) -> CheckRegistry:
    return _REGISTRIES[taxonomy]


def list_checks(
    taxonomy: Taxonomy,
    skip_categories: Iterable[Category | str] = (),
    level: Level | None = None,
) -> list[CheckDefinition]:
    """Shortcut for ``get_registry(taxonomy).list_checks(...)``."""
    return get_registry(taxonomy).list_checks(skip_categories, level)
