"""Arable category of product groups, derived from their FADN products."""

from typing import Iterable

from farmdata.core.domain_types import ARABLE_CATEGORY


def is_arable_majority(fadn_arable_flags: list[bool]) -> bool:
    """Strictly more than half of the related FADN products are arable."""
    return sum(1 for flag in fadn_arable_flags if flag) * 2 > len(fadn_arable_flags)


def update_arable_category(
    categories: Iterable[str] | None, fadn_arable_flags: Iterable[bool],
) -> list[str]:
    """Categories with "Arable" added or removed; unchanged without related products."""
    current = list(categories or [])
    flags = list(fadn_arable_flags)
    if not flags:
        return current
    without = [c for c in current if c != ARABLE_CATEGORY]
    if is_arable_majority(flags):
        return sorted(without + [ARABLE_CATEGORY])
    return sorted(without)
