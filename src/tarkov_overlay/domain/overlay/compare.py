"""Subset comparison between a declared correction and live data."""

from __future__ import annotations

from collections.abc import Mapping

from .normalize import values_equal
from .types import ABSENT, get_field


def compare_subset(override_value: object, live_value: object) -> bool:
    """Return ``True`` when ``live_value`` already satisfies ``override_value``.

    An absent override claims nothing and is always satisfied. Scalars, arrays
    and ``None`` need an exact (order-insensitive) match. Objects only need the
    keys they mention to match recursively; extra live keys are ignored.
    """

    if override_value is ABSENT:
        return True
    if not isinstance(override_value, Mapping):
        return values_equal(override_value, live_value)
    if not isinstance(live_value, Mapping):
        return False

    return all(
        compare_subset(value, get_field(live_value, key)) for key, value in override_value.items()
    )
