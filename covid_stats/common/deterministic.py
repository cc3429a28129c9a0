"""Helpers for deterministic output ordering."""

from __future__ import annotations

from typing import Iterable, Mapping, TypeVar

from covid_stats.common.models import Location

K = TypeVar("K")
V = TypeVar("V")


def sorted_by_key(locations: Iterable[Location]) -> list[Location]:
    """Locations ordered lexicographically by their normalized key."""
    return sorted(locations, key=lambda location: location.key)


def sorted_mapping(mapping: Mapping[K, V]) -> dict[K, V]:
    return {key: mapping[key] for key in sorted(mapping)}
