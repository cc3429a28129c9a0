"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Union

from covid_stats.common.constants import COUNT_KEYS


@dataclass(frozen=True)
class ReportRow:
    country: str | None
    region: str | None
    place: str | None
    cases: int
    deaths: int
    recoveries: int

    def name_for(self, granularity: str) -> str | None:
        return getattr(self, granularity)

    def counts(self) -> Counts:
        return Counts(cases=self.cases, deaths=self.deaths, recoveries=self.recoveries)


@dataclass(frozen=True)
class Country:
    key: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Region:
    key: str
    name: str | None
    full_name: str
    country: Country

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Place:
    key: str
    name: str | None
    full_name: str
    country: Country
    region: Region

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


Location = Union[Country, Region, Place]


@dataclass(frozen=True)
class Counts:
    cases: int = 0
    deaths: int = 0
    recoveries: int = 0

    def plus(self, other: Counts) -> Counts:
        return Counts(**{k: getattr(self, k) + getattr(other, k) for k in COUNT_KEYS})

    def increase_over(self, previous: Counts) -> Counts:
        """Per-kind increase since ``previous``; decreases clamp to zero."""
        return Counts(**{k: max(getattr(self, k) - getattr(previous, k), 0) for k in COUNT_KEYS})

    def to_dict(self) -> dict[str, int]:
        return {k: getattr(self, k) for k in COUNT_KEYS}


@dataclass(frozen=True)
class DatedCount:
    new: Counts
    cumulative: Counts

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {"new": self.new.to_dict(), "cumulative": self.cumulative.to_dict()}
