"""Location hierarchy resolution and deduplication.

Every country, region and place is registered once per granularity under its
normalized key. Regions and places hold the registered ancestor records
themselves, so a country is stored exactly once however many descendants
point at it.
"""

from __future__ import annotations

from covid_stats.common.constants import GRANULARITIES
from covid_stats.common.errors import MissingRequiredField
from covid_stats.common.keys import normalize_key
from covid_stats.common.models import Country, Location, Place, Region, ReportRow


def _join_names(*names: str | None) -> str:
    return ", ".join(name or "" for name in names)


class LocationResolver:
    def __init__(self, normalized_country_names: dict[str, str] | None = None) -> None:
        self.normalized_country_names = dict(normalized_country_names or {})
        self.registries: dict[str, dict[str, Location]] = {granularity: {} for granularity in GRANULARITIES}

    def registry(self, granularity: str) -> dict[str, Location]:
        return self.registries[granularity]

    def _register(self, granularity: str, location: Location) -> Location:
        registry = self.registries[granularity]
        existing = registry.get(location.key)
        if existing is not None:
            return existing
        registry[location.key] = location
        return location

    def resolve_country(self, country_name: str | None) -> Country:
        if country_name is None:
            raise MissingRequiredField("country")
        name = self.normalized_country_names.get(country_name, country_name)
        key = normalize_key(name)
        return self._register("country", Country(key=key, name=name))

    def resolve_region(self, country_name: str | None, region_name: str | None) -> Region:
        country = self.resolve_country(country_name)
        full_name = _join_names(region_name, country.name)
        key = normalize_key(full_name)
        return self._register("region", Region(key=key, name=region_name, full_name=full_name, country=country))

    def resolve_place(self, country_name: str | None, region_name: str | None, place_name: str | None) -> Place:
        country = self.resolve_country(country_name)
        region = self.resolve_region(country_name, region_name)
        full_name = _join_names(place_name, region.name, country.name)
        key = normalize_key(full_name)
        place = Place(key=key, name=place_name, full_name=full_name, country=country, region=region)
        return self._register("place", place)

    def resolve(
        self,
        granularity: str,
        country_name: str | None,
        region_name: str | None = None,
        place_name: str | None = None,
    ) -> Location:
        if granularity == "country":
            return self.resolve_country(country_name)
        if granularity == "region":
            return self.resolve_region(country_name, region_name)
        if granularity == "place":
            return self.resolve_place(country_name, region_name, place_name)
        raise ValueError(f"Unknown granularity: {granularity}")

    def resolve_row(self, granularity: str, row: ReportRow) -> Location | None:
        """Resolve ``row`` at ``granularity``; ``None`` when the row has no name for it.

        A missing country always raises, whatever the granularity.
        """
        if row.country is None:
            raise MissingRequiredField("country")
        if row.name_for(granularity) is None:
            return None
        return self.resolve(granularity, row.country, row.region, row.place)
