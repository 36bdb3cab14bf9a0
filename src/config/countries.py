"""Static table of tracked countries (display name, NOC code, flag)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from config.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class CountryConfig:
    name: str
    code: str
    flag: str

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ")

    @property
    def file_stem(self) -> str:
        return self.name.replace(" ", "_").lower()


DEFAULT_COUNTRIES: Tuple[CountryConfig, ...] = (
    CountryConfig("Iran", "IRI", "\U0001F1EE\U0001F1F7"),
    CountryConfig("Denmark", "DEN", "\U0001F1E9\U0001F1F0"),
    CountryConfig("Turkey", "TUR", "\U0001F1F9\U0001F1F7"),
    CountryConfig("New_Zealand", "NZL", "\U0001F1F3\U0001F1FF"),
    CountryConfig("Ukraine", "UKR", "\U0001F1FA\U0001F1E6"),
    CountryConfig("Ethiopia", "ETH", "\U0001F1EA\U0001F1F9"),
    CountryConfig("Kenya", "KEN", "\U0001F1F0\U0001F1EA"),
    CountryConfig("Sweden", "SWE", "\U0001F1F8\U0001F1EA"),
    CountryConfig("Belgium", "BEL", "\U0001F1E7\U0001F1EA"),
    CountryConfig("Georgia", "GEO", "\U0001F1EC\U0001F1EA"),
    CountryConfig("Uzbekistan", "UZB", "\U0001F1FA\U0001F1FF"),
    CountryConfig("Switzerland", "SUI", "\U0001F1E8\U0001F1ED"),
)


def _key(value: str) -> str:
    return value.strip().replace(" ", "_").lower()


def find_country(
    name_or_code: str, countries: Iterable[CountryConfig] = DEFAULT_COUNTRIES
) -> Optional[CountryConfig]:
    """Look up a country by display name (spaces or underscores) or NOC code."""
    wanted = _key(name_or_code)
    for country in countries:
        if _key(country.name) == wanted or country.code.lower() == wanted:
            return country
    return None


def select_countries(
    names: Iterable[str] | None, countries: Iterable[CountryConfig] = DEFAULT_COUNTRIES
) -> list[CountryConfig]:
    """Resolve a list of names/codes; ``None`` or empty selects every country.

    Raises ``ConfigurationError`` for a name that is not in the table.
    """
    table = list(countries)
    if not names:
        return table
    selected: list[CountryConfig] = []
    for name in names:
        country = find_country(name, table)
        if country is None:
            raise ConfigurationError(f"Unknown country: {name}")
        if country not in selected:
            selected.append(country)
    return selected
