"""
Continent enrichment for visa records.

The country-name -> continent lookup is an injected collaborator so its mapping
table can be swapped without touching the pipeline. The default implementation
wraps pycountry (name resolution) and pycountry-convert (ISO alpha-2 -> continent).
"""

from typing import Optional, Protocol

import polars as pl
import pycountry
from pycountry_convert import (
    convert_continent_code_to_continent_name,
    country_alpha2_to_continent_code,
)

from src.contracts.schemas import CONTINENT_ALIASES, CONTINENT_BY_ALPHA_2, UNCLASSIFIED_CONTINENT


class ContinentClassifier(Protocol):
    def classify(self, name: str) -> Optional[str]:
        """Return the continent name for a country name, or None if unresolved."""
        ...


class PycountryContinentClassifier:
    """
    Resolve country names through the ISO 3166 registry.

    Tries an alias table first, then pycountry's exact lookup (alpha codes, name,
    official name, case-insensitive), then a country-level match on the short form
    of registry names ("Iran" for "Iran, Islamic Republic of"). Subdivisions are
    never matched, so region names stay unresolved.
    """

    def __init__(self, aliases: Optional[dict[str, str]] = None):
        self.aliases = {k.lower(): v for k, v in (aliases if aliases is not None else CONTINENT_ALIASES).items()}

    @staticmethod
    def _short_name(value: str) -> str:
        return value.split(",")[0].split(" (")[0].strip().lower()

    def _alpha_2(self, name: str) -> Optional[str]:
        try:
            return pycountry.countries.lookup(name).alpha_2
        except LookupError:
            pass

        query = name.lower()
        matches = set()
        for country in pycountry.countries:
            for attr in ("name", "common_name", "official_name"):
                value = getattr(country, attr, None)
                if value and self._short_name(value) == query:
                    matches.add(country.alpha_2)
        # ambiguous short forms ("Korea") stay unresolved
        return matches.pop() if len(matches) == 1 else None

    def classify(self, name: str) -> Optional[str]:
        if name is None:
            return None
        name = str(name).strip()
        if not name:
            return None
        if name.lower() in self.aliases:
            return self.aliases[name.lower()]

        alpha_2 = self._alpha_2(name)
        if alpha_2 is None:
            return None
        try:
            code = country_alpha2_to_continent_code(alpha_2)
        except KeyError:
            # pycountry-convert has no continent for a handful of codes (e.g. VA, TL)
            return CONTINENT_BY_ALPHA_2.get(alpha_2)
        return convert_continent_code_to_continent_name(code)


def continent_lookup(countries: list[str], classifier: ContinentClassifier) -> dict[str, str]:
    """Classify each distinct country once, substituting the sentinel for misses."""
    lookup = {}
    for country in countries:
        continent = classifier.classify(country)
        lookup[country] = continent if continent else UNCLASSIFIED_CONTINENT
    return lookup


def add_continent(df: pl.DataFrame, classifier: Optional[ContinentClassifier] = None) -> pl.DataFrame:
    """
    Stage F: add a continent column. Every record gets a value: a continent
    name or UNCLASSIFIED_CONTINENT.
    """
    if classifier is None:
        classifier = PycountryContinentClassifier()

    countries = df["consulate_country"].drop_nulls().unique(maintain_order=True).to_list()
    lookup = continent_lookup(countries, classifier)
    if not lookup:
        return df.with_columns(pl.lit(UNCLASSIFIED_CONTINENT, dtype=pl.Utf8).alias("continent"))
    return df.with_columns(
        pl.col("consulate_country")
          .replace_strict(lookup, default=UNCLASSIFIED_CONTINENT, return_dtype=pl.Utf8)
          .alias("continent")
    )
