"""Display attributes for the known location facets."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from . import config


class Facet(Enum):
    PRIMARY_RESIDENCE = config.PRIMARY_RESIDENCE
    WORKPLACE = config.WORKPLACE
    HOTEL = config.HOTEL
    OTHER = config.OTHER_LOCATION
    UNKNOWN = ""

    @classmethod
    def from_location(cls, location: str) -> "Facet":
        try:
            return cls(location.strip())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class FacetStyle:
    color: str
    icon: str


FACET_STYLES: dict[Facet, FacetStyle] = {
    Facet.PRIMARY_RESIDENCE: FacetStyle(color="#ea580c", icon="🏠"),
    Facet.WORKPLACE: FacetStyle(color="#2563eb", icon="🏢"),
    Facet.HOTEL: FacetStyle(color="#7c3aed", icon="🏨"),
    Facet.OTHER: FacetStyle(color="#db2777", icon="📍"),
    Facet.UNKNOWN: FacetStyle(color="#475569", icon="📍"),
}


def facet_style(location: str) -> FacetStyle:
    return FACET_STYLES[Facet.from_location(location)]


__all__ = ["Facet", "FacetStyle", "FACET_STYLES", "facet_style"]
