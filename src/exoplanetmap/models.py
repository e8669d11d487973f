"""Data model definitions: explicit boundaries between catalog, coordinate, and scene layers."""

import math
from dataclasses import dataclass
from typing import TypedDict


class CatalogRow(TypedDict, total=False):
    """Raw archive row (``pscomppars`` JSON). Any field may be null."""

    pl_name: str | None
    hostname: str | None
    ra: float | None  # Right ascension (degrees)
    dec: float | None  # Declination (degrees)
    sy_dist: float | None  # Distance from Earth (parsecs)
    pl_orbper: float | None
    pl_rade: float | None
    pl_masse: float | None
    pl_eqt: float | None
    st_teff: float | None
    st_rad: float | None
    st_mass: float | None
    disc_year: int | None


@dataclass(frozen=True)
class EquatorialCoordinate:
    """Sky position in the equatorial frame."""

    ra_deg: float  # Right ascension (degrees)
    dec_deg: float  # Declination (degrees, -90..90)


@dataclass(frozen=True)
class CartesianPosition:
    """A point in a right-handed Cartesian frame. Units follow the input distance."""

    x: float
    y: float
    z: float

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class GalacticCoordinate:
    """Sky position in the galactic frame."""

    l_deg: float  # Galactic longitude (degrees, 0..360)
    b_deg: float  # Galactic latitude (degrees, -90..90)


@dataclass(frozen=True)
class GalacticPole:
    """Orientation of the galactic frame relative to the equatorial frame."""

    ra_deg: float  # Right ascension of the north galactic pole
    dec_deg: float  # Declination of the north galactic pole
    node_longitude_deg: float  # Galactic longitude of the ascending node on the equator


@dataclass(frozen=True)
class SunGalacticParameters:
    """The Sun's place in the galaxy as seen from the galactic centre."""

    l_deg: float
    b_deg: float
    distance_kpc: float


@dataclass(frozen=True)
class ExoplanetRecord:
    """A validated catalog row. Coordinates and distance are always present."""

    pl_name: str
    hostname: str
    ra_deg: float  # Right ascension (degrees)
    dec_deg: float  # Declination (degrees)
    distance_pc: float  # Distance from Earth (parsecs, > 0)
    orbital_period_days: float | None = None
    radius_earth: float | None = None
    mass_earth: float | None = None
    equilibrium_temp_k: float | None = None
    stellar_teff_k: float | None = None
    stellar_radius_sun: float | None = None
    stellar_mass_sun: float | None = None
    disc_year: int | None = None

    @property
    def equatorial(self) -> EquatorialCoordinate:
        return EquatorialCoordinate(ra_deg=self.ra_deg, dec_deg=self.dec_deg)


@dataclass(frozen=True)
class PlacedExoplanet:
    """A record positioned in the scene frame."""

    record: ExoplanetRecord
    position: CartesianPosition  # Scene coordinates (scaled)
    galactic: GalacticCoordinate


@dataclass(frozen=True)
class SceneData:
    """The sole input to exporters. Fully computed state."""

    frame: str  # "equatorial" or "galactic"
    scale: float  # Divisor applied to distances before placement
    planets: tuple[PlacedExoplanet, ...]
    sun: CartesianPosition | None  # Galactocentric Sun (galactic frame only)
    fetched_count: int  # Rows returned by the archive
    rejected_count: int  # Rows dropped by validation or as unrenderable
