"""Coordinate transforms between the equatorial, galactic, and Cartesian frames.

All angles are in degrees, except ``to_cartesian_from_equatorial`` which takes
right ascension in hours the way star charts usually quote it. Catalog RA from
the Exoplanet Archive is already in degrees and goes through
``to_cartesian_from_equatorial_degrees``.

Nothing here validates input. The transforms run on numpy ufuncs, so NaN and
infinities come back as NaN components instead of raising; callers decide what
is unrenderable.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from exoplanetmap.models import (
    CartesianPosition,
    EquatorialCoordinate,
    GalacticCoordinate,
    GalacticPole,
    SunGalacticParameters,
)

# IAU 1958 system, pole and node expressed in J2000 equatorial coordinates
IAU_1958_POLE = GalacticPole(
    ra_deg=192.85948, dec_deg=27.12825, node_longitude_deg=32.93192
)
SUN_GALACTIC = SunGalacticParameters(l_deg=90.0, b_deg=0.0, distance_kpc=8.3)

DEGREES_PER_HOUR = 15.0
PARSECS_PER_KILOPARSEC = 1000.0


def hours_to_degrees(hours: float) -> float:
    """1 hour of right ascension = 15 degrees of arc."""
    return hours * DEGREES_PER_HOUR


def _wrap_360(deg: ArrayLike) -> NDArray[np.float64]:
    wrapped = np.mod(deg, 360.0)
    # np.mod(-1e-17, 360.0) rounds to 360.0
    return np.where(wrapped >= 360.0, 0.0, wrapped)


def _spherical_to_cartesian(
    lon_deg: ArrayLike, lat_deg: ArrayLike, distance: ArrayLike
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    lon = np.radians(lon_deg)
    lat = np.radians(lat_deg)
    with np.errstate(invalid="ignore"):
        cos_lat = np.cos(lat)
        x = distance * cos_lat * np.cos(lon)
        y = distance * cos_lat * np.sin(lon)
        z = distance * np.sin(lat)
    return x, y, z


def _rotate_pole(
    lon_deg: ArrayLike,
    lat_deg: ArrayLike,
    pole_lon_deg: float,
    pole_lat_deg: float,
    node_deg: float,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Spherical rotation that moves ``(pole_lon, pole_lat)`` to the new pole.

    The same formula serves both directions: equatorial -> galactic uses the
    galactic pole in equatorial coordinates and the galactic longitude of the
    north celestial pole; galactic -> equatorial swaps their roles.
    """
    lon = np.radians(lon_deg)
    lat = np.radians(lat_deg)
    pole_lon = np.radians(pole_lon_deg)
    pole_lat = np.radians(pole_lat_deg)
    node = np.radians(node_deg)

    with np.errstate(invalid="ignore"):
        d_lon = lon - pole_lon
        sin_new_lat = np.sin(lat) * np.sin(pole_lat) + np.cos(lat) * np.cos(
            pole_lat
        ) * np.cos(d_lon)
        new_lat = np.arcsin(np.clip(sin_new_lat, -1.0, 1.0))
        new_lon = node - np.arctan2(
            np.cos(lat) * np.sin(d_lon),
            np.sin(lat) * np.cos(pole_lat)
            - np.cos(lat) * np.sin(pole_lat) * np.cos(d_lon),
        )
    return _wrap_360(np.degrees(new_lon)), np.degrees(new_lat)


def _ncp_galactic_longitude(pole: GalacticPole) -> float:
    # The ascending node sits 90 degrees of galactic longitude before the NCP
    return pole.node_longitude_deg + 90.0


def to_cartesian_from_equatorial(
    ra_hours: float, dec_deg: float, distance: float = 1.0
) -> CartesianPosition:
    """Convert right ascension (hours), declination and distance to x/y/z.

    x points to RA 0h on the equator, y to RA 6h, z to the north celestial
    pole. The vector length equals ``distance``; omit it for the unit sphere.
    Out-of-range angles are accepted since RA and Dec are cyclic under the
    trigonometric functions.

    Args:
        ra_hours: Right ascension in hours (canonically 0-24).
        dec_deg: Declination in degrees (canonically -90..90).
        distance: Distance in whatever unit the caller wants back.

    Returns:
        CartesianPosition in the units of ``distance``.
    """
    return to_cartesian_from_equatorial_degrees(
        hours_to_degrees(ra_hours), dec_deg, distance
    )


def to_cartesian_from_equatorial_degrees(
    ra_deg: float, dec_deg: float, distance: float = 1.0
) -> CartesianPosition:
    """Same as ``to_cartesian_from_equatorial`` with right ascension in degrees."""
    x, y, z = _spherical_to_cartesian(ra_deg, dec_deg, distance)
    return CartesianPosition(x=float(x), y=float(y), z=float(z))


def to_galactic(
    ra_deg: float, dec_deg: float, pole: GalacticPole = IAU_1958_POLE
) -> GalacticCoordinate:
    """Convert equatorial (RA, Dec) in degrees to galactic (l, b) in degrees.

    Latitude is always within [-90, 90] and longitude within [0, 360). At the
    celestial poles (Dec = +/-90) right ascension is meaningless and so is the
    returned longitude.

    Args:
        ra_deg: Right ascension in degrees.
        dec_deg: Declination in degrees.
        pole: Frame orientation. Defaults to the IAU 1958 system.

    Returns:
        GalacticCoordinate.
    """
    l_deg, b_deg = _rotate_pole(
        ra_deg, dec_deg, pole.ra_deg, pole.dec_deg, _ncp_galactic_longitude(pole)
    )
    return GalacticCoordinate(l_deg=float(l_deg), b_deg=float(b_deg))


def to_equatorial_from_galactic(
    l_deg: float, b_deg: float, pole: GalacticPole = IAU_1958_POLE
) -> EquatorialCoordinate:
    """Inverse of ``to_galactic``. Right ascension is returned in [0, 360) degrees."""
    ra_deg, dec_deg = _rotate_pole(
        l_deg, b_deg, _ncp_galactic_longitude(pole), pole.dec_deg, pole.ra_deg
    )
    return EquatorialCoordinate(ra_deg=float(ra_deg), dec_deg=float(dec_deg))


def to_cartesian_from_galactic(
    l_deg: float, b_deg: float, distance_kpc: float
) -> CartesianPosition:
    """Convert galactic (l, b) and distance to x/y/z.

    x points toward the galactic centre, y in the direction of galactic
    rotation, z toward the north galactic pole. Distances from the archive are
    in parsecs; divide by ``PARSECS_PER_KILOPARSEC`` first.
    """
    x, y, z = _spherical_to_cartesian(l_deg, b_deg, distance_kpc)
    return CartesianPosition(x=float(x), y=float(y), z=float(z))


def sun_galactic_position() -> CartesianPosition:
    """The Sun's position in the galactocentric frame, in kiloparsecs."""
    return to_cartesian_from_galactic(
        SUN_GALACTIC.l_deg, SUN_GALACTIC.b_deg, SUN_GALACTIC.distance_kpc
    )


def _cartesian_array(
    lon_deg: ArrayLike, lat_deg: ArrayLike, distance: ArrayLike
) -> NDArray[np.float64]:
    x, y, z = _spherical_to_cartesian(
        np.asarray(lon_deg, dtype=np.float64),
        np.asarray(lat_deg, dtype=np.float64),
        np.asarray(distance, dtype=np.float64),
    )
    return np.stack(np.broadcast_arrays(x, y, z), axis=-1)


def equatorial_to_cartesian_array(
    ra_deg: ArrayLike, dec_deg: ArrayLike, distance: ArrayLike = 1.0
) -> NDArray[np.float64]:
    """Vectorized ``to_cartesian_from_equatorial_degrees``.

    Inputs broadcast against each other. Returns an array of shape ``(..., 3)``.
    """
    return _cartesian_array(ra_deg, dec_deg, distance)


def galactic_to_cartesian_array(
    l_deg: ArrayLike, b_deg: ArrayLike, distance_kpc: ArrayLike = 1.0
) -> NDArray[np.float64]:
    """Vectorized ``to_cartesian_from_galactic``. Shape ``(..., 3)``."""
    return _cartesian_array(l_deg, b_deg, distance_kpc)


def equatorial_to_galactic_array(
    ra_deg: ArrayLike, dec_deg: ArrayLike, pole: GalacticPole = IAU_1958_POLE
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Vectorized ``to_galactic``. Returns ``(l_deg, b_deg)`` arrays."""
    return _rotate_pole(
        np.asarray(ra_deg, dtype=np.float64),
        np.asarray(dec_deg, dtype=np.float64),
        pole.ra_deg,
        pole.dec_deg,
        _ncp_galactic_longitude(pole),
    )
