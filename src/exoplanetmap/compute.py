"""Catalog layer: Exoplanet Archive TAP queries, row validation, and scene placement."""

import logging
import math
import os
from collections.abc import Iterable

import httpx
import numpy as np

from exoplanetmap.coords import (
    PARSECS_PER_KILOPARSEC,
    equatorial_to_cartesian_array,
    equatorial_to_galactic_array,
    galactic_to_cartesian_array,
    sun_galactic_position,
)
from exoplanetmap.models import (
    CartesianPosition,
    CatalogRow,
    ExoplanetRecord,
    GalacticCoordinate,
    PlacedExoplanet,
    SceneData,
)

logger = logging.getLogger(__name__)

_DEFAULT_ARCHIVE_URL = "https://exoplanetarchive.ipac.caltech.edu/TAP/sync"
_DEFAULT_TIMEOUT = 30.0

FRAMES = ("equatorial", "galactic")
DEFAULT_SCALE = {"equatorial": 100.0, "galactic": PARSECS_PER_KILOPARSEC}

_CATALOG_COLUMNS = (
    "pl_name",
    "hostname",
    "ra",
    "dec",
    "sy_dist",
    "pl_orbper",
    "pl_rade",
    "pl_masse",
    "pl_eqt",
    "st_teff",
    "st_rad",
    "st_mass",
    "disc_year",
)

# CatalogRow key -> ExoplanetRecord field, for the optional physical parameters
_OPTIONAL_FIELDS = {
    "pl_orbper": "orbital_period_days",
    "pl_rade": "radius_earth",
    "pl_masse": "mass_earth",
    "pl_eqt": "equilibrium_temp_k",
    "st_teff": "stellar_teff_k",
    "st_rad": "stellar_radius_sun",
    "st_mass": "stellar_mass_sun",
}


class ArchiveError(Exception):
    """Exoplanet Archive call failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _archive_url() -> str:
    return os.environ.get("EXOPLANET_ARCHIVE_URL", _DEFAULT_ARCHIVE_URL)


def _archive_timeout() -> float:
    raw = os.environ.get("EXOPLANET_ARCHIVE_TIMEOUT")
    return float(raw) if raw else _DEFAULT_TIMEOUT


def _check_positive_count(name: str, value: int | None) -> None:
    if value is not None and value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")


def _tap_get(adql: str, fmt: str, timeout: float | None) -> httpx.Response:
    if not adql or not adql.strip():
        raise ValueError("ADQL query is required")

    url = _archive_url()
    params = {"query": adql, "format": fmt}
    logger.debug("TAP query %s: %s", url, adql)
    try:
        resp = httpx.get(
            url,
            params=params,
            timeout=timeout if timeout is not None else _archive_timeout(),
        )
    except httpx.HTTPError as e:
        raise ArchiveError(f"Exoplanet Archive unreachable: {e}") from e

    if resp.is_error:
        logger.warning("Archive responded %s: %s", resp.status_code, resp.text[:500])
        raise ArchiveError(
            f"Exoplanet Archive responded with status {resp.status_code}",
            status_code=resp.status_code,
        )
    return resp


def _decode_rows(resp: httpx.Response) -> list[dict]:
    try:
        data = resp.json()
    except ValueError as e:
        raise ArchiveError(f"Invalid JSON from Exoplanet Archive: {e}") from e
    if not isinstance(data, list):
        raise ArchiveError(f"Expected a JSON array, got {type(data).__name__}")
    return data


def query_tap(
    adql: str, fmt: str = "json", timeout: float | None = None
) -> list[dict] | str:
    """Run a synchronous TAP query against the Exoplanet Archive.

    Args:
        adql: ADQL query string, e.g. ``"select distinct hostname from ps"``.
        fmt: TAP output format ("json", "csv", "votable", ...).
        timeout: Seconds before giving up. Defaults to EXOPLANET_ARCHIVE_TIMEOUT.

    Returns:
        Decoded rows for JSON responses, raw text for any other content type.

    Raises:
        ArchiveError: On transport failure, non-2xx status, or undecodable JSON.
    """
    resp = _tap_get(adql, fmt, timeout)
    content_type = resp.headers.get("content-type", "")
    if "application/json" not in content_type:
        logger.debug("TAP returned non-JSON content-type %r", content_type)
        return resp.text
    return _decode_rows(resp)


def _query_rows(adql: str) -> list[dict]:
    """JSON-format query; the body is decoded whatever the content-type says."""
    return _decode_rows(_tap_get(adql, "json", None))


def fetch_catalog_rows(limit: int | None = None) -> list[CatalogRow]:
    """Fetch planets with coordinates and physical parameters from ``pscomppars``.

    Args:
        limit: Maximum number of rows (``select top N``). None for the full table.

    Returns:
        Raw rows, unvalidated.

    Raises:
        ValueError: ``limit`` is less than 1.
    """
    _check_positive_count("limit", limit)
    top = f"top {int(limit)} " if limit is not None else ""
    adql = f"select {top}{','.join(_CATALOG_COLUMNS)} from pscomppars"
    rows = _query_rows(adql)
    logger.info("Fetched %d exoplanet rows", len(rows))
    return rows  # type: ignore[return-value]


def fetch_host_stars() -> list[str]:
    """Return the distinct host star names, alphabetically."""
    rows = _query_rows("select distinct hostname from ps order by hostname asc")
    names = [r["hostname"] for r in rows if r.get("hostname")]
    logger.info("Fetched %d host stars", len(names))
    return names


def _finite(value: object) -> float | None:
    """Coerce a JSON value to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def validate_row(row: CatalogRow) -> ExoplanetRecord | None:
    """Build an ExoplanetRecord from a raw row, or None if it can't be placed.

    A row is rejected when the name, RA, Dec, or distance is missing, when any
    of them is non-numeric or non-finite, when the distance is not positive,
    or when the declination lies outside [-90, 90].
    """
    name = row.get("pl_name")
    if not name:
        return None
    ra = _finite(row.get("ra"))
    dec = _finite(row.get("dec"))
    dist = _finite(row.get("sy_dist"))
    if ra is None or dec is None or dist is None:
        return None
    if dist <= 0 or not -90.0 <= dec <= 90.0:
        return None

    optional = {
        field: _finite(row.get(key)) for key, field in _OPTIONAL_FIELDS.items()
    }
    disc_year = _finite(row.get("disc_year"))
    return ExoplanetRecord(
        pl_name=str(name),
        hostname=str(row.get("hostname") or ""),
        ra_deg=ra,
        dec_deg=dec,
        distance_pc=dist,
        disc_year=int(disc_year) if disc_year is not None else None,
        **optional,
    )


def validate_rows(
    rows: Iterable[CatalogRow],
) -> tuple[tuple[ExoplanetRecord, ...], int]:
    """Validate rows. Returns (valid records, rejected count)."""
    records: list[ExoplanetRecord] = []
    rejected = 0
    for row in rows:
        record = validate_row(row)
        if record is None:
            rejected += 1
        else:
            records.append(record)
    return tuple(records), rejected


def _resolve_scale(frame: str, scale: float | None) -> float:
    if frame not in FRAMES:
        raise ValueError(f"Unknown frame {frame!r}; expected one of {FRAMES}")
    if scale is None:
        return DEFAULT_SCALE[frame]
    if not scale > 0:
        raise ValueError(f"scale must be positive, got {scale}")
    return float(scale)


def scaled_sun_position(scale: float) -> CartesianPosition:
    """Galactocentric Sun in scene units (parsecs divided by ``scale``)."""
    sun = sun_galactic_position()
    factor = PARSECS_PER_KILOPARSEC / scale
    return CartesianPosition(x=sun.x * factor, y=sun.y * factor, z=sun.z * factor)


def place_records(
    records: Iterable[ExoplanetRecord],
    frame: str = "equatorial",
    scale: float | None = None,
) -> tuple[PlacedExoplanet, ...]:
    """Position records in the scene frame.

    Equatorial frame: Earth-centred, x toward RA 0h, distance ``pc / scale``.
    Galactic frame: galactocentric. Each planet's heliocentric galactic vector
    (``pc / scale``) is added to the Sun's galactocentric position, so a planet
    at zero distance sits on the Sun.

    Args:
        records: Validated records.
        frame: "equatorial" or "galactic".
        scale: Divisor applied to parsec distances. Defaults to 100 for the
            equatorial frame and 1000 (kiloparsecs) for the galactic frame.

    Returns:
        Placed planets, in input order, minus any with a non-finite position.

    Raises:
        ValueError: Unknown frame or non-positive scale.
    """
    scale = _resolve_scale(frame, scale)
    records = tuple(records)
    if not records:
        return ()

    ra = np.array([r.ra_deg for r in records])
    dec = np.array([r.dec_deg for r in records])
    dist = np.array([r.distance_pc for r in records]) / scale
    l_arr, b_arr = equatorial_to_galactic_array(ra, dec)

    if frame == "equatorial":
        xyz = equatorial_to_cartesian_array(ra, dec, dist)
    else:
        sun = scaled_sun_position(scale)
        xyz = galactic_to_cartesian_array(l_arr, b_arr, dist) + np.array(sun.as_tuple())

    placed: list[PlacedExoplanet] = []
    for record, (x, y, z), l_deg, b_deg in zip(records, xyz, l_arr, b_arr):
        if not np.isfinite([x, y, z]).all():
            logger.debug("Dropping %s: non-finite position", record.pl_name)
            continue
        placed.append(
            PlacedExoplanet(
                record=record,
                position=CartesianPosition(x=float(x), y=float(y), z=float(z)),
                galactic=GalacticCoordinate(l_deg=float(l_deg), b_deg=float(b_deg)),
            )
        )
    return tuple(placed)


def build_scene(
    rows: list[CatalogRow],
    frame: str = "equatorial",
    scale: float | None = None,
    max_planets: int | None = None,
) -> SceneData:
    """Validate and place raw rows. No I/O.

    Args:
        rows: Raw archive rows.
        frame: "equatorial" or "galactic".
        scale: Distance divisor (see ``place_records``).
        max_planets: Keep at most this many valid records, in catalog order.

    Returns:
        SceneData ready for export. Records cut by the cap are not counted
        as rejected.

    Raises:
        ValueError: Unknown frame, non-positive scale, or ``max_planets`` < 1.
    """
    scale = _resolve_scale(frame, scale)
    _check_positive_count("max_planets", max_planets)
    records, rejected = validate_rows(rows)
    if max_planets is not None:
        records = records[:max_planets]
    planets = place_records(records, frame=frame, scale=scale)
    rejected += len(records) - len(planets)
    logger.info(
        "Placed %d of %d rows in %s frame (%d rejected)",
        len(planets),
        len(rows),
        frame,
        rejected,
    )
    return SceneData(
        frame=frame,
        scale=scale,
        planets=planets,
        sun=scaled_sun_position(scale) if frame == "galactic" else None,
        fetched_count=len(rows),
        rejected_count=rejected,
    )


def run(
    limit: int | None = None,
    frame: str = "equatorial",
    scale: float | None = None,
    max_planets: int | None = None,
) -> SceneData:
    """Top-level entry point: fetch the catalog and return a placed scene.

    Args:
        limit: Rows to request from the archive. None for all.
        frame: "equatorial" or "galactic".
        scale: Distance divisor (see ``place_records``).
        max_planets: Cap on placed planets after validation.

    Returns:
        Fully computed SceneData.

    Raises:
        ArchiveError: On archive failure or when no row has usable coordinates.
        ValueError: Bad frame, scale, limit, or max_planets, before any request.
    """
    _resolve_scale(frame, scale)
    _check_positive_count("limit", limit)
    _check_positive_count("max_planets", max_planets)
    rows = fetch_catalog_rows(limit)
    scene = build_scene(rows, frame=frame, scale=scale, max_planets=max_planets)
    if not scene.planets:
        raise ArchiveError("No valid exoplanets found with coordinate data")
    return scene
