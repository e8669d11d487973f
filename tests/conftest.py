"""Shared fixtures: archive rows shaped like ``pscomppars`` JSON."""

import pytest

from exoplanetmap.models import ExoplanetRecord


@pytest.fixture
def kepler_452b_row():
    return {
        "pl_name": "Kepler-452 b",
        "hostname": "Kepler-452",
        "ra": 291.6,
        "dec": 44.27,
        "sy_dist": 551.7,
        "pl_orbper": 384.843,
        "pl_rade": 1.63,
        "pl_masse": None,
        "pl_eqt": 265.0,
        "st_teff": 5757.0,
        "st_rad": 1.11,
        "st_mass": 1.04,
        "disc_year": 2015,
    }


@pytest.fixture
def catalog_rows(kepler_452b_row):
    """Two valid rows followed by three the validator must reject."""
    return [
        kepler_452b_row,
        {
            "pl_name": "Proxima Cen b",
            "hostname": "Proxima Cen",
            "ra": 217.39,
            "dec": -62.68,
            "sy_dist": 1.30119,
            "disc_year": 2016,
        },
        {"pl_name": "No Distance b", "hostname": "X", "ra": 10.0, "dec": 5.0, "sy_dist": None},
        {"pl_name": "Zero Distance b", "hostname": "Y", "ra": 10.0, "dec": 5.0, "sy_dist": 0},
        {"pl_name": None, "hostname": "Z", "ra": 10.0, "dec": 5.0, "sy_dist": 12.0},
    ]


@pytest.fixture
def make_record():
    """Factory for minimal validated records."""

    def _make(ra_deg: float, dec_deg: float, distance_pc: float, name: str = "Test b"):
        return ExoplanetRecord(
            pl_name=name,
            hostname=name.rsplit(" ", 1)[0],
            ra_deg=ra_deg,
            dec_deg=dec_deg,
            distance_pc=distance_pc,
        )

    return _make
