"""CLI entry point for exoplanet scene generation.

Settings come from the environment (or a .env file), then run:
    uv run exoplanetmap
    EXOPLANETMAP_FRAME=galactic EXOPLANETMAP_LIMIT=500 uv run exoplanetmap
"""

import logging
import os
import sys

from dotenv import load_dotenv

from exoplanetmap.compute import ArchiveError, run
from exoplanetmap.export import save_scene


def _optional_int(name: str) -> int | None:
    raw = os.environ.get(name)
    return int(raw) if raw else None


def _optional_float(name: str) -> float | None:
    raw = os.environ.get(name)
    return float(raw) if raw else None


def main() -> int:
    load_dotenv()
    logging.basicConfig(
        level=os.environ.get("EXOPLANETMAP_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    frame = os.environ.get("EXOPLANETMAP_FRAME", "equatorial")
    try:
        scene = run(
            limit=_optional_int("EXOPLANETMAP_LIMIT"),
            frame=frame,
            scale=_optional_float("EXOPLANETMAP_SCALE"),
            max_planets=_optional_int("EXOPLANETMAP_MAX_PLANETS"),
        )
    except ArchiveError as e:
        print(f"Failed to load exoplanets: {e}", file=sys.stderr)
        return 1

    path = save_scene(scene)
    print(f"Saved: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
