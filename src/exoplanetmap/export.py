"""JSON scene exporter for an external 3D renderer."""

import json
import logging
from pathlib import Path
from typing import Any

from exoplanetmap.models import PlacedExoplanet, SceneData

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).parent.parent.parent


def _planet_payload(planet: PlacedExoplanet) -> dict[str, Any]:
    r = planet.record
    return {
        "name": r.pl_name,
        "host": r.hostname,
        "ra_deg": r.ra_deg,
        "dec_deg": r.dec_deg,
        "distance_pc": r.distance_pc,
        "position": list(planet.position.as_tuple()),
        "galactic": {"l": planet.galactic.l_deg, "b": planet.galactic.b_deg},
        "orbital_period_days": r.orbital_period_days,
        "radius_earth": r.radius_earth,
        "mass_earth": r.mass_earth,
        "equilibrium_temp_k": r.equilibrium_temp_k,
        "stellar_teff_k": r.stellar_teff_k,
        "stellar_radius_sun": r.stellar_radius_sun,
        "stellar_mass_sun": r.stellar_mass_sun,
        "disc_year": r.disc_year,
    }


def scene_payload(scene: SceneData) -> dict[str, Any]:
    """Convert SceneData to a JSON-serializable dict.

    Positions are ``[x, y, z]`` lists in scene units. ``sun`` is null in the
    equatorial frame, where the origin is the observer.
    """
    return {
        "frame": scene.frame,
        "scale": scene.scale,
        "sun": list(scene.sun.as_tuple()) if scene.sun is not None else None,
        "fetched": scene.fetched_count,
        "rejected": scene.rejected_count,
        "planets": [_planet_payload(p) for p in scene.planets],
    }


def save_scene(scene: SceneData, output_path: Path | None = None) -> Path:
    """Save SceneData as a JSON file.

    Args:
        scene: Fully computed scene.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        output_path = _ROOT / "results" / f"exoplanets_{scene.frame}.json"

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(scene_payload(scene), f, indent=2, allow_nan=False)
    logger.info("Wrote %d planets to %s", len(scene.planets), output_path)
    return output_path
