"""Tests for the starmap CLI entry point."""

from unittest.mock import patch

import pytest

from exoplanetmap import starmap
from exoplanetmap.compute import ArchiveError, build_scene


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep a developer's .env and shell settings out of the tests."""
    monkeypatch.setattr(starmap, "load_dotenv", lambda: False)
    for name in (
        "EXOPLANETMAP_FRAME",
        "EXOPLANETMAP_SCALE",
        "EXOPLANETMAP_LIMIT",
        "EXOPLANETMAP_MAX_PLANETS",
        "EXOPLANETMAP_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestMain:
    def test_defaults(self, catalog_rows, tmp_path, capsys):
        scene = build_scene(catalog_rows)
        out = tmp_path / "scene.json"
        with patch.object(starmap, "run", return_value=scene) as run, patch.object(
            starmap, "save_scene", return_value=out
        ) as save:
            assert starmap.main() == 0
        run.assert_called_once_with(limit=None, frame="equatorial", scale=None, max_planets=None)
        save.assert_called_once_with(scene)
        assert f"Saved: {out}" in capsys.readouterr().out

    def test_settings_from_environment(self, catalog_rows, tmp_path, monkeypatch):
        monkeypatch.setenv("EXOPLANETMAP_FRAME", "galactic")
        monkeypatch.setenv("EXOPLANETMAP_SCALE", "500")
        monkeypatch.setenv("EXOPLANETMAP_LIMIT", "200")
        monkeypatch.setenv("EXOPLANETMAP_MAX_PLANETS", "50")
        scene = build_scene(catalog_rows, frame="galactic", scale=500)
        with patch.object(starmap, "run", return_value=scene) as run, patch.object(
            starmap, "save_scene", return_value=tmp_path / "scene.json"
        ):
            assert starmap.main() == 0
        run.assert_called_once_with(limit=200, frame="galactic", scale=500.0, max_planets=50)

    def test_archive_error_exits_nonzero(self, capsys):
        with patch.object(
            starmap, "run", side_effect=ArchiveError("Exoplanet Archive unreachable")
        ), patch.object(starmap, "save_scene") as save:
            assert starmap.main() == 1
        save.assert_not_called()
        assert "Exoplanet Archive unreachable" in capsys.readouterr().err

    def test_zero_max_planets_fails_before_fetch(self, monkeypatch):
        monkeypatch.setenv("EXOPLANETMAP_MAX_PLANETS", "0")
        with patch("exoplanetmap.compute.fetch_catalog_rows") as fetch, patch.object(
            starmap, "save_scene"
        ) as save:
            with pytest.raises(ValueError, match="max_planets"):
                starmap.main()
        fetch.assert_not_called()
        save.assert_not_called()
