import pytest
import yaml

from cell_wand.settings import reset_settings_cache


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep settings independent of the developer's environment and .env file."""
    for name in ("CELL_WAND_EPSILON", "CELL_WAND_MAX_DEPTH", "CELL_WAND_OUTPUT_ROOT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def write_config(tmp_path):
    def _write(data, name="trace.yaml"):
        path = tmp_path / name
        with path.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(data, handle)
        return path

    return _write


@pytest.fixture
def circle_config_data():
    return {
        "image": {"width": 64, "height": 48},
        "center": [32, 24],
        "sweep": {"radii": [12.0] * 16},
        "metadata": {"name": "Cell 01"},
    }
