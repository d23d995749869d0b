"""Tests for YAML setting presets and runtime settings"""
import importlib

import pytest
from htmltox.config import presets, settings
from htmltox.core.exceptions import ValidationError


class TestFlattenSettings:
    def test_nested_keys_become_dotted_names(self):
        data = {"margin": {"top": "10mm", "bottom": "5mm"}, "web": {"enableJavascript": False}}

        assert presets.flatten_settings(data) == {
            "margin.top": "10mm",
            "margin.bottom": "5mm",
            "web.enableJavascript": "false",
        }

    def test_scalars_are_stringified(self):
        assert presets.flatten_settings({"dpi": 300, "zoom": 1.25, "title": None}) == {
            "dpi": "300",
            "zoom": "1.25",
            "title": "",
        }


class TestLoadPreset:
    def test_loads_yaml_file(self, tmp_path):
        path = tmp_path / "a4.yaml"
        path.write_text("size:\n  pageSize: A4\norientation: Portrait\n")

        assert presets.load_preset(path) == {"size.pageSize": "A4", "orientation": "Portrait"}

    def test_empty_file_is_empty_preset(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert presets.load_preset(path) == {}

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            presets.load_preset(tmp_path / "missing.yaml")

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- dpi\n- 300\n")

        with pytest.raises(ValidationError, match="mapping"):
            presets.load_preset(str(path))


class TestSettings:
    """Settings are read from the environment at import time"""

    @pytest.fixture
    def reload_settings(self, monkeypatch):
        yield lambda: importlib.reload(settings)
        monkeypatch.undo()
        importlib.reload(settings)

    def test_defaults(self, monkeypatch, reload_settings):
        for name in ("HTMLTOX_LIBRARY_VERSION", "HTMLTOX_CACHE_DIR", "HTMLTOX_LIBRARY_PATH", "HTMLTOX_USE_GRAPHICS"):
            monkeypatch.delenv(name, raising=False)
        reloaded = reload_settings()

        assert reloaded.LIBRARY_VERSION == "0.12.5"
        assert reloaded.LIBRARY_PATH is None
        assert reloaded.USE_GRAPHICS is False
        assert reloaded.CACHE_DIR.name == "org.wkhtmltopdf"

    def test_environment_overrides(self, monkeypatch, reload_settings, tmp_path):
        monkeypatch.setenv("HTMLTOX_CACHE_DIR", str(tmp_path))
        monkeypatch.setenv("HTMLTOX_LIBRARY_PATH", "/opt/libwkhtmltox.so")
        monkeypatch.setenv("HTMLTOX_USE_GRAPHICS", "true")
        reloaded = reload_settings()

        assert reloaded.CACHE_DIR == tmp_path
        assert reloaded.LIBRARY_PATH == "/opt/libwkhtmltox.so"
        assert reloaded.USE_GRAPHICS is True
