"""Tests for JSON settings overlaid on defaults."""

from __future__ import annotations

import json

from infrastructure.settings import DEFAULT_SETTINGS, JsonSettings


class TestJsonSettings:
    def test_missing_file_uses_defaults(self, tmp_path):
        settings = JsonSettings(tmp_path / "settings.json")
        assert settings.as_dict() == DEFAULT_SETTINGS

    def test_no_path_uses_defaults(self):
        assert JsonSettings().get("title") == "Photo Gallery"

    def test_custom_values_override(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"title": "Trips", "enableSwipe": False, "extra": {"a": 1}}))
        settings = JsonSettings(path)
        assert settings.get("title") == "Trips"
        assert settings.get_bool("enableSwipe", True) is False
        assert settings.get("enableClickNavigation") is True
        assert settings.get("extra.a") == 1
        assert settings.get("extra.b", "dflt") == "dflt"

    def test_invalid_file_uses_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2")
        assert JsonSettings(path).as_dict() == DEFAULT_SETTINGS

    def test_non_object_root_uses_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        assert JsonSettings(path).get("title") == "Photo Gallery"

    def test_get_bool_rejects_non_bool(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"enableSwipe": "no"}))
        assert JsonSettings(path).get_bool("enableSwipe", True) is True

    def test_defaults_are_not_shared(self, tmp_path):
        JsonSettings().as_dict()["title"] = "changed"
        assert DEFAULT_SETTINGS["title"] == "Photo Gallery"
