"""
Unit Tests for Import Configuration

Tests for TemplateVariables and ImportConfig.
"""

import dataclasses
import json

import pytest

from qml_toolkit.importer.config import ImportConfig, TemplateVariables
from qml_toolkit.importer.sanitizer import SanitizeProfile


class TestTemplateVariables:
    """Tests for TemplateVariables."""

    def test_apply_when_key_present_then_replaced_verbatim(self):
        tv = TemplateVariables({"%SERVER%": "https://lms.example"})
        assert tv.apply('<img src="%SERVER%/a.png">') == '<img src="https://lms.example/a.png">'

    def test_apply_when_keys_overlap_then_longest_first(self):
        tv = TemplateVariables({"%A": "short", "%AB%": "long"})
        assert tv.apply("%AB% %A") == "long short"

    def test_apply_when_empty_map_then_text_unchanged(self):
        assert TemplateVariables().apply("%X%") == "%X%"

    def test_init_when_empty_key_then_raises_error(self):
        with pytest.raises(ValueError):
            TemplateVariables({"": "x"})

    def test_init_when_none_value_then_empty_string(self):
        assert TemplateVariables({"k": None})["k"] == ""

    def test_mapping_when_assigned_then_raises_type_error(self):
        tv = TemplateVariables({"k": "v"})
        with pytest.raises(TypeError):
            tv["k"] = "w"
        assert dict(tv) == {"k": "v"}
        assert len(tv) == 1

    def test_from_json_when_object_then_loaded(self, tmp_path):
        path = tmp_path / "vars.json"
        path.write_text(json.dumps({"%ROOT%": "/media"}), encoding="utf-8")
        assert TemplateVariables.from_json(path).apply("%ROOT%/x") == "/media/x"

    def test_from_json_when_missing_then_raises_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TemplateVariables.from_json(tmp_path / "nope.json")

    def test_from_json_when_not_object_then_raises_error(self, tmp_path):
        path = tmp_path / "vars.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            TemplateVariables.from_json(path)


class TestImportConfig:
    """Tests for ImportConfig."""

    def test_defaults_when_constructed_then_sequential_english(self):
        config = ImportConfig()
        assert config.language == "en"
        assert config.workers == 1
        assert config.emit_categories is True
        assert config.default_profile is SanitizeProfile.RICH_HTML
        assert config.answer_profile is SanitizeProfile.PLAIN_TEXT

    @pytest.mark.parametrize("kwargs", [
        {"workers": 0},
        {"language": ""},
        {"language": "en-GB"},
        {"essay_field_lines": 0},
    ])
    def test_init_when_invalid_then_raises_error(self, kwargs):
        with pytest.raises(ValueError):
            ImportConfig(**kwargs)

    def test_config_when_assigned_then_frozen(self):
        config = ImportConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.workers = 4

    def test_language_when_underscore_region_then_accepted(self):
        assert ImportConfig(language="en_us").language == "en_us"
