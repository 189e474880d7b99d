"""Tests for chaos_harvester.config: runtime option loading and validation.

NOT to be confused with test_config_loader.py (YAML discovery) or
test_config_schema.py (Pydantic models). This tests HarvestOptions,
validate_options() and load_options().
"""

import logging

import pytest

from chaos_harvester.config import HarvestOptions, load_options, validate_options
from chaos_harvester.exceptions import ConfigError

GUID = "11111111-1111-1111-1111-111111111111"

ENV_VARS = (
    "CHAOS_FOLDER_ID",
    "CHAOS_OBJECT_TYPE_ID",
    "CHAOS_NO_SHADOW_COMMIT",
    "CHAOS_REQUIRE_FILES_ON_OBJECTS",
    "CHAOS_VALIDATE_METADATA",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


# -------------------------------------------------------------------------
# HarvestOptions.has_option()
# -------------------------------------------------------------------------


class TestHasOption:
    def test_hyphenated_names(self):
        options = HarvestOptions(no_shadow_commit=True)

        assert options.has_option("no-shadow-commit") is True
        assert options.has_option("require-files-on-objects") is False

    def test_unknown_option_is_unset(self):
        assert HarvestOptions().has_option("publish-everything") is False


# -------------------------------------------------------------------------
# validate_options()
# -------------------------------------------------------------------------


class TestValidateOptions:
    def test_defaults_are_valid(self):
        validate_options(HarvestOptions())

    def test_negative_folder_rejected(self):
        with pytest.raises(ConfigError, match="folder_id -1"):
            validate_options(HarvestOptions(folder_id=-1))

    def test_malformed_guid_rejected(self):
        with pytest.raises(ConfigError, match="not a valid GUID"):
            validate_options(
                HarvestOptions(unpublish_accesspoint_guids=["public"])
            )

    def test_no_shadow_commit_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            validate_options(HarvestOptions(no_shadow_commit=True))

        assert "no-shadow-commit is set" in caplog.text


# -------------------------------------------------------------------------
# load_options()
# -------------------------------------------------------------------------


class TestLoadOptions:
    def test_defaults(self):
        options = load_options()

        assert options == HarvestOptions()

    def test_yaml_fallbacks_used(self):
        options = load_options(
            yaml_fallbacks={
                "folder_id": 3,
                "publish_accesspoint_guids": [GUID],
                "validate_metadata": True,
            }
        )

        assert options.folder_id == 3
        assert options.publish_accesspoint_guids == [GUID]
        assert options.validate_metadata is True

    def test_env_beats_yaml(self, monkeypatch):
        monkeypatch.setenv("CHAOS_FOLDER_ID", "9")
        monkeypatch.setenv("CHAOS_VALIDATE_METADATA", "false")

        options = load_options(
            yaml_fallbacks={"folder_id": 3, "validate_metadata": True}
        )

        assert options.folder_id == 9
        assert options.validate_metadata is False

    def test_cli_beats_env(self, monkeypatch):
        monkeypatch.setenv("CHAOS_OBJECT_TYPE_ID", "9")
        monkeypatch.setenv("CHAOS_NO_SHADOW_COMMIT", "0")

        options = load_options(
            cli_overrides={"object_type_id": 12, "no_shadow_commit": True}
        )

        assert options.object_type_id == 12
        assert options.no_shadow_commit is True

    def test_false_cli_flag_does_not_override(self, monkeypatch):
        monkeypatch.setenv("CHAOS_REQUIRE_FILES_ON_OBJECTS", "yes")

        options = load_options(cli_overrides={"require_files_on_objects": False})

        assert options.require_files_on_objects is True

    def test_cli_list_beats_yaml(self):
        other = "22222222-2222-2222-2222-222222222222"

        options = load_options(
            cli_overrides={"unpublish_accesspoint_guids": [other]},
            yaml_fallbacks={"unpublish_accesspoint_guids": [GUID]},
        )

        assert options.unpublish_accesspoint_guids == [other]

    def test_non_numeric_env_raises(self, monkeypatch):
        monkeypatch.setenv("CHAOS_FOLDER_ID", "abc")

        with pytest.raises(ConfigError, match="CHAOS_FOLDER_ID"):
            load_options()

    def test_non_numeric_cli_raises(self):
        with pytest.raises(ConfigError, match="Invalid folder_id 'abc'"):
            load_options(cli_overrides={"folder_id": "abc"})

    def test_non_numeric_yaml_raises(self):
        with pytest.raises(ConfigError, match="Invalid object_type_id"):
            load_options(yaml_fallbacks={"object_type_id": [3]})

    def test_invalid_values_are_validated(self):
        with pytest.raises(ConfigError):
            load_options(cli_overrides={"publish_accesspoint_guids": ["nope"]})
