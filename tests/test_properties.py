"""Tests for the application.properties configuration source."""

from pathlib import Path

import pytest

from app_bootstrap.properties import ApplicationProperties, get_application_properties, parse_properties, property_key


def test_parse_properties_formats():
    text = """
# comment
! another comment
database.url = sqlite:///app.db
database.username: admin
database.password=s3cr=t

bare.key
"""
    assert parse_properties(text) == {
        "database.url": "sqlite:///app.db",
        "database.username": "admin",
        "database.password": "s3cr=t",
        "bare.key": "",
    }


def test_parse_properties_later_keys_win():
    assert parse_properties("a=1\na=2\n") == {"a": "2"}


def test_get_setting_defaults_to_empty_string():
    properties = ApplicationProperties({"database.url": "sqlite://"})
    assert properties.get_setting("database.url") == "sqlite://"
    assert properties.get_setting("database.username") == ""
    assert properties.get_setting("database.username", default=None) is None


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("true", True),
        ("false", False),
        ("1", True),
        ("no", False),
    ],
)
def test_get_typed_setting_bool(raw: str, expected: bool):
    properties = ApplicationProperties({"database.init.schema": raw})
    assert properties.get_typed_setting("database.init.schema", bool) is expected


def test_get_typed_setting_absent_is_none():
    assert ApplicationProperties({}).get_typed_setting("database.init.schema", bool) is None


def test_get_typed_setting_invalid_is_none():
    properties = ApplicationProperties({"database.pool.size": "ten"})
    assert properties.get_typed_setting("database.pool.size", int) is None


def test_load_from_file(tmp_path: Path):
    path = tmp_path / "app.properties"
    path.write_text("database.url=sqlite:///from-file.db\n", encoding="utf-8")

    properties = ApplicationProperties.load(str(path))

    assert properties.get_setting("database.url") == "sqlite:///from-file.db"
    assert properties.source == str(path)
    assert len(properties) == 1


def test_load_missing_file_is_empty(tmp_path: Path):
    properties = ApplicationProperties.load(str(tmp_path / "nope.properties"))

    assert len(properties) == 0
    assert properties.source is None
    assert properties.get_setting("database.url") == ""


def test_load_bundled_resource():
    properties = ApplicationProperties.load()

    assert "database.url" in properties
    assert properties.get_typed_setting("database.init.schema", bool) is True


def test_get_application_properties_cached_and_env_selected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "custom.properties"
    path.write_text("database.username=alice\n", encoding="utf-8")
    monkeypatch.setenv("APP_PROPERTIES_FILE", str(path))
    get_application_properties.cache_clear()

    first = get_application_properties()
    path.write_text("database.username=bob\n", encoding="utf-8")
    second = get_application_properties()

    assert first is second
    assert second.get_setting("database.username") == "alice"


def test_property_key():
    assert property_key("database_init_schema") == "database.init.schema"
