"""Tests for launcher configuration."""

import json

import pytest

from satellite.config import LauncherConfig, get_config_dir, get_default_config_path
from satellite.errors import ConfigValidationError


def test_load_writes_defaults_when_missing(tmp_path):
    path = tmp_path / "nested" / "config.json"
    config = LauncherConfig.load(path)
    assert path.exists()
    assert config.player_name == "Player"
    assert json.loads(path.read_text())["max_memory"] == 4096


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "config.json"
    LauncherConfig(player_name="Alex", jvm_args=["-XX:+UseG1GC"]).save(path)
    loaded = LauncherConfig.load(path)
    assert loaded.player_name == "Alex"
    assert loaded.jvm_args == ["-XX:+UseG1GC"]


def test_load_rejects_wrong_types(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"max_memory": "lots"}))
    with pytest.raises(ConfigValidationError) as info:
        LauncherConfig.load(path)
    assert info.value.field == "max_memory"


def test_load_rejects_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigValidationError):
        LauncherConfig.load(path)


@pytest.mark.parametrize("changes,field", [
    ({"min_memory": 8192, "max_memory": 4096}, "memory"),
    ({"min_memory": 256, "max_memory": 256}, "max_memory"),
    ({"game_directory": "  "}, "game_directory"),
    ({"player_name": ""}, "player_name"),
    ({"player_name": "a" * 17}, "player_name"),
    ({"concurrent_downloads": 0}, "concurrent_downloads"),
])
def test_validate_config(changes, field):
    with pytest.raises(ConfigValidationError) as info:
        LauncherConfig(**changes).validate_config()
    assert info.value.field == field


def test_default_config_is_valid():
    LauncherConfig().validate_config()


def test_jvm_args_put_heap_first():
    config = LauncherConfig(min_memory=512, max_memory=2048, jvm_args=["-XX:+UseG1GC"])
    assert config.get_jvm_args() == ["-Xms512M", "-Xmx2048M", "-XX:+UseG1GC"]


def test_java_executable_resolution(monkeypatch, tmp_path):
    monkeypatch.delenv("JAVA_HOME", raising=False)
    assert LauncherConfig().get_java_executable() == "java"
    assert LauncherConfig(java_executable="/opt/jdk/bin/java").get_java_executable() == "/opt/jdk/bin/java"

    monkeypatch.setenv("JAVA_HOME", str(tmp_path))
    assert LauncherConfig().get_java_executable().startswith(str(tmp_path / "bin" / "java"))


def test_config_dir_honours_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert get_config_dir() == tmp_path / "satellite-launcher"
    assert get_default_config_path() == tmp_path / "satellite-launcher" / "config.json"
