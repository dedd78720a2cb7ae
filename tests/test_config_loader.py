"""Tests for config loader functionality."""

import os
import pytest
import tempfile
import yaml

from veriscript.libs.config_loader import load_all_configs, load_configs, load_default_configs, get_config


def _write_yaml(data, directory=None, name=None):
    if directory and name:
        path = os.path.join(directory, name)
        with open(path, 'w') as f:
            yaml.dump(data, f)
        return path
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(data, f)
        return f.name


def test_load_single_config():
    """Test loading a single config file."""
    config_data = {
        "assessment": {"request_timeout_seconds": 30},
        "logging": {"level": "DEBUG"}
    }
    temp_path = _write_yaml(config_data)

    try:
        result = load_configs(temp_path)
        assert result == config_data
    finally:
        os.unlink(temp_path)


def test_load_multiple_configs_merge():
    """Later files override earlier ones key by key."""
    config1 = {
        "openai": {"model": "gpt-4.1", "api_key": ""},
        "assessment": {"concurrent_stages": True}
    }
    config2 = {
        "openai": {"api_key": "sk-local"},
        "assessment": {"min_text_length": 80}
    }
    expected = {
        "openai": {"model": "gpt-4.1", "api_key": "sk-local"},
        "assessment": {"concurrent_stages": True, "min_text_length": 80}
    }
    temp_path1 = _write_yaml(config1)
    temp_path2 = _write_yaml(config2)

    try:
        assert load_configs(temp_path1, temp_path2) == expected
    finally:
        os.unlink(temp_path1)
        os.unlink(temp_path2)


def test_load_missing_file():
    """Test that missing files are skipped with warning."""
    config_data = {"store": {"path": "data/applicants.yaml"}}
    temp_path = _write_yaml(config_data)

    try:
        result = load_configs(temp_path, "nonexistent.yaml")
        assert result == config_data
    finally:
        os.unlink(temp_path)


def test_no_configs_loaded():
    """Test that ValueError is raised when no configs are loaded."""
    with pytest.raises(ValueError, match="No configs loaded"):
        load_configs("nonexistent1.yaml", "nonexistent2.yaml")


def test_non_dict_config_rejected():
    temp_path = _write_yaml(["not", "a", "dict"])
    try:
        with pytest.raises(TypeError):
            load_configs(temp_path)
    finally:
        os.unlink(temp_path)


def test_get_config_dot_path():
    config = {"assessment": {"request_timeout_seconds": 120}}
    assert get_config("assessment.request_timeout_seconds", config) == 120


def test_get_config_missing_key():
    config = {"assessment": {}}
    with pytest.raises(KeyError, match="assessment.min_text_length"):
        get_config("assessment.min_text_length", config)


def test_get_config_default():
    config = {"assessment": {"request_timeout_seconds": 120}}
    assert get_config("assessment.min_text_length", config, default=50) == 50
    assert get_config("openai.model", config, default="gpt-4.1") == "gpt-4.1"
    assert get_config("assessment.request_timeout_seconds.extra", config, default=None) is None


def test_get_config_through_non_dict():
    config = {"assessment": 5}
    with pytest.raises(KeyError):
        get_config("assessment.min_text_length", config)


def test_config_dir_override(monkeypatch):
    with tempfile.TemporaryDirectory() as config_dir:
        _write_yaml({"openai": {"model": "gpt-4.1", "api_key": ""}}, config_dir, "default.yaml")
        _write_yaml({"openai": {"api_key": "sk-test"}}, config_dir, "local.yaml")
        _write_yaml({"assessment": {"min_text_length": 10}}, config_dir, "zz-extra.yml")
        monkeypatch.setenv("VERISCRIPT_CONFIG_DIR", config_dir)

        defaults = load_default_configs()
        assert defaults == {"openai": {"model": "gpt-4.1", "api_key": "sk-test"}}

        everything = load_all_configs()
        assert everything["assessment"]["min_text_length"] == 10
        assert everything["openai"]["api_key"] == "sk-test"


def test_shipped_default_config():
    """The bundled default.yaml carries every assessment setting."""
    defaults = load_configs(os.path.join(os.path.dirname(__file__), "..", "config", "default.yaml"))
    assert get_config("assessment.request_timeout_seconds", defaults) == 120
    assert get_config("assessment.concurrent_stages", defaults) is True
    assert get_config("assessment.min_text_length", defaults) == 50
    assert get_config("openai.model", defaults) == "gpt-4.1"
