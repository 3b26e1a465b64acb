"""
Tests for configuration loading and logging setup.
"""

import logging

import pytest
from pydantic import ValidationError

from toolcall_core.config import AppConfig, ConfigLoader, DispatchConfig, FeaturesConfig, PromptConfig, setup_logging


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults():
    config = AppConfig()
    assert config.features.log_level == "INFO"
    assert config.dispatch.max_concurrency == 1
    assert config.dispatch.call_timeout is None
    assert config.dispatch.max_recursion_depth == 25
    assert config.prompt.template is None
    assert config.remote_tool.base_url is None


def test_load_config(tmp_path):
    path = _write(tmp_path, """
features:
  log_level: debug
dispatch:
  max_concurrency: 4
  call_timeout: 2.5
remote_tool:
  base_url: "https://tools.example.com/"
""")
    config = ConfigLoader(path).load_config()
    assert config.features.log_level == "DEBUG"
    assert config.dispatch.max_concurrency == 4
    assert config.dispatch.call_timeout == 2.5
    assert config.remote_tool.base_url == "https://tools.example.com"


def test_config_property_loads_lazily(tmp_path):
    loader = ConfigLoader(_write(tmp_path, "prompt:\n  optimize: true\n"))
    assert loader.config.prompt.optimize is True


def test_reload_config(tmp_path):
    path = _write(tmp_path, "dispatch:\n  max_recursion_depth: 3\n")
    loader = ConfigLoader(path)
    assert loader.config.dispatch.max_recursion_depth == 3
    _write(tmp_path, "dispatch:\n  max_recursion_depth: 7\n")
    assert loader.reload_config().dispatch.max_recursion_depth == 7


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader(str(tmp_path / "absent.yaml")).load_config()


def test_empty_file(tmp_path):
    with pytest.raises(ValueError, match="empty"):
        ConfigLoader(_write(tmp_path, "")).load_config()


def test_invalid_yaml(tmp_path):
    with pytest.raises(ValueError, match="format error"):
        ConfigLoader(_write(tmp_path, "features: [unclosed\n")).load_config()


def test_invalid_values(tmp_path):
    with pytest.raises(ValueError, match="validation failed"):
        ConfigLoader(_write(tmp_path, "dispatch:\n  max_concurrency: 0\n")).load_config()


def test_log_level_validation():
    with pytest.raises(ValidationError):
        FeaturesConfig(log_level="LOUD")
    assert FeaturesConfig(log_level="disabled").log_level == "DISABLED"


def test_template_requires_tools_list():
    with pytest.raises(ValidationError):
        PromptConfig(template="no placeholder here")
    assert PromptConfig(template="Tools: {tools_list}").template == "Tools: {tools_list}"


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        DispatchConfig(call_timeout=0)


def test_remote_base_url_scheme():
    with pytest.raises(ValueError):
        AppConfig(remote_tool={"base_url": "ftp://tools"})


def test_setup_logging_updates_level_without_duplicate_handlers():
    root = logging.getLogger()
    handlers_before = list(root.handlers)
    level_before = root.level
    try:
        setup_logging("WARNING")
        handler_count = len(root.handlers)
        setup_logging("DISABLED")
        assert len(root.handlers) == handler_count
        assert root.level == logging.CRITICAL + 1
    finally:
        root.handlers = handlers_before
        root.setLevel(level_before)
