import importlib
import logging
import sys
import types
from pathlib import Path

import pytest


def _reload_config():
    sys.modules.pop("politecrawl.config", None)
    return importlib.import_module("politecrawl.config")


def test_dotenv_present_but_fails_to_load(monkeypatch, tmp_path):
    tmp_path.joinpath(".env").write_text("POLITECRAWL_USER_AGENT=FromFile")
    monkeypatch.chdir(tmp_path)

    fake = types.SimpleNamespace(load_dotenv=lambda: False)
    monkeypatch.setitem(sys.modules, "dotenv", fake)
    with pytest.raises(RuntimeError):
        _reload_config()


def test_dotenv_loads_sets_variables(monkeypatch, tmp_path):
    tmp_path.joinpath(".env").write_text("POLITECRAWL_USER_AGENT=DotenvAgent")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("POLITECRAWL_USER_AGENT", raising=False)

    def fake_load():
        # emulate dotenv behavior: read .env and set os.environ
        p = Path(".env")
        for line in p.read_text().splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                monkeypatch.setenv(k, v)
        return True

    fake = types.SimpleNamespace(load_dotenv=fake_load)
    monkeypatch.setitem(sys.modules, "dotenv", fake)
    cfg = _reload_config()
    assert cfg.user_agent() == "DotenvAgent"


def test_env_helpers(monkeypatch, caplog):
    cfg = _reload_config()
    monkeypatch.setenv("PC_TEST_INT", "12")
    monkeypatch.setenv("PC_TEST_BAD_INT", "twelve")
    monkeypatch.setenv("PC_TEST_FLOAT", "0.25")
    monkeypatch.setenv("PC_TEST_BOOL", "no")
    monkeypatch.setenv("PC_TEST_BAD_BOOL", "maybe")
    monkeypatch.setenv("PC_TEST_EMPTY", "")
    caplog.set_level(logging.ERROR)

    assert cfg.get_int_env("PC_TEST_INT", 1) == 12
    assert cfg.get_int_env("PC_TEST_BAD_INT", 1) == 1
    assert cfg.get_optional_int_env("PC_TEST_BAD_INT") is None
    assert cfg.get_optional_int_env("PC_TEST_MISSING") is None
    assert cfg.get_float_env("PC_TEST_FLOAT", 1.0) == 0.25
    assert cfg.get_bool_env("PC_TEST_BOOL", True) is False
    assert cfg.get_bool_env("PC_TEST_BAD_BOOL", True) is True
    assert cfg.get_str_env("PC_TEST_EMPTY", "default") == "default"
    assert cfg.get_optional_str_env("PC_TEST_EMPTY") is None
    assert "Invalid PC_TEST_BAD_INT" in caplog.text
    assert "Invalid PC_TEST_BAD_BOOL" in caplog.text


def test_options_from_env(monkeypatch):
    monkeypatch.setenv("POLITECRAWL_CRAWL_DELAY", "0.5")
    monkeypatch.setenv("POLITECRAWL_MAX_VISITS", "10")
    monkeypatch.setenv("POLITECRAWL_SAME_HOST_ONLY", "false")
    monkeypatch.setenv("POLITECRAWL_LOG_FLAGS", "error|info")
    from politecrawl.domain.options import Options
    from politecrawl.domain.enums import LogFlags

    opts = Options.from_env(extender="ext")
    assert opts.crawl_delay == 0.5
    assert opts.max_visits == 10
    assert opts.same_host_only is False
    assert opts.log_flags == LogFlags.ERROR | LogFlags.INFO
    assert opts.extender == "ext"
