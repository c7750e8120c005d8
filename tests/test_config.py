"""Tests for layered configuration loading."""

from pathlib import Path

import pytest

from agent_forge.config import (
    load_config, create_default_config, expand_env_vars, search_paths, ForgeConfig,
)
from agent_forge.errors import ConfigError


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_defaults(tmp_path, clean_env, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = load_config(base_dir=tmp_path, environ={})

    assert config.source is None
    assert config.server.host == "localhost"
    assert config.server.port == 8080
    assert config.server.rate_limit == 60
    assert config.server.rate_limit_burst == 10
    assert config.server.shutdown_timeout == 30
    assert config.deepseek.base_url == "https://api.deepseek.com"
    assert config.deepseek.model == "deepseek-chat"
    assert config.deepseek.temperature == 0.7
    assert config.deepseek.timeout == 30
    assert config.deepseek.api_key == ""
    assert config.log.enabled is False
    assert config.log.level == "info"
    assert config.log.file.endswith("agent-forge.log")
    assert (config.log.max_size, config.log.max_backups, config.log.max_age) == (100, 3, 28)
    assert config.log.compress is True


def test_yaml_layer(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = write(tmp_path / "config.yaml", """
server:
  port: 9000
deepseek:
  temperature: 0.2
  timeout: "45"
log:
  enabled: true
  level: debug
""")
    config = load_config(path, environ={})

    assert config.source == str(path)
    assert config.server.port == 9000
    assert config.server.host == "localhost"
    assert config.deepseek.temperature == 0.2
    assert config.deepseek.timeout == 45
    assert config.log.enabled is True
    assert config.log.level == "debug"


def test_search_order(tmp_path, monkeypatch):
    exec_dir = tmp_path / "bin"
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)

    write(work_dir / "config" / "config.yaml", "server: {port: 1111}\n")
    assert load_config(base_dir=exec_dir, environ={}).server.port == 1111

    write(exec_dir / "config" / "config.yaml", "server: {port: 2222}\n")
    assert load_config(base_dir=exec_dir, environ={}).server.port == 2222

    write(exec_dir / "config.yaml", "server: {port: 3333}\n")
    assert load_config(base_dir=exec_dir, environ={}).server.port == 3333

    assert search_paths(exec_dir)[0] == exec_dir / "config.yaml"


def test_env_layer_wins_over_yaml(tmp_path):
    path = write(tmp_path / "config.yaml", "server: {port: 9000}\nlog: {compress: true}\n")
    config = load_config(path, environ={
        "AGENT_FORGE_SERVER_PORT": "9100",
        "AGENT_FORGE_LOG_COMPRESS": "false",
        "AGENT_FORGE_DEEPSEEK_MODEL": "deepseek-reasoner",
    })
    assert config.server.port == 9100
    assert config.log.compress is False
    assert config.deepseek.model == "deepseek-reasoner"


def test_api_key_override(tmp_path):
    path = write(tmp_path / "config.yaml", "deepseek: {api_key: from-file}\n")

    assert load_config(path, environ={}).deepseek.api_key == "from-file"
    config = load_config(path, environ={
        "AGENT_FORGE_DEEPSEEK_API_KEY": "from-prefixed",
        "DEEPSEEK_API_KEY": "from-env",
    })
    assert config.deepseek.api_key == "from-env"


def test_yaml_env_expansion(tmp_path, monkeypatch):
    monkeypatch.setenv("FORGE_TEST_URL", "https://proxy.local")
    path = write(tmp_path / "config.yaml", "deepseek: {base_url: '${FORGE_TEST_URL}/v1'}\n")
    assert load_config(path, environ={}).deepseek.base_url == "https://proxy.local/v1"


def test_expand_env_vars_leaves_unknown(monkeypatch):
    monkeypatch.delenv("FORGE_UNSET_VAR", raising=False)
    assert expand_env_vars({"a": ["$FORGE_UNSET_VAR"]}) == {"a": ["$FORGE_UNSET_VAR"]}


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.yaml", environ={})


@pytest.mark.parametrize("text", [
    "server: [unclosed\n",
    "- just\n- a list\n",
    "server: 5\n",
    "server: {port: eighty}\n",
])
def test_invalid_file(tmp_path, text):
    path = write(tmp_path / "config.yaml", text)
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_bad_env_value(tmp_path):
    path = write(tmp_path / "config.yaml", "")
    with pytest.raises(ConfigError, match="AGENT_FORGE_SERVER_PORT"):
        load_config(path, environ={"AGENT_FORGE_SERVER_PORT": "high"})


def test_unknown_keys_ignored(tmp_path):
    path = write(tmp_path / "config.yaml", "server: {port: 1, colour: blue}\nextra: {a: 1}\n")
    assert load_config(path, environ={}).server.port == 1


def test_default_config_round_trip(tmp_path):
    path = write(tmp_path / "config.yaml", create_default_config())
    config = load_config(path, environ={})
    defaults = ForgeConfig()
    assert config.server == defaults.server
    assert config.deepseek == defaults.deepseek
    assert config.log.file == "./logs/agent-forge.log"


def test_to_dict_masks_key():
    config = ForgeConfig()
    config.deepseek.api_key = "secret"
    assert config.to_dict()["deepseek"]["api_key"] == "***"
    assert config.to_dict(mask_secrets=False)["deepseek"]["api_key"] == "secret"
