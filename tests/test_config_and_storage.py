import json
import os

import pytest

from config.interceptor import DestinationMode, InterceptorConfig
from config.loader import ConfigLoader
from utils.storage import CredentialStore, FallbackTokenStore


def test_loader_coerces_to_default_type(monkeypatch, tmp_path):
    loader = ConfigLoader(env_path=str(tmp_path / "missing.env"))
    monkeypatch.setenv("CI_FLAG", "Yes")
    monkeypatch.setenv("CI_INT", "42")
    monkeypatch.setenv("CI_FLOAT", "oops")
    assert loader.get("CI_FLAG", False) is True
    assert loader.get("CI_INT", 1) == 42
    assert loader.get("CI_FLOAT", 2.5) == 2.5
    assert loader.get("CI_UNSET", "fallback") == "fallback"


def test_loader_choice_falls_back_on_unknown_value(monkeypatch, tmp_path):
    loader = ConfigLoader(env_path=str(tmp_path / "missing.env"))
    monkeypatch.setenv("CI_ENDPOINT", "Passthrough")
    assert loader.get_choice("CI_ENDPOINT", "anthropic", ("anthropic", "passthrough")) == "passthrough"
    monkeypatch.setenv("CI_ENDPOINT", "gemini")
    assert loader.get_choice("CI_ENDPOINT", "anthropic", ("anthropic", "passthrough")) == "anthropic"


def test_loader_reads_env_file(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("CI_FROM_FILE=8090\n")
    monkeypatch.delenv("CI_FROM_FILE", raising=False)
    loader = ConfigLoader(env_path=str(env_file))
    try:
        assert loader.get("CI_FROM_FILE", 8081) == 8090
    finally:
        os.environ.pop("CI_FROM_FILE", None)


@pytest.mark.parametrize(
    "endpoint, mode, thinking",
    [
        ("anthropic", DestinationMode.ANTHROPIC, False),
        ("anthropic-thinking", DestinationMode.ANTHROPIC, True),
        ("openai", DestinationMode.OPENAI, False),
        ("passthrough", DestinationMode.PASSTHROUGH, False),
    ],
)
def test_endpoint_setting_maps_to_mode(endpoint, mode, thinking):
    assert InterceptorConfig.parse_endpoint(endpoint) == (mode, thinking)


def test_config_from_settings_applies_legacy_thinking(monkeypatch):
    import settings

    monkeypatch.setattr(settings, "ENDPOINT", "anthropic-thinking")
    monkeypatch.setattr(settings, "THINKING_ENABLED", False)
    monkeypatch.setattr(settings, "COPILOT_TOKEN", "")
    config = InterceptorConfig.from_settings()
    assert config.is_anthropic
    assert config.thinking_enabled is True
    assert config.token_override is None


def test_credential_store_lifecycle(tmp_path):
    store = CredentialStore(str(tmp_path / "creds" / "credentials.json"))
    assert store.list_tokens() == []
    assert store.get_selected_token() is None

    first = store.add_token("", " gho_first ")
    assert first == {"name": "Token 1", "value": "gho_first"}
    store.add_token("work", "gho_second")
    assert store.get_selected_token() == "gho_second"

    store.select_token(0)
    assert store.get_selected_token() == "gho_first"

    store.delete_token(0)
    assert store.get_selected_token() is None
    assert [t["name"] for t in store.list_tokens()] == ["work"]

    store.select_token(0)
    store.select_token(None)
    assert store.get_selected_token() is None

    saved = json.loads(store.credentials_file.read_text())
    assert saved["tokens"] == [{"name": "work", "value": "gho_second"}]


def test_credential_store_rejects_blank_and_bad_index(tmp_path):
    store = CredentialStore(str(tmp_path / "credentials.json"))
    with pytest.raises(ValueError):
        store.add_token("name", "   ")
    with pytest.raises(IndexError):
        store.select_token(3)
    with pytest.raises(IndexError):
        store.delete_token(0)


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_credential_store_file_permissions(tmp_path):
    store = CredentialStore(str(tmp_path / "secure" / "credentials.json"))
    store.add_token("a", "gho_a")
    assert oct(store.credentials_file.stat().st_mode & 0o777) == oct(0o600)
    assert oct(store.credentials_file.parent.stat().st_mode & 0o777) == oct(0o700)


def test_fallback_store_reads_token_field(tmp_path):
    settings_file = tmp_path / "gcm.json"
    assert FallbackTokenStore(str(settings_file)).get_token() is None
    settings_file.write_text(json.dumps({"token": " gho_fallback ", "other": 1}))
    assert FallbackTokenStore(str(settings_file)).get_token() == "gho_fallback"
    settings_file.write_text("{broken")
    assert FallbackTokenStore(str(settings_file)).get_token() is None
    assert FallbackTokenStore(None).get_token() is None


@pytest.mark.parametrize("content", ["[]", '"gho_x"', "42", '{"token": 7, "tokens": [{"value": 1}, "x"]}'])
def test_credential_store_ignores_malformed_content(tmp_path, content):
    path = tmp_path / "credentials.json"
    path.write_text(content)
    store = CredentialStore(str(path))
    assert store.get_selected_token() is None
    assert store.list_tokens() == []

    store.add_token("fresh", "gho_fresh")
    assert store.get_selected_token() == "gho_fresh"


def test_loader_reads_json_object_settings(monkeypatch, tmp_path):
    loader = ConfigLoader(env_path=str(tmp_path / "missing.env"))
    monkeypatch.setenv("CI_HEADERS", '{"X-Initiator": "agent"}')
    assert loader.get("CI_HEADERS", {}) == {"X-Initiator": "agent"}
    monkeypatch.setenv("CI_HEADERS", "[1, 2]")
    assert loader.get("CI_HEADERS", {}) == {}
    monkeypatch.setenv("CI_HEADERS", "{broken")
    assert loader.get("CI_HEADERS", {"a": "b"}) == {"a": "b"}


def test_config_from_settings_reads_header_overrides(monkeypatch):
    import settings

    monkeypatch.setattr(settings, "ENDPOINT", "anthropic")
    monkeypatch.setattr(settings, "VSCODE_HEADER_OVERRIDES", {"X-Initiator": "agent", "X-Interaction-Type": None})
    config = InterceptorConfig.from_settings()
    assert config.header_overrides == {"X-Initiator": "agent", "X-Interaction-Type": ""}
