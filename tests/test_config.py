from __future__ import annotations

import pytest

from brevo_platform.config import (
    API_KEY_ENV,
    API_KEY_OPTION,
    DEFAULT_BASE_URL,
    SENDER_OPTION,
    DictConfigStore,
    YamlConfigStore,
    default_sender,
)
from brevo_platform.client import BrevoClient
from brevo_platform.errors import ConfigError


def _write(tmp_path, text):
    p = tmp_path / "brevo.yaml"
    p.write_text(text, encoding="utf-8")
    return p


def test_yaml_store_reads_options(tmp_path):
    p = _write(
        tmp_path,
        "sib_api_key_v3: xkeysib-file\n"
        "sib_home_option:\n"
        "  from_email: news@example.com\n"
        "  from_name: Example News\n",
    )
    cfg = YamlConfigStore.from_path(p, environ={})
    assert cfg.get(API_KEY_OPTION) == "xkeysib-file"
    assert default_sender(cfg) == {"email": "news@example.com", "name": "Example News"}


def test_env_key_overrides_file(tmp_path):
    p = _write(tmp_path, "sib_api_key_v3: xkeysib-file\n")
    cfg = YamlConfigStore.from_path(p, environ={API_KEY_ENV: "xkeysib-env"})
    assert cfg.get(API_KEY_OPTION) == "xkeysib-env"


def test_empty_file_is_empty_config(tmp_path):
    cfg = YamlConfigStore.from_path(_write(tmp_path, ""), environ={})
    assert cfg.get(API_KEY_OPTION) is None
    assert default_sender(cfg) is None


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="does not exist"):
        YamlConfigStore.from_path(tmp_path / "nope.yaml", environ={})


def test_non_mapping_file(tmp_path):
    with pytest.raises(ConfigError, match="mapping"):
        YamlConfigStore.from_path(_write(tmp_path, "- a\n- b\n"), environ={})


@pytest.mark.parametrize(
    "home",
    [None, "news@example.com", {}, {"from_name": "No Email"}, {"from_email": ""}],
)
def test_default_sender_requires_email(home):
    assert default_sender(DictConfigStore({SENDER_OPTION: home})) is None


def test_default_sender_name_optional():
    cfg = DictConfigStore({SENDER_OPTION: {"from_email": "a@example.com"}})
    assert default_sender(cfg) == {"email": "a@example.com", "name": ""}


def test_client_defaults():
    client = BrevoClient(DictConfigStore({}))
    try:
        assert client.base_url == DEFAULT_BASE_URL
        assert client.timeout == 30.0
    finally:
        client.close()
