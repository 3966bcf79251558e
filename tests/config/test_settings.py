"""Unit tests for connection settings."""

import pytest

import config.settings as settings_module
from config.settings import Settings, get_settings, reload_settings
from domain.errors import ConfigurationError

ENV_VARS = (
    "LEXICON_PROTOCOL",
    "LEXICON_SERVERNAME",
    "LEXICON_PORT",
    "LEXICON_ONTOLOGY_PREFIX",
    "LEXICON_TIMEOUT",
    "LEXICON_CONFIG_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings_module, "_settings", None)


class TestSettings:
    """Test Settings construction and validation."""

    def test_defaults(self):
        settings = Settings()

        assert settings.api_url == "http://localhost:3333"
        assert settings.mls_ontology == "http://0.0.0.0:3333/ontology/0807/mls/v2#"

    def test_trailing_slash_in_prefix(self):
        settings = Settings(ontology_prefix="https://dsp.example.org/")

        assert settings.mls_ontology == "https://dsp.example.org/ontology/0807/mls/v2#"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"protocol": "ftp"},
            {"servername": ""},
            {"port": 0},
            {"port": 70000},
            {"ontology_prefix": ""},
            {"timeout": 0},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            Settings(**kwargs)

    def test_from_dict_accepts_camel_case_keys(self):
        settings = Settings.from_dict({
            "protocol": "https",
            "servername": "api.dasch.swiss",
            "port": "443",
            "ontologyPrefix": "http://api.knora.org",
        })

        assert settings.api_url == "https://api.dasch.swiss:443"
        assert settings.ontology_prefix == "http://api.knora.org"

    def test_from_dict_malformed_port(self):
        with pytest.raises(ConfigurationError):
            Settings.from_dict({"port": "eighty"})


class TestLoading:
    """Test loading from YAML files and environment."""

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text("servername: knora.example.org\nport: 8080\nontology_prefix: http://knora.example.org\n")

        settings = Settings.from_yaml(str(path))

        assert settings.api_url == "http://knora.example.org:8080"
        assert settings.ontology_prefix == "http://knora.example.org"

    def test_missing_file_gives_defaults(self, tmp_path):
        assert Settings.from_yaml(str(tmp_path / "missing.yaml")) == Settings()

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            Settings.from_yaml(str(path))

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "other.yaml"
        path.write_text("port: 4444\n")
        monkeypatch.setenv("LEXICON_CONFIG_PATH", str(path))

        assert Settings.from_yaml().port == 4444

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "lexicon.yaml"
        path.write_text("servername: from-file\nport: 8080\n")
        monkeypatch.setenv("LEXICON_SERVERNAME", "from-env")
        monkeypatch.setenv("LEXICON_PROTOCOL", "https")
        monkeypatch.setenv("LEXICON_TIMEOUT", "5")

        settings = Settings.from_env(str(path))

        assert settings.servername == "from-env"
        assert settings.port == 8080
        assert settings.protocol == "https"
        assert settings.timeout == 5.0

    def test_invalid_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LEXICON_PORT", "not-a-port")

        with pytest.raises(ConfigurationError):
            Settings.from_env(str(tmp_path / "missing.yaml"))

    def test_global_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LEXICON_CONFIG_PATH", str(tmp_path / "missing.yaml"))

        first = get_settings()
        assert get_settings() is first

        monkeypatch.setenv("LEXICON_PORT", "5555")
        reloaded = reload_settings()

        assert reloaded.port == 5555
        assert get_settings() is reloaded
