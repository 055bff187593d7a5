"""
Unit tests for HostConfig.
"""

from pathlib import Path

import pytest

from tinyhttp.config import DEFAULT_BASE_URI, HostConfig


class TestHostConfig:
    """Tests for HostConfig."""

    def test_defaults(self):
        config = HostConfig()
        assert config.base_uri == DEFAULT_BASE_URI == "http://localhost:9999/"
        assert config.host == "localhost"
        assert config.port == 9999
        assert config.path_prefix == "/"
        config.validate()

    def test_path_prefix(self):
        config = HostConfig(base_uri="http://127.0.0.1:8080/app")
        assert config.path_prefix == "/app/"

    def test_default_port(self):
        assert HostConfig(base_uri="http://example.com/").port == 80

    @pytest.mark.parametrize("uri", ["http://*:8080/", "http://+:8080/"])
    def test_wildcard_hosts(self, uri):
        config = HostConfig(base_uri=uri)
        assert config.host == ""
        assert config.port == 8080
        config.validate()

    @pytest.mark.parametrize(
        "uri",
        [
            "https://localhost:9999/",
            "ftp://localhost/",
            "localhost:9999",
            "http://localhost:99999/",
            "http://localhost:abc/",
            "http:///path",
        ],
    )
    def test_invalid_base_uri(self, uri):
        with pytest.raises(ValueError):
            HostConfig(base_uri=uri).validate()

    @pytest.mark.parametrize(
        "field,value",
        [
            ("backlog", 0),
            ("buffer_size", 10),
            ("timeout", 0),
            ("max_request_size", 1),
        ],
    )
    def test_invalid_values(self, field, value):
        config = HostConfig(**{field: value})
        with pytest.raises(ValueError):
            config.validate()

    def test_resolved_base_directory(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert HostConfig().resolved_base_directory == tmp_path / "html"
        assert HostConfig(base_directory="/srv").resolved_base_directory == Path("/srv")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TINYHTTP_BASE_URI", "http://127.0.0.1:7000/")
        monkeypatch.setenv("TINYHTTP_BASE_DIRECTORY", "/srv/site")
        monkeypatch.setenv("TINYHTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("TINYHTTP_LOG_LEVEL", "DEBUG")

        config = HostConfig.from_env()
        assert config.port == 7000
        assert config.base_directory == "/srv/site"
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("TINYHTTP_BASE_URI", "TINYHTTP_BASE_DIRECTORY",
                     "TINYHTTP_TIMEOUT", "TINYHTTP_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        config = HostConfig.from_env()
        assert config.base_uri == DEFAULT_BASE_URI
        assert config.base_directory is None
