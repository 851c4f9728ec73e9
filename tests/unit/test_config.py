"""
Runtime Configuration Unit Tests
Tests for hashtree/config/runtime.py
"""
import pytest

from hashtree.config import RuntimeConfig, get_default_config, set_default_config
from hashtree.schemas.errors import UnsupportedAlgorithmException


class TestDefaults:

    def test_defaults(self):
        config = RuntimeConfig()

        assert config.hash_algorithm == "sha256"
        assert config.proof_format == "json"
        assert config.log_level == "INFO"
        assert config.log_file is None
        assert config.engine().name == "sha256"

    def test_invalid_proof_format(self):
        with pytest.raises(ValueError, match="proof_format"):
            RuntimeConfig(proof_format="xml")

    def test_engine_unknown_algorithm(self):
        with pytest.raises(UnsupportedAlgorithmException):
            RuntimeConfig(hash_algorithm="nope").engine()


class TestLoading:

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HASHTREE_HASH_ALGORITHM", "sha512")
        monkeypatch.setenv("HASHTREE_PROOF_FORMAT", "BINARY")
        monkeypatch.setenv("HASHTREE_LOG_LEVEL", "debug")

        config = RuntimeConfig.from_env()

        assert config.hash_algorithm == "sha512"
        assert config.proof_format == "binary"
        assert config.log_level == "DEBUG"

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"hash_algorithm": "blake2b"})

        assert config.hash_algorithm == "blake2b"
        assert config.proof_format == "json"

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "hashtree.yaml"
        path.write_text("hash_algorithm: sha3_256\nproof_format: binary\nextra:\n  note: x\n")

        config = RuntimeConfig.from_yaml(path)

        assert config.hash_algorithm == "sha3_256"
        assert config.proof_format == "binary"
        assert config.extra == {"note": "x"}

    def test_from_yaml_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert RuntimeConfig.from_yaml(path) == RuntimeConfig()

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_env_overrides_file(self, monkeypatch):
        base = RuntimeConfig.from_dict({"hash_algorithm": "sha512", "log_level": "WARNING"})
        monkeypatch.setenv("HASHTREE_HASH_ALGORITHM", "sha256")

        config = base.with_env_overrides()

        assert config.hash_algorithm == "sha256"
        assert config.log_level == "WARNING"
        assert base.hash_algorithm == "sha512"

    def test_no_env_overrides_returns_self(self):
        config = RuntimeConfig()

        assert config.with_env_overrides() is config

    def test_invalid_env_proof_format(self, monkeypatch):
        monkeypatch.setenv("HASHTREE_PROOF_FORMAT", "xml")

        with pytest.raises(ValueError):
            RuntimeConfig().with_env_overrides()

    def test_to_dict_round_trip(self):
        config = RuntimeConfig(hash_algorithm="sha512", proof_format="binary", log_file="x.log")

        assert RuntimeConfig.from_dict(config.to_dict()) == config


class TestDefaultConfig:

    def test_default_is_cached(self):
        assert get_default_config() is get_default_config()

    def test_set_default(self):
        custom = RuntimeConfig(hash_algorithm="sha512")
        set_default_config(custom)

        assert get_default_config() is custom
