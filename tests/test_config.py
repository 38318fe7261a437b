"""Tests for configuration management.

Property tests verify universal properties across generated inputs.
"""

import tempfile
import tomllib
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tubemind.core.config import (
    DEFAULT_CONTEXT_LIMIT,
    DEFAULT_MODEL,
    Config,
    _generate_default_config_toml,
    load_config,
)
from tubemind.core.errors import ConfigError

limit_strategy = st.integers(min_value=1, max_value=100_000)
model_strategy = st.from_regex(r"gemini-[a-z0-9.-]{1,20}", fullmatch=True)


def write_config(path: Path, content: str) -> None:
    """Helper to write a TOML config file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestConfigLoadingPriority:
    """Local config values override global ones, which override defaults."""

    @settings(max_examples=50)
    @given(
        global_model=model_strategy,
        local_model=model_strategy,
        global_limit=limit_strategy,
        local_limit=limit_strategy,
    )
    def test_local_config_takes_precedence_over_global(
        self,
        global_model: str,
        local_model: str,
        global_limit: int,
        local_limit: int,
    ) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)
            global_path = tmpdir_path / "global" / "config"
            local_path = tmpdir_path / "local" / "config"

            write_config(
                global_path,
                f'[model]\nname = "{global_model}"\n\n[content]\ncontext_limit = {global_limit}\n',
            )
            write_config(
                local_path,
                f'[model]\nname = "{local_model}"\n\n[content]\ncontext_limit = {local_limit}\n',
            )

            config = load_config(local_path=local_path, global_path=global_path)

            assert config.model.name == local_model
            assert config.content.context_limit == local_limit

    def test_global_values_fill_gaps_in_local(self, tmp_path: Path) -> None:
        global_path = tmp_path / "global" / "config"
        local_path = tmp_path / "local" / "config"
        write_config(global_path, '[output]\noutput_dir = "reports/"\n')
        write_config(local_path, "[content]\nnotes_context_limit = 42\n")

        config = load_config(local_path=local_path, global_path=global_path)

        assert config.output.output_dir == "reports/"
        assert config.content.notes_context_limit == 42
        assert config.content.context_limit == DEFAULT_CONTEXT_LIMIT

    def test_defaults_when_no_files(self, tmp_path: Path) -> None:
        config = load_config(
            local_path=tmp_path / "local" / "config",
            global_path=tmp_path / "global" / "config",
            auto_create_local=False,
        )

        assert config == Config()
        assert config.model.name == DEFAULT_MODEL
        assert config.model.analysis_temperature == 0.5


class TestConfigAutoCreation:
    """The local config file is created when no configuration exists."""

    def test_creates_local_config(self, tmp_path: Path) -> None:
        local_path = tmp_path / "local" / "config"

        load_config(local_path=local_path, global_path=tmp_path / "global" / "config")

        assert local_path.exists()
        assert tomllib.loads(local_path.read_text())["model"]["name"] == DEFAULT_MODEL

    def test_does_not_create_when_global_exists(self, tmp_path: Path) -> None:
        local_path = tmp_path / "local" / "config"
        global_path = tmp_path / "global" / "config"
        write_config(global_path, '[api]\ngemini_key = "k"\n')

        load_config(local_path=local_path, global_path=global_path)

        assert not local_path.exists()

    def test_default_toml_loads_to_defaults(self, tmp_path: Path) -> None:
        local_path = tmp_path / "config"
        write_config(local_path, _generate_default_config_toml())

        config = load_config(local_path=local_path, global_path=tmp_path / "missing")

        assert config == Config()


class TestConfigValidation:
    """Invalid files and values raise ConfigError."""

    @pytest.mark.parametrize(
        "content",
        [
            "[model\nname = ",
            "[model]\nanalysis_temperature = 3.5\n",
            '[model]\nanalysis_temperature = "hot"\n',
            '[model]\nname = ""\n',
            "[content]\ncontext_limit = 0\n",
            "[content]\nnotes_context_limit = true\n",
            "[output]\noutput_dir = 5\n",
            'model = "gemini"\n',
        ],
    )
    def test_invalid_config_raises(self, tmp_path: Path, content: str) -> None:
        local_path = tmp_path / "config"
        write_config(local_path, content)

        with pytest.raises(ConfigError):
            load_config(local_path=local_path, global_path=tmp_path / "missing")

    def test_integer_temperature_accepted(self, tmp_path: Path) -> None:
        local_path = tmp_path / "config"
        write_config(local_path, "[model]\nanalysis_temperature = 1\n")

        config = load_config(local_path=local_path, global_path=tmp_path / "missing")

        assert config.model.analysis_temperature == 1.0


class TestApiKeyPrecedence:
    """Environment variables take precedence over the config file."""

    def test_gemini_env_var_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        monkeypatch.setenv("API_KEY", "legacy-key")
        config = Config()
        config.api.gemini_key = "file-key"

        assert config.get_gemini_key() == "env-key"

    def test_legacy_env_var_used_when_gemini_missing(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("API_KEY", "legacy-key")

        assert Config().get_gemini_key() == "legacy-key"

    def test_file_key_used_without_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("API_KEY", raising=False)
        config = Config()
        config.api.gemini_key = "file-key"

        assert config.get_gemini_key() == "file-key"

    def test_empty_key_is_not_an_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("API_KEY", raising=False)

        assert Config().get_gemini_key() == ""
