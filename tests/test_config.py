"""Property-based tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from droplet_snapshots.core.config import DEFAULT_API_URL, Config, ConfigManager
from droplet_snapshots.core.exceptions import ConfigurationError


# Hypothesis strategies for generating test data
droplet_names = st.text(
    alphabet='abcdefghijklmnopqrstuvwxyz0123456789.-',
    min_size=1,
    max_size=63
)

tokens = st.text(alphabet='abcdef0123456789', min_size=16, max_size=64).map(lambda t: f"dop_v1_{t}")


@st.composite
def wait_budget(draw):
    """Generate wait_interval/max_wait pairs that allow at least one trial."""
    interval = draw(st.integers(min_value=1, max_value=60))
    trials = draw(st.integers(min_value=1, max_value=120))
    return interval, interval * trials


class TestConfigFromEnvironment:
    """Property-based tests for building Config from environment variables."""

    @given(token=tokens, name=droplet_names)
    def test_required_values_are_read(self, token, name):
        config = ConfigManager().load_config(environ={'DO_TOKEN': token, 'DROPLET_NAME': name})

        assert config.api_token == token
        assert config.droplet_name == name
        assert config.api_base_url == DEFAULT_API_URL
        assert config.halt_on_failure is False

    @given(budget=wait_budget())
    def test_max_trials_follows_wait_budget(self, budget):
        interval, max_wait = budget
        config = ConfigManager().load_config(environ={
            'DO_TOKEN': 'token',
            'DROPLET_NAME': 'web',
            'WAIT_INTERVAL': str(interval),
            'MAX_WAIT': str(max_wait),
        })

        assert config.max_trials == max_wait // interval
        assert config.max_trials >= 1

    def test_defaults_match_polling_policy(self, sample_config):
        assert sample_config.wait_interval == 10
        assert sample_config.max_wait == 600
        assert sample_config.max_trials == 60
        assert sample_config.snapshot_validity_days == 7

    def test_overrides_win_over_environment(self):
        config = ConfigManager().load_config(
            environ={'DO_TOKEN': 'token', 'DROPLET_NAME': 'web', 'HALT_ON_FAILURE': 'false'},
            droplet_name='db',
            halt_on_failure=True,
        )

        assert config.droplet_name == 'db'
        assert config.halt_on_failure is True

    def test_none_overrides_are_ignored(self):
        config = ConfigManager().load_config(
            environ={'DO_TOKEN': 'token', 'DROPLET_NAME': 'web'},
            droplet_name=None,
        )
        assert config.droplet_name == 'web'

    def test_boolean_parsing(self):
        config = ConfigManager().load_config(
            environ={'DO_TOKEN': 'token', 'DROPLET_NAME': 'web', 'HALT_ON_FAILURE': 'true'}
        )
        assert config.halt_on_failure is True


class TestConfigValidation:
    """Unit tests for configuration validation."""

    @pytest.mark.parametrize("environ, missing", [
        ({}, "DO_TOKEN, DROPLET_NAME"),
        ({'DROPLET_NAME': 'web'}, "DO_TOKEN"),
        ({'DO_TOKEN': 'token'}, "DROPLET_NAME"),
        ({'DO_TOKEN': '', 'DROPLET_NAME': 'web'}, "DO_TOKEN"),
    ])
    def test_missing_required_values(self, environ, missing):
        with pytest.raises(ConfigurationError, match=f"Missing required configuration: {missing}"):
            ConfigManager().load_config(environ=environ)

    def test_blank_droplet_name_rejected(self):
        with pytest.raises(ValueError, match="must not be empty"):
            Config(api_token="token", droplet_name="   ")

    def test_invalid_api_url_rejected(self):
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            ConfigManager().load_config(environ={
                'DO_TOKEN': 'token', 'DROPLET_NAME': 'web', 'DO_API_URL': 'ftp://example.com'
            })

    def test_trailing_slash_is_stripped(self):
        config = Config(api_token="token", droplet_name="web", api_base_url="https://example.com/v2/")
        assert config.api_base_url == "https://example.com/v2"

    @pytest.mark.parametrize("field, value", [
        ('WAIT_INTERVAL', '0'),
        ('MAX_WAIT', '-5'),
        ('SNAPSHOT_VALIDITY_DAYS', '0'),
        ('WAIT_INTERVAL', 'ten'),
    ])
    def test_invalid_numbers_rejected(self, field, value):
        with pytest.raises(ConfigurationError):
            ConfigManager().load_config(environ={'DO_TOKEN': 'token', 'DROPLET_NAME': 'web', field: value})

    def test_wait_budget_smaller_than_interval_rejected(self):
        with pytest.raises(ConfigurationError, match="must be at least wait_interval"):
            ConfigManager().load_config(environ={
                'DO_TOKEN': 'token', 'DROPLET_NAME': 'web', 'WAIT_INTERVAL': '30', 'MAX_WAIT': '10'
            })


class TestEnvFile:
    """Tests for dotenv loading."""

    def test_env_file_values_are_loaded(self, monkeypatch):
        # setenv first so values loaded from the file are undone afterwards
        for name in ('DO_TOKEN', 'DROPLET_NAME'):
            monkeypatch.setenv(name, 'placeholder')
            monkeypatch.delenv(name)

        with tempfile.TemporaryDirectory() as temp_dir:
            env_file = Path(temp_dir) / ".env"
            env_file.write_text("DO_TOKEN=from-file\nDROPLET_NAME=web\n")

            config = ConfigManager(env_file).load_config()

        assert config.api_token == 'from-file'
        assert config.droplet_name == 'web'

    def test_process_environment_wins_over_env_file(self, monkeypatch):
        monkeypatch.setenv('DO_TOKEN', 'from-env')
        monkeypatch.setenv('DROPLET_NAME', 'web')

        with tempfile.TemporaryDirectory() as temp_dir:
            env_file = Path(temp_dir) / ".env"
            env_file.write_text("DO_TOKEN=from-file\n")

            config = ConfigManager(env_file).load_config()

        assert config.api_token == 'from-env'

    def test_missing_env_file_raises(self):
        with pytest.raises(ConfigurationError, match="Environment file not found"):
            ConfigManager(Path("/nonexistent/.env")).load_config()
