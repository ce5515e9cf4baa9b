"""
Tests for the score counter configuration.
"""

from pathlib import Path

import pytest

from skcounter.config import CounterConfig


class TestCounterConfig:
    """Tests for CounterConfig."""

    def test_defaults_are_valid(self):
        """Default config validates."""
        config = CounterConfig()

        assert config.validate() is True
        assert config.top_profiles == 5
        assert config.player_name_template == 'Player {n}'

    def test_paths(self, tmp_path):
        """State and profile paths live in the data directory."""
        config = CounterConfig(data_dir=str(tmp_path))

        assert config.state_path == tmp_path / 'game.json'
        assert config.profiles_path == tmp_path / 'profiles.json'

    def test_home_directory_expanded(self):
        """'~' in data_dir is expanded."""
        config = CounterConfig(data_dir='~/scores')
        assert config.state_path == Path.home() / 'scores' / 'game.json'

    def test_save_and_load(self, tmp_path):
        """Config survives a save/load round trip."""
        config = CounterConfig(data_dir='/srv/skcounter', top_profiles=10, log_level='DEBUG')
        filepath = tmp_path / 'config.json'

        config.save(str(filepath))
        loaded = CounterConfig.from_file(str(filepath))

        assert loaded == config

    def test_from_dict_ignores_unknown_keys(self):
        """Unknown keys are dropped."""
        config = CounterConfig.from_dict({'top_profiles': 3, 'theme': 'dark'})
        assert config.top_profiles == 3

    @pytest.mark.parametrize(
        'overrides,message',
        [
            ({'state_filename': ''}, 'state_filename'),
            ({'profiles_filename': ''}, 'profiles_filename'),
            ({'profiles_filename': 'game.json'}, 'must differ'),
            ({'player_name_template': 'Player'}, 'player_name_template'),
            ({'top_profiles': 0}, 'top_profiles'),
            ({'log_level': 'TRACE'}, 'log_level'),
        ],
    )
    def test_validate_rejects(self, overrides, message):
        """Invalid values raise ValueError."""
        with pytest.raises(ValueError, match=message):
            CounterConfig(**overrides).validate()

    def test_str(self):
        """String form lists the file locations."""
        text = str(CounterConfig(data_dir='/tmp/sk'))
        assert 'game.json' in text
        assert 'profiles.json' in text

    def test_save_creates_directory(self, tmp_path):
        """Saving into a missing directory creates it."""
        filepath = tmp_path / 'nested' / 'config.json'

        CounterConfig(top_profiles=8).save(str(filepath))

        assert CounterConfig.from_file(str(filepath)).top_profiles == 8

    def test_from_file_rejects_non_object(self, tmp_path):
        """A config file must hold a JSON object."""
        filepath = tmp_path / 'config.json'
        filepath.write_text('["top_profiles", 3]')

        with pytest.raises(ValueError, match='JSON object'):
            CounterConfig.from_file(str(filepath))
