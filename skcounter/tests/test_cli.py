"""
Tests for the command line interface.

Each test drives the CLI through main() with a temporary data directory,
one command per call, the way a user would from the shell.
"""

import json

import pytest

from skcounter.cli import main, parse_args


@pytest.fixture
def run(tmp_path, capsys):
    """Run one CLI command against a temporary data directory."""
    data_dir = str(tmp_path / "data")

    def _run(*argv):
        code = main(["--data-dir", data_dir, *argv])
        out, err = capsys.readouterr()
        return code, out, err

    return _run


class TestParseArgs:
    """Tests for argument parsing."""

    def test_adjust_direction(self):
        """'+' and '-' are accepted as directions."""
        assert parse_args(["bid", "1", "+"]).direction == "+"
        assert parse_args(["tricks", "Alice", "-"]).direction == "-"

    def test_bonus_flags(self):
        """Capture options are parsed."""
        args = parse_args(["bonus", "2", "--pirates", "2", "--skull-king", "--colored-14s", "1"])

        assert args.pirates == 2
        assert args.skull_king is True
        assert args.colored_14s == 1
        assert args.black_14 is False

    def test_command_required(self):
        """A sub-command is mandatory."""
        with pytest.raises(SystemExit):
            parse_args([])


class TestCommands:
    """Tests for running a game from the command line."""

    def test_start_and_status(self, run):
        """Start shows the first round, status repeats it."""
        code, out, _ = run("start", "3")

        assert code == 0
        assert "Round 1/10 - bidding (1 cards)" in out
        assert "Player 3" in out

        code, out, _ = run("status")
        assert code == 0
        assert "Round 1/10" in out

    def test_status_without_game(self, run):
        """Commands need a game in progress."""
        code, _, err = run("status")

        assert code == 1
        assert "No game in progress" in err

    def test_invalid_player_count(self, run):
        """Start rejects counts outside 2-12."""
        code, _, err = run("start", "1")

        assert code == 1
        assert "between 2 and 12" in err

    def test_play_round(self, run):
        """Bid, score and validate a round by name and seat."""
        run("start", "2")
        run("rename", "1", "Alice")
        run("bid", "alice", "+")
        run("score")
        run("tricks", "Alice", "+")

        code, out, _ = run("validate")

        assert code == 0
        assert "Round 2 begins" in out
        assert "Alice" in out
        assert "20 pts" in out
        assert "10 pts" in out

    def test_rejected_validation(self, run):
        """Wrong trick totals exit with an error and keep the round."""
        run("start", "2")
        run("score")

        code, _, err = run("validate")

        assert code == 1
        assert "Expected 1 tricks, found 0" in err
        _, out, _ = run("status")
        assert "Round 1/10 - scoring" in out

    def test_kraken_and_bonus(self, run):
        """Kraken flag and capture bonus appear in the status."""
        run("start", "2")
        run("bid", "1", "+")
        run("score")
        run("bonus", "1", "--pirates", "1")

        code, out, _ = run("kraken")

        assert code == 0
        assert "[kraken]" in out
        assert "+30 bonus" in out
        # Bid 1 with no tricks won yet is a miss, the bonus does not count
        assert "-10 pts" in out

    def test_unknown_player(self, run):
        """Unknown player references are reported."""
        run("start", "2")

        code, _, err = run("bid", "Zed", "+")

        assert code == 1
        assert "No player 'Zed'" in err

    def test_duplicate_rename(self, run):
        """Renaming onto an existing name fails."""
        run("start", "2")

        code, _, err = run("rename", "1", "player 2")

        assert code == 1
        assert "already exists" in err

    def test_final_round_and_profiles(self, run, tmp_path):
        """Finishing a game prints standings and fills the profiles."""
        run("start", "2")
        state_file = tmp_path / "data" / "game.json"
        state = json.loads(state_file.read_text())
        state["current_round"] = 10
        state_file.write_text(json.dumps(state))

        run("score")
        for _ in range(10):
            run("tricks", "2", "+")
        code, out, _ = run("validate")

        assert code == 0
        assert "Final standings:" in out
        assert "1. Player 1  100 pts" in out
        assert "2. Player 2  -100 pts" in out

        code, out, _ = run("profiles")
        assert code == 0
        assert "Player 1  100 pts (1 games)" in out

    def test_new_game(self, run, tmp_path):
        """new-game discards the saved state."""
        run("start", "2")

        code, out, _ = run("new-game")

        assert code == 0
        assert not (tmp_path / "data" / "game.json").exists()

    def test_config_file(self, tmp_path, capsys):
        """Settings are read from --config."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "data_dir": str(tmp_path / "elsewhere"),
            "player_name_template": "Pirate {n}",
        }))

        code = main(["--config", str(config_file), "start", "2"])
        out, _ = capsys.readouterr()

        assert code == 0
        assert "Pirate 2" in out
        assert (tmp_path / "elsewhere" / "game.json").exists()

    def test_invalid_config(self, tmp_path, capsys):
        """Invalid settings exit with status 2."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"top_profiles": 0}))

        code = main(["--config", str(config_file), "status"])
        _, err = capsys.readouterr()

        assert code == 2
        assert "top_profiles" in err

    def test_profile_management(self, run, tmp_path):
        """Profiles can be renamed, reset and deleted."""
        profiles_file = tmp_path / "data" / "profiles.json"
        profiles_file.parent.mkdir(parents=True)
        profiles_file.write_text(json.dumps({"profiles": [
            {"name": "Ann", "cumulative_points": 300, "played_count": 2},
            {"name": "Ben", "cumulative_points": 120, "played_count": 1},
        ]}))

        code, out, _ = run("profiles", "--rename", "ann", "Anna", "--reset", "Ben")
        assert code == 0
        assert "1. Anna  300 pts (2 games)" in out
        assert "2. Ben  0 pts (1 games)" in out

        code, out, _ = run("profiles", "--delete", "Anna")
        assert "Anna" not in out

        code, _, err = run("profiles", "--delete", "Anna")
        assert code == 1
        assert "No profile named" in err

    def test_profiles_limit(self, run, tmp_path):
        """--limit caps the standings and must be positive."""
        profiles_file = tmp_path / "data" / "profiles.json"
        profiles_file.parent.mkdir(parents=True)
        profiles_file.write_text(json.dumps({"profiles": [
            {"name": "Ann", "cumulative_points": 300, "played_count": 2},
            {"name": "Ben", "cumulative_points": 120, "played_count": 1},
        ]}))

        code, out, _ = run("profiles", "--limit", "1")
        assert code == 0
        assert "Ann" in out
        assert "Ben" not in out

        with pytest.raises(SystemExit):
            parse_args(["profiles", "--limit", "0"])

    def test_corrupt_profiles_do_not_block_play(self, run, tmp_path):
        """A broken profiles file leaves the game playable."""
        run("start", "2")
        (tmp_path / "data" / "profiles.json").write_text("{not json")

        code, out, _ = run("bid", "1", "+")
        assert code == 0
        assert "bid 1/1" in out

        code, out, _ = run("profiles")
        assert code == 0
        assert "No profiles yet" in out

    @pytest.mark.parametrize("content", ["[]", '{"players": [1, 2]}'])
    def test_malformed_save(self, run, tmp_path, content):
        """An unusable save is reported as no game, not a crash."""
        state_file = tmp_path / "data" / "game.json"
        state_file.parent.mkdir(parents=True)
        state_file.write_text(content)

        code, _, err = run("status")

        assert code == 1
        assert "No game in progress" in err

    def test_malformed_profile_entry(self, run, tmp_path):
        """Profiles without a name are skipped."""
        profiles_file = tmp_path / "data" / "profiles.json"
        profiles_file.parent.mkdir(parents=True)
        profiles_file.write_text(json.dumps({"profiles": [{"played_count": 1}]}))

        code, out, _ = run("start", "3")

        assert code == 0
        assert "Player 3" in out

    def test_config_write(self, run, tmp_path):
        """config --write saves the effective settings for --config."""
        target = tmp_path / "conf" / "skcounter.json"

        code, out, _ = run("config", "--write", str(target))

        assert code == 0
        assert "profiles.json" in out
        saved = json.loads(target.read_text())
        assert saved["data_dir"] == str(tmp_path / "data")
