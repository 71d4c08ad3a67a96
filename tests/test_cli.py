"""
Tests for the command line interface
Run with: pytest tests/test_cli.py -v
"""

import pandas as pd
import pytest
from click.testing import CliRunner

from manage import cli

from factories import cohort_rows, raw_row


@pytest.fixture
def raw_csv(tmp_path):
    rows = cohort_rows([1.5] * 9 + [5.0])
    rows += [
        raw_row(2.10, bookmaker="TAB", label="Under"),
        raw_row(1.80, bookmaker="Ladbrokes", label="Under"),
    ]
    path = tmp_path / "raw.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


def _invoke(raw_csv, *args):
    return CliRunner().invoke(cli, ["--raw", str(raw_csv), "--top-bets", "", *args])


class TestCommands:
    def test_top_bets(self, raw_csv):
        result = _invoke(raw_csv, "top-bets")

        assert result.exit_code == 0, result.output
        assert "Nikola Jokic | Points | OVER | 25.5" in result.output
        assert "Book09" in result.output

    def test_top_bets_local_only_finds_nothing(self, raw_csv):
        result = _invoke(raw_csv, "top-bets", "--local-only")

        assert result.exit_code == 0, result.output
        assert "No value bets found." in result.output

    def test_arbitrage(self, raw_csv):
        result = _invoke(raw_csv, "arbitrage")

        assert result.exit_code == 0, result.output
        # Book09's 5.0 over against TAB's 2.10 under, and against Ladbrokes' 1.80
        assert "TAB" in result.output
        assert "Ladbrokes" in result.output
        assert "Player Points" in result.output

    def test_bet_detail(self, raw_csv):
        result = _invoke(raw_csv, "bet", "Nikola Jokic_over_player_points_25.5")

        assert result.exit_code == 0, result.output
        assert "prob_diff: -34.05" in result.output
        assert "Price distribution" in result.output

    def test_bet_not_found(self, raw_csv):
        result = _invoke(raw_csv, "bet", "Nobody_over_player_points_1.5")
        assert result.exit_code == 1
        assert "Bet not found" in result.output

    def test_bet_bad_key(self, raw_csv):
        result = _invoke(raw_csv, "bet", "garbage")
        assert result.exit_code == 2

    def test_point_detail(self, raw_csv):
        result = _invoke(raw_csv, "point", "--game", "Denver Nuggets vs Utah Jazz",
                         "--player", "Nikola Jokic", "--point", "25.5")

        assert result.exit_code == 0, result.output
        assert "Count: 10" in result.output
        assert "Count: 2" in result.output

    def test_point_ladder(self, raw_csv):
        result = _invoke(raw_csv, "point", "--game", "Denver Nuggets vs Utah Jazz", "--player", "Nikola Jokic")

        assert result.exit_code == 0, result.output
        assert "--- 25.5 ---" in result.output

    def test_games(self, raw_csv):
        result = _invoke(raw_csv, "games")

        assert result.exit_code == 0, result.output
        assert "Denver Nuggets vs Utah Jazz" in result.output
        assert "  Nikola Jokic" in result.output

    def test_missing_raw_file(self, tmp_path):
        result = _invoke(tmp_path / "missing.csv", "top-bets")

        assert result.exit_code == 1
        assert "Could not load" in result.output


class TestStakes:
    def test_solution(self):
        result = CliRunner().invoke(cli, ["stakes", "2.10", "2.05", "100"])

        assert result.exit_code == 0, result.output
        assert "stake_over: 47.62" in result.output
        assert "stake_under: 48.78" in result.output
        assert "Warning" not in result.output

    def test_not_an_arbitrage_warns(self):
        result = CliRunner().invoke(cli, ["stakes", "1.80", "1.90", "100"])

        assert result.exit_code == 0
        assert "Warning" in result.output

    def test_invalid_input(self):
        result = CliRunner().invoke(cli, ["stakes", "2.10", "2.05", "0"])

        assert result.exit_code == 1
        assert "Invalid input" in result.output
