"""
Tests for the flakenotes CLI commands.
"""

import json

import pytest
import yaml
from click.testing import CliRunner
from unittest.mock import patch

from flakenotes.cli import cli
from flakenotes.config import get_default_config
from flakenotes.exit_codes import CONFIG_ERROR, DATA_ERROR


@pytest.fixture
def runner():
    return CliRunner()


class TestSummarizeCommand:
    """Tests for `flakenotes summarize`."""

    def test_summarize_stdin(self, runner, sample_notification):
        result = runner.invoke(cli, ['summarize', '--no-raw'], input=sample_notification)
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert len(lines) == 7
        assert lines[0].startswith(" - Updated input [`home-manager`]")
        assert "(follows `nihilistic-nvim/rustacean-nvim/flake-parts`)" in lines[-1]

    def test_summarize_echoes_raw_by_default(self, runner, home_manager_update):
        result = runner.invoke(cli, ['summarize'], input=home_manager_update)
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "<details><summary>Raw output</summary><p>"
        assert "Flake lock file updates:" in lines
        assert lines[-1].startswith(" - Updated input [`home-manager`]")

    def test_summarize_file_argument(self, runner, tmp_path, home_manager_update):
        notification = tmp_path / 'update.txt'
        notification.write_text(home_manager_update, encoding='utf-8')
        result = runner.invoke(cli, ['summarize', str(notification), '--no-raw'])
        assert result.exit_code == 0, result.output
        assert "compare/bd92e8ee...bcccb01d" in result.output

    def test_summarize_bad_header(self, runner):
        result = runner.invoke(cli, ['summarize'], input="warning: Git tree is dirty\n")
        assert result.exit_code == DATA_ERROR
        assert "Failed to parse header" in result.output

    def test_summarize_trailing_garbage(self, runner):
        result = runner.invoke(
            cli, ['summarize', '--no-raw'],
            input="Flake lock file updates:\n\nnot a block\n",
        )
        assert result.exit_code == 0
        assert result.output == ""

    def test_summarize_follows_only(self, runner):
        text = (
            "Flake lock file updates:\n\n"
            "• Added input 'a/b/flake-parts':\n"
            "    follows 'a/flake-parts'\n"
        )
        result = runner.invoke(cli, ['summarize', '--no-raw'], input=text)
        assert result.exit_code == 0
        assert result.output == " - Added input `a/b/flake-parts` (follows `a/flake-parts`)\n"

    def test_cross_origin_omitted_by_default(self, runner, cross_origin_update):
        result = runner.invoke(cli, ['summarize', '--no-raw'], input=cross_origin_update)
        assert result.exit_code == 0
        assert "/compare/" not in result.output
        assert "https://gitlab.com/mirror/nixpkgs/-/tree/" in result.output

    def test_cross_origin_error(self, runner, cross_origin_update):
        result = runner.invoke(
            cli, ['summarize', '--cross-origin', 'error'], input=cross_origin_update
        )
        assert result.exit_code == DATA_ERROR
        assert "different repositories" in result.output
        assert "<details>" not in result.output

    def test_raw_details_from_config(self, runner, home_manager_update):
        config = get_default_config()
        config['render']['raw_details'] = False
        with patch('flakenotes.cli_utils.load_config', return_value=config):
            result = runner.invoke(cli, ['summarize'], input=home_manager_update)
        assert result.exit_code == 0
        assert "<details>" not in result.output

    def test_raw_flag_overrides_config(self, runner, home_manager_update):
        config = get_default_config()
        config['render']['raw_details'] = False
        with patch('flakenotes.cli_utils.load_config', return_value=config):
            result = runner.invoke(cli, ['summarize', '--raw'], input=home_manager_update)
        assert "<details>" in result.output

    def test_raw_details_from_env(self, runner, monkeypatch, home_manager_update):
        monkeypatch.setenv('FLAKENOTES_RENDER_RAW_DETAILS', 'false')
        result = runner.invoke(cli, ['summarize'], input=home_manager_update)
        assert result.exit_code == 0
        assert "<details>" not in result.output

    def test_invalid_cross_origin_config(self, runner, home_manager_update):
        config = get_default_config()
        config['render']['cross_origin'] = 'sometimes'
        with patch('flakenotes.cli_utils.load_config', return_value=config):
            result = runner.invoke(cli, ['summarize'], input=home_manager_update)
        assert result.exit_code == CONFIG_ERROR
        assert "render.cross_origin" in result.output

    def test_pretty(self, runner, home_manager_update):
        result = runner.invoke(cli, ['summarize', '--pretty'], input=home_manager_update)
        assert result.exit_code == 0
        assert "<details>" not in result.output

    def test_debug(self, runner, home_manager_update):
        result = runner.invoke(cli, ['summarize', '--no-raw', '--debug'], input=home_manager_update)
        assert result.exit_code == 0
        assert "compare/bd92e8ee...bcccb01d" in result.output

    def test_short_commit_is_data_error(self, runner):
        text = (
            "Flake lock file updates:\n\n"
            "• Added input 'tiny':\n"
            "    'github:a/b/abc' (2025-01-01)\n"
        )
        result = runner.invoke(cli, ['summarize', '--no-raw'], input=text)
        assert result.exit_code == DATA_ERROR


class TestParseCommand:
    """Tests for `flakenotes parse`."""

    def test_jsonl_default(self, runner, sample_notification):
        result = runner.invoke(cli, ['parse'], input=sample_notification)
        assert result.exit_code == 0, result.output
        rows = [json.loads(line) for line in result.output.splitlines()]
        assert len(rows) == 7
        assert rows[0]['type'] == 'updated'
        assert rows[0]['name'] == 'home-manager'
        assert rows[0]['diff_url'] == (
            "https://github.com/nix-community/home-manager/compare/bd92e8ee...bcccb01d"
        )
        assert rows[3]['kind'] == 'new'
        assert rows[-1] == {
            'type': 'added',
            'name': 'nihilistic-nvim/rustacean-nvim/gen-luarc/flake-parts',
            'kind': 'follows',
            'follows': 'nihilistic-nvim/rustacean-nvim/flake-parts',
        }

    def test_json(self, runner, home_manager_update):
        result = runner.invoke(cli, ['parse', '--format', 'json'], input=home_manager_update)
        data = json.loads(result.output)
        assert isinstance(data, list)
        assert data[0]['from']['date'] == '2025-10-03'

    def test_yaml(self, runner, home_manager_update):
        result = runner.invoke(cli, ['parse', '-f', 'yaml'], input=home_manager_update)
        data = yaml.safe_load(result.output)
        assert data[0]['to']['commit'] == 'bcccb01d0a353c028cc8cb3254cac7ebae32929e'

    def test_csv_fields(self, runner, sample_notification):
        result = runner.invoke(
            cli, ['parse', '-f', 'csv', '--fields', 'name,type'], input=sample_notification
        )
        lines = result.output.splitlines()
        assert lines[0] == "name,type"
        assert lines[1] == "home-manager,updated"
        assert len(lines) == 8

    def test_format_from_config(self, runner, home_manager_update):
        config = get_default_config()
        config['output']['format'] = 'json'
        with patch('flakenotes.cli_utils.load_config', return_value=config):
            result = runner.invoke(cli, ['parse'], input=home_manager_update)
        assert result.output.startswith("[")

    def test_bad_header(self, runner):
        result = runner.invoke(cli, ['parse'], input="")
        assert result.exit_code == DATA_ERROR

    def test_short_commit_update_still_parses(self, runner):
        text = (
            "Flake lock file updates:\n\n"
            "• Updated input 'tiny':\n"
            "    'github:a/b/abc' (2025-01-01)\n"
            "  → 'github:a/b/def' (2025-01-02)\n"
        )
        result = runner.invoke(cli, ['parse'], input=text)
        assert result.exit_code == 0, result.output
        row = json.loads(result.output)
        assert row['name'] == 'tiny'
        assert row['to']['commit'] == 'def'
        assert row['diff_url'] is None


class TestCliGroup:
    """Tests for the top-level group."""

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'summarize' in result.output
        assert 'parse' in result.output
