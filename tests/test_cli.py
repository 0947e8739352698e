"""
Tests for the csvjoin command line entry point.
"""
import logging
import os
import sys

import pytest
import toml

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import csvjoin
from config_manager import CONFIG_ENV_VAR


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path, monkeypatch):
    """Run every test from an empty directory with no ambient configuration."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    # Keep pytest's own log capture handlers in place
    monkeypatch.setattr(csvjoin, 'setup_logging', lambda *args, **kwargs: None)
    monkeypatch.setattr(csvjoin, 'set_log_level', lambda level: None)
    yield tmp_path


def write_csv(directory, name, text):
    path = directory / name
    path.write_text(text)
    return str(path)


@pytest.fixture
def people_files(isolated_cli):
    a = write_csv(isolated_cli, 'a.csv', "id,name\n1,alice\n2,bob\n")
    b = write_csv(isolated_cli, 'b.csv', "id,age\n1,30\n1,31\n")
    return a, b


class TestUsage:
    """Test argument validation."""

    def test_single_file_is_a_usage_error(self, isolated_cli, monkeypatch, capsys):
        def fail_if_called(*args, **kwargs):
            raise AssertionError("no file should be opened")
        monkeypatch.setattr(csvjoin, 'read_csv_sources', fail_if_called)

        status = csvjoin.main(['only.csv'])

        captured = capsys.readouterr()
        assert status == 1
        assert captured.out == ''
        assert 'usage: csvjoin' in captured.err
        assert 'at least 2 CSV files are required' in captured.err

    def test_no_files_is_a_usage_error(self, capsys):
        assert csvjoin.main([]) == 1
        assert 'usage:' in capsys.readouterr().err


class TestJoinCommand:
    """Test running joins through the command line."""

    def test_joins_to_stdout(self, people_files, capsys):
        status = csvjoin.main(list(people_files))

        assert status == 0
        assert capsys.readouterr().out == "id,name,age\n1,alice,30\n1,alice,31\n2,bob,\n"

    def test_joins_to_output_file(self, people_files, isolated_cli, capsys):
        output = isolated_cli / 'joined.csv'

        status = csvjoin.main([*people_files, '--output', str(output)])

        assert status == 0
        assert capsys.readouterr().out == ''
        assert output.read_text() == "id,name,age\n1,alice,30\n1,alice,31\n2,bob,\n"

    def test_repeated_runs_are_byte_identical(self, people_files, capsys):
        csvjoin.main(list(people_files))
        first = capsys.readouterr().out
        csvjoin.main(list(people_files))
        assert capsys.readouterr().out == first

    def test_schema_error(self, isolated_cli, capsys, caplog):
        a = write_csv(isolated_cli, 'a.csv', "id,name\n1,alice\n")
        b = write_csv(isolated_cli, 'b.csv', "key,age\n1,30\n")
        output = isolated_cli / 'joined.csv'

        with caplog.at_level(logging.ERROR):
            status = csvjoin.main([a, b, '-o', str(output)])

        assert status == 1
        assert capsys.readouterr().out == ''
        assert not output.exists()
        assert 'cannot identify columns common to all input files' in caplog.text

    def test_missing_file(self, people_files, isolated_cli, capsys, caplog):
        missing = str(isolated_cli / 'missing.csv')

        with caplog.at_level(logging.ERROR):
            status = csvjoin.main([*people_files, missing])

        assert status == 1
        assert capsys.readouterr().out == ''
        assert missing in caplog.text

    def test_file_without_header(self, people_files, isolated_cli, capsys, caplog):
        empty = write_csv(isolated_cli, 'empty.csv', "")

        with caplog.at_level(logging.ERROR):
            status = csvjoin.main([people_files[0], empty])

        assert status == 1
        assert capsys.readouterr().out == ''
        assert f"CSV file {empty} has no headers" in caplog.text

    def test_row_missing_its_join_value(self, isolated_cli, capsys, caplog):
        a = write_csv(isolated_cli, 'a.csv', "name,id\nalice,1\nbob\n")
        b = write_csv(isolated_cli, 'b.csv', "id,age\n1,3\n")

        with caplog.at_level(logging.ERROR):
            status = csvjoin.main([a, b])

        assert status == 1
        assert capsys.readouterr().out == ''
        assert 'wrong number of fields' in caplog.text
        assert 'row=3' in caplog.text

    def test_unwritable_output(self, people_files, isolated_cli, caplog):
        output = isolated_cli / 'no_such_dir' / 'joined.csv'

        with caplog.at_level(logging.ERROR):
            status = csvjoin.main([*people_files, '-o', str(output)])

        assert status == 1
        assert 'cannot open output file' in caplog.text


class TestConfigOptions:
    """Test configuration handling on the command line."""

    def test_config_file_changes_dialect(self, isolated_cli, capsys):
        a = write_csv(isolated_cli, 'a.csv', "id;name\n1;alice\n")
        b = write_csv(isolated_cli, 'b.csv', "id;age\n1;30\n")
        config_path = isolated_cli / 'join.toml'
        config_path.write_text(toml.dumps({'csv': {'delimiter': ';'}}))

        status = csvjoin.main([a, b, '--config', str(config_path)])

        assert status == 0
        assert capsys.readouterr().out == "id;name;age\n1;alice;30\n"

    def test_config_from_environment(self, isolated_cli, monkeypatch, capsys):
        a = write_csv(isolated_cli, 'a.csv', "id;name\n1;alice\n")
        b = write_csv(isolated_cli, 'b.csv', "id;age\n1;30\n")
        config_path = isolated_cli / 'env.toml'
        config_path.write_text(toml.dumps({'csv': {'delimiter': ';'}}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))

        assert csvjoin.main([a, b]) == 0
        assert capsys.readouterr().out == "id;name;age\n1;alice;30\n"

    def test_missing_config_file(self, people_files, isolated_cli, caplog):
        with caplog.at_level(logging.ERROR):
            status = csvjoin.main([*people_files, '-c', str(isolated_cli / 'nope.toml')])

        assert status == 1
        assert 'Configuration file not found' in caplog.text

    def test_save_config(self, isolated_cli):
        target = isolated_cli / 'saved.toml'

        status = csvjoin.main(['--save-config', str(target), '--log-level', 'info'])

        assert status == 0
        saved = toml.load(target)
        assert saved['join']['key_separator'] == '++'
        assert saved['csv']['delimiter'] == ','
        assert saved['logging']['level'] == 'INFO'

    def test_log_level_flag_overrides_config(self, people_files, isolated_cli, monkeypatch, capsys):
        levels = []
        monkeypatch.setattr(csvjoin, 'set_log_level', levels.append)

        status = csvjoin.main([*people_files, '--log-level', 'debug'])

        assert status == 0
        assert levels == ['DEBUG']
        assert capsys.readouterr().out.startswith('id,name,age\n')
