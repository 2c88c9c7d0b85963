"""
Tests for FakeEnd CLI

Tests the command-line entry point including:
- run (server start is patched out)
- document
- generate
"""

import pytest
from textwrap import dedent
from unittest.mock import patch

from fakeend import __version__
from fakeend.cli import build_parser, main
from fakeend.mock import MockServer


@pytest.fixture
def mock_dir(tmp_path):
    """Mock directory with one valid and one invalid declaration."""
    directory = tmp_path / 'mocks'
    directory.mkdir()
    (directory / 'users.yaml').write_text(dedent("""
        - method: GET
          path: /:id
          status: 200
          body: {id: ":id"}
        - method: GET
          path: /
          status: 200
          body: []
        - method: GET
          path: /broken
    """), encoding='utf-8')
    return directory


class TestParser:
    """Test argument parsing."""

    def test_run_defaults(self):
        args = build_parser().parse_args(['run'])

        assert args.port == 4000
        assert args.dir == 'mock_server'
        assert args.host == '127.0.0.1'
        assert args.no_color is False

    def test_run_options(self):
        args = build_parser().parse_args(['run', '-p', '8080', '-d', 'mocks', '--no-color'])

        assert args.port == 8080
        assert args.dir == 'mocks'
        assert args.no_color is True

    def test_document_defaults(self):
        args = build_parser().parse_args(['document'])

        assert args.output == 'api-documentation.md'

    def test_generate_requires_source(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['generate'])

    def test_generate_sources_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['generate', '--curl', 'curl a.com', '--file', 'x.txt'])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['--version'])

        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command(self):
        with pytest.raises(SystemExit) as exc:
            main([])

        assert exc.value.code == 1


class TestRunCommand:
    """Test the run command."""

    @patch.object(MockServer, 'start')
    def test_run_starts_server(self, mock_start, mock_dir, capsys):
        main(['run', '--dir', str(mock_dir), '--port', '4100', '--no-color'])

        mock_start.assert_called_once()
        out = capsys.readouterr().out
        assert 'Loaded 2 mock endpoints' in out
        assert 'Skipped 1 invalid definition(s)' in out
        assert 'users.yaml[2]' in out
        assert 'http://127.0.0.1:4100' in out
        assert 'GET    /users/:id' in out

    @patch.object(MockServer, 'start')
    def test_run_empty_directory(self, mock_start, tmp_path, capsys):
        main(['run', '--dir', str(tmp_path)])

        mock_start.assert_called_once()
        assert 'No mock endpoints found' in capsys.readouterr().out

    @patch.object(MockServer, 'start', side_effect=KeyboardInterrupt)
    def test_run_interrupted(self, mock_start, mock_dir, capsys):
        main(['run', '--dir', str(mock_dir)])

        assert 'Mock server stopped' in capsys.readouterr().out

    def test_run_missing_directory(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['run', '--dir', str(tmp_path / 'missing')])

        assert exc.value.code == 1
        assert 'does not exist' in capsys.readouterr().out


class TestDocumentCommand:
    """Test the document command."""

    def test_writes_documentation(self, mock_dir, tmp_path, capsys):
        output = tmp_path / 'API.md'

        main(['document', '--dir', str(mock_dir), '--output', str(output)])

        assert output.exists()
        assert '### GET /users/:id' in output.read_text(encoding='utf-8')
        assert 'Documentation generated' in capsys.readouterr().out

    def test_no_endpoints(self, tmp_path, capsys):
        empty = tmp_path / 'empty'
        empty.mkdir()

        main(['document', '--dir', str(empty), '--output', str(tmp_path / 'API.md')])

        assert not (tmp_path / 'API.md').exists()
        assert 'No mock endpoints found' in capsys.readouterr().out

    def test_missing_directory(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(['document', '--dir', str(tmp_path / 'missing')])

        assert exc.value.code == 1


class TestGenerateCommand:
    """Test the generate command."""

    def test_generate_from_curl(self, tmp_path, capsys):
        main(['generate', '--curl', 'curl https://api.example.com/users/{id}', '-o', str(tmp_path)])

        assert (tmp_path / 'users.yaml').exists()
        out = capsys.readouterr().out
        assert 'Mock file generated' in out
        assert 'Path: /:id' in out

    def test_generate_from_file(self, tmp_path):
        command_file = tmp_path / 'command.txt'
        command_file.write_text("curl -X POST https://api.example.com/orders -d '{}'", encoding='utf-8')
        output = tmp_path / 'mocks'

        main(['generate', '--file', str(command_file), '-o', str(output)])

        assert (output / 'orders.yaml').exists()

    def test_generate_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(['generate', '--file', str(tmp_path / 'none.txt'), '-o', str(tmp_path)])

        assert exc.value.code == 1

    def test_generate_invalid_command(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['generate', '--curl', 'curl -X GET', '-o', str(tmp_path)])

        assert exc.value.code == 1
        assert 'Failed to generate mock' in capsys.readouterr().out
