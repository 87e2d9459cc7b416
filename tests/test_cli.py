"""
Tests for the command-line entry point.

Validates:
  - Rewritten source goes to stdout or to --output
  - --strict turns diagnostics into a non-zero exit status
  - Unreadable or unparsable input exits with status 2
"""

import ast
import textwrap

from ephemeralpy.cli import EXIT_BAD_INPUT, EXIT_DIAGNOSTICS, EXIT_OK, main

SOURCE = textwrap.dedent('''
    def fn(arg):
        return ephemeral({'foo': arg})
''')

EXPECTED = ast.unparse(ast.parse(textwrap.dedent('''
    _gen_ephemeral_obj0 = {'foo': None}

    def fn(arg):
        _gen_ephemeral_obj0['foo'] = arg
        return _gen_ephemeral_obj0
''')))


class TestCommandLine:
    def test_stdout(self, tmp_path, capsys):
        source = tmp_path / 'module.py'
        source.write_text(SOURCE)

        assert main([str(source)]) == EXIT_OK
        assert capsys.readouterr().out == EXPECTED + '\n'

    def test_output_file(self, tmp_path):
        source = tmp_path / 'module.py'
        target = tmp_path / 'out.py'
        source.write_text(SOURCE)

        assert main([str(source), '-o', str(target)]) == EXIT_OK
        assert target.read_text() == EXPECTED + '\n'

    def test_custom_names(self, tmp_path, capsys):
        source = tmp_path / 'module.py'
        source.write_text("x = tmp({'a': 1})\n")

        assert main([str(source), '--marker', 'tmp', '--prefix', '_t']) == EXIT_OK
        assert capsys.readouterr().out.startswith("_t0 = {'a': None}\n")

    def test_strict(self, tmp_path):
        source = tmp_path / 'module.py'
        source.write_text("x = ephemeral(y)\n")

        assert main([str(source)]) == EXIT_OK
        assert main([str(source), '--strict']) == EXIT_DIAGNOSTICS

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / 'absent.py')]) == EXIT_BAD_INPUT
        assert 'ephemeralpy:' in capsys.readouterr().err

    def test_syntax_error(self, tmp_path):
        source = tmp_path / 'broken.py'
        source.write_text("def broken(:\n")
        assert main([str(source)]) == EXIT_BAD_INPUT
