import json

import pytest

from salami.__main__ import main


def write(tmp_path, text, name='prog.salami'):
    path = tmp_path / name
    path.write_text(text, encoding='utf-8')
    return path


def test_prints_final_value(tmp_path, capsys):
    main([str(write(tmp_path, 'var x = 20; x + 22'))])
    assert capsys.readouterr().out.strip() == '42'


def test_prints_boolean(tmp_path, capsys):
    main([str(write(tmp_path, '1 + 2 > 2'))])
    assert capsys.readouterr().out.strip() == 'true'


def test_prints_exit_value(tmp_path, capsys):
    main([str(write(tmp_path, 'exit 5; exit 10;'))])
    assert capsys.readouterr().out.strip() == 'exited with value 5'


def test_no_output_without_value(tmp_path, capsys):
    main([str(write(tmp_path, 'if (false) { 1 }'))])
    assert capsys.readouterr().out == ''


def test_parse_errors_stop_before_running(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(write(tmp_path, 'if (x { exit 1; }'))])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ''
    assert captured.err.startswith('parser errors:')
    assert 'expected next token to be ), got { instead' in captured.err


def test_runtime_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(write(tmp_path, 'exit 1 / 0;'))])
    assert excinfo.value.code == 1
    assert 'Runtime error: DivisionByZero' in capsys.readouterr().err


def test_lenient_calls_flag(tmp_path, capsys):
    path = write(tmp_path, 'var a = 1; a(2); a')
    main(['--lenient-calls', str(path)])
    assert capsys.readouterr().out.strip() == '1'


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.salami')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_missing_argument_is_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
    assert 'usage' in capsys.readouterr().err


def test_token_dump(tmp_path, capsys):
    main(['--tokens', str(write(tmp_path, 'var x = 1;'))])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "1:1 VAR 'var'"
    assert lines[-1] == "1:10 EOF ''"


def test_emit_and_run_ast(tmp_path, capsys):
    path = write(tmp_path, 'func sq(n) { n * n } sq(9)')
    main(['--emit-ast', str(path)])
    out_path = tmp_path / 'prog.salami.ast.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    assert json.loads(out_path.read_text(encoding='utf-8'))['type'] == 'Program'

    main(['--ast', str(out_path)])
    assert capsys.readouterr().out.strip() == '81'


def test_verbose_writes_debug_file(tmp_path, capsys):
    debug_file = tmp_path / 'trace.txt'
    main(['-v', '--debug-file', str(debug_file), str(write(tmp_path, 'exit 3;'))])
    assert capsys.readouterr().out.strip() == 'exited with value 3'
    assert 'exit with code 3' in debug_file.read_text(encoding='utf-8')


def test_runaway_recursion_reported(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(write(tmp_path, 'func f(n) { f(n + 1) } f(0)'))])
    assert excinfo.value.code == 1
    assert 'Runtime error: RecursionLimit' in capsys.readouterr().err


def test_ast_with_null_child_rejected(tmp_path, capsys):
    data = {"type": "Program", "statements": [{"type": "ExitStatement", "value": None}]}
    path = write(tmp_path, json.dumps(data), name='bad.ast.json')
    with pytest.raises(SystemExit) as excinfo:
        main(['--ast', str(path)])
    assert excinfo.value.code == 1
    assert 'invalid AST file' in capsys.readouterr().err
