"""CLI entry point for the Salami interpreter.

Usage:
    python -m salami [-v|-vv|-vvv|-vvvv] <program_file>
    python -m salami --tokens <program_file>
    python -m salami [-v...] --emit-ast <program_file>
    python -m salami [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Print the token stream of the given file and stop
  --emit-ast    Parse the given .salami file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --lenient-calls
                Calling a non-function yields no value instead of failing

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero (see --debug-file). On success the program
prints either "exited with value <code>" or its final value.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast import Program
from .ast_json import ast_to_obj, program_from_obj
from .errors import EvaluationError
from .interpreter import Interpreter
from .lexer import Lexer
from .parser import Parser
from .types import inspect


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_or_exit(source: str) -> Program:
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    if parser.errors:
        print("parser errors:", file=sys.stderr)
        for err in parser.errors:
            print(f"\t{err}", file=sys.stderr)
        sys.exit(1)
    return program


def execute(program: Program, args: argparse.Namespace) -> None:
    interpreter = Interpreter(
        debug_level=args.v,
        debug_file=args.debug_file,
        strict_calls=not args.lenient_calls,
    )
    try:
        result = interpreter.run(program)
    except EvaluationError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    if interpreter.exited:
        print(f"exited with value {interpreter.exit_code}")
        return
    text = inspect(result)
    if text:
        print(text)


def main(argv: list = None) -> None:
    parser = argparse.ArgumentParser(prog='salami', description="Salami language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='where debug output goes (default: debug.txt)')
    parser.add_argument('--lenient-calls', action='store_true',
                        help='calling a non-function yields no value instead of an error')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='SALAMI_FILE', help='print the token stream of the given file')
    group.add_argument('--emit-ast', metavar='SALAMI_FILE', help='emit AST JSON for the given .salami file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Salami program file (.salami) to execute')
    args = parser.parse_args(argv)

    # Token dump mode
    if args.tokens:
        source = read_source(Path(args.tokens))
        for token in Lexer(source):
            print(token)
        return

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        program = parse_or_exit(read_source(program_file))
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        try:
            program = program_from_obj(data)
        except (TypeError, ValueError, KeyError) as e:
            print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        execute(program, args)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --tokens/--emit-ast/--ast')
    program = parse_or_exit(read_source(Path(args.program)))
    execute(program, args)


if __name__ == '__main__':
    main()
