"""CLI entry point for the Plink interpreter.

Usage:
    python -m plink [-v|-vv|-vvv] <program_file>
    python -m plink --tokens <program_file>
    python -m plink [-v...] --emit-ast <program_file>
    python -m plink [-v...] --ast <ast_json_file>

Options:
  -v              Increase debug verbosity (can be repeated)
  --tokens        Lex the given .plink file and print its tokens
  --emit-ast      Parse the given .plink file and emit an AST JSON file
  --ast           Execute a previously emitted AST JSON file
  --max-depth N   Maximum nesting of function calls (default 256)

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Errors are reported on stderr as
`<file>:<line>:<col>: <message>` and the process exits with status 1.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast_json import ast_to_obj, ast_from_obj
from .errors import PlinkError
from .interpreter import Interpreter
from .lexer import tokenize
from .parser import parse_tokens


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def fail(error: PlinkError, prefix: str) -> None:
    print(error.format(prefix), file=sys.stderr)
    sys.exit(1)


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(prog='plink', description="Plink language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--max-depth', type=int, default=256, metavar='N', help='maximum nesting of function calls')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='PLINK_FILE', help='print the tokens of the given .plink file')
    group.add_argument('--emit-ast', metavar='PLINK_FILE', help='emit AST JSON for the given .plink file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Plink program file (.plink) to execute')
    args = parser.parse_args(argv)

    # Token dump mode
    if args.tokens:
        prefix = args.tokens
        source = read_source(Path(prefix))
        try:
            tokens = tokenize(source)
        except PlinkError as e:
            fail(e, prefix)
        for token in tokens:
            print(f"{prefix}:{token.line}:{token.column}:{token.describe()}")
        return

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            ast_program = parse_tokens(tokenize(source))
        except PlinkError as e:
            fail(e, args.emit_ast)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        data = json.loads(read_source(ast_path))
        ast_program = ast_from_obj(data)
        run(ast_program, args.ast, args)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --tokens/--emit-ast/--ast')
    source = read_source(Path(args.program))
    try:
        ast_program = parse_tokens(tokenize(source))
    except PlinkError as e:
        fail(e, args.program)
    run(ast_program, args.program, args)


def run(ast_program, prefix: str, args: argparse.Namespace) -> None:
    with Interpreter(debug_level=args.v, max_call_depth=args.max_depth) as interpreter:
        try:
            interpreter.run(ast_program)
        except PlinkError as e:
            sys.stdout.flush()
            fail(e, prefix)


if __name__ == '__main__':
    main()
