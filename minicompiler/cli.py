"""Command line driver: parse, emit assembly, assemble and link."""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

from .codegen import generate_code
from .parser import ParseError, Parser

_ASM_FILE = "output.asm"
_OBJ_FILE = "output.o"
_EXE_FILE = "prog"


def read_file(filename):
    """Return the whole text of ``filename``."""
    return Path(filename).read_text()


def run_command(command, args):
    """Run ``command`` with ``args``; exit with status 1 if it fails."""
    result = subprocess.run([command, *args])
    if result.returncode != 0:
        print(f"Error running command: {command} {list(args)}", file=sys.stderr)
        raise SystemExit(1)
    return result.returncode


def main(argv=None):
    """Compile the source file into an executable named ``prog``."""
    arg_parser = argparse.ArgumentParser(prog="minicompiler")
    arg_parser.add_argument("source", nargs="?", default="texto.txt")
    args = arg_parser.parse_args(argv)

    try:
        text = read_file(args.source)
    except (OSError, UnicodeDecodeError):
        print("Error opening file", file=sys.stderr)
        return 1

    try:
        program = Parser(text).parse_program()
    except ParseError as err:
        print(f"Parse error: {err}", file=sys.stderr)
        return 0

    Path(_ASM_FILE).write_text(generate_code(program))
    print(f"Assembly successfully generated in {_ASM_FILE}")

    print("Assembling...")
    run_command("nasm", ["-f", "elf64", _ASM_FILE, "-o", _OBJ_FILE])
    run_command("ld", [_OBJ_FILE, "-o", _EXE_FILE])
    print(f"Executable successfully generated: {_EXE_FILE}")
    return 0


if __name__ == "__main__":
    sys.exit(main())