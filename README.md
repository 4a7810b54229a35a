# minicompiler

A small compiler for a toy imperative language. It parses a source
program, produces x86-64 assembly in NASM syntax, and then assembles and
links it into a Linux executable with the external tools `nasm` and `ld`.

## The language

A program is a sequence of global variable declarations (`var`) and
function declarations (`fun`), followed by a `main` block that ends in a
`return`:

```
var x = 10;

fun double(n) {
    var r = 0;
    r = n * 2;
    return r;
}

main {
    while x > 0 {
        x = x - 1;
    }
    if x == 0 { x = double(21); } else { x = 1; }
    return x;
}
```

- Expressions: non-negative integer constants (up to 2147483647),
  variables, function calls, parentheses, `+ - * /` and the comparisons
  `== < >` (which give 1 or 0). `*` and `/` bind tighter than `+` and `-`,
  which bind tighter than the comparisons; all are left-associative.
- Commands: assignment `name = expr;`, `if cond { ... } else { ... }`
  (the `else` block is required) and `while cond { ... }`. A condition is
  true when it is non-zero.
- Functions declare their local variables with `var` at the top of the
  body and must end with `return expr;`.
- Identifiers start with an ASCII letter and continue with ASCII letters
  or digits.
- The value returned by `main` becomes the process exit status.

## Installation

```
pip install .
```

Building executables needs `nasm` and `ld` on the `PATH`.

## Command line

```
minicompiler [source]
```

`source` defaults to `texto.txt` in the current directory. The command:

1. parses the source file;
2. writes the assembly to `output.asm`;
3. runs `nasm -f elf64 output.asm -o output.o`;
4. runs `ld output.o -o prog`, leaving the executable `prog` in the
   current directory.

If the source file cannot be read, it prints `Error opening file` and
exits with status 1. If the source does not parse, it prints
`Parse error: ...` to standard error, writes nothing, and exits with
status 0. If `nasm` or `ld` fails, it reports the command and exits with
status 1.

The same driver can be started with `python -m minicompiler.cli`.

## Library use

```python
from minicompiler.parser import parse_program
from minicompiler.codegen import generate_code

program = parse_program("main { return 42; }")
print(generate_code(program))
```

`minicompiler.parser` holds the syntax tree as frozen dataclasses
(`Const`, `Var`, `BinOp`, `Call` for expressions; `Assign`, `If`, `While`
for commands; `FunctionDecl` and `Program`) and the `Parser` class.
`parse_program` raises `ParseError` (a `ValueError`) on malformed input.
For finer control, `Parser(text)` exposes `parse_program`,
`parse_function` (a declaration after the `fun` keyword), `parse_cmd` and
`parse_expr`.

`minicompiler.codegen` offers `generate_code(program)` and the
`CodeGenerator` class with `program`, `function`, `cmd` and `expr`.
`cmd` and `expr` take an optional mapping from variable names to stack
offsets relative to `rbp`; names not in it are treated as globals. The
generator numbers jump labels across all the calls made on one instance.
It raises `CodegenError` (a `ValueError`) for an operator or node it does
not know.

`minicompiler.cli` provides `read_file(filename)`,
`run_command(command, args)` and `main(argv=None)`.

## What it does not do

The package only produces assembly text; it has no assembler or linker
of its own and relies on `nasm` and `ld` being installed. Names are not
checked: an undeclared variable or function is only reported when the
assembly is assembled or linked.

## Tests

```
pip install .[test]
pytest
```