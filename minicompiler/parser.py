"""Recursive-descent parser for the small imperative language.

The grammar, informally::

    program  := { "var" ident "=" expr ";" | "fun" fundecl } "main" block
    fundecl  := ident "(" [ident {"," ident}] ")" "{" {"var" ident "=" expr ";"}
                {cmd} "return" expr ";" "}"
    cmd      := "if" expr "{" {cmd} "}" "else" "{" {cmd} "}"
              | "while" expr "{" {cmd} "}"
              | ident "=" expr ";"
    expr     := exp_a { ("==" | "<" | ">") exp_a }
    exp_a    := exp_m { ("+" | "-") exp_m }
    exp_m    := prim { ("*" | "/") prim }
    prim     := number | ident | ident "(" [expr {"," expr}] ")" | "(" expr ")"

Whitespace is insignificant everywhere except right after a keyword.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


class ParseError(ValueError):
    """Raised when the input does not follow the grammar."""


@dataclass(frozen=True)
class Const:
    """Integer literal."""

    value: int


@dataclass(frozen=True)
class Var:
    """Reference to a variable."""

    name: str


@dataclass(frozen=True)
class BinOp:
    """Binary operation such as ``+`` or ``==``."""

    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Call:
    """Function call."""

    name: str
    args: Tuple[Expr, ...] = ()


Expr = Union[Const, Var, BinOp, Call]


@dataclass(frozen=True)
class If:
    """Conditional with mandatory else branch."""

    cond: Expr
    then_body: Tuple[Cmd, ...] = ()
    else_body: Tuple[Cmd, ...] = ()


@dataclass(frozen=True)
class While:
    """Loop running while its condition is non-zero."""

    cond: Expr
    body: Tuple[Cmd, ...] = ()


@dataclass(frozen=True)
class Assign:
    """Assignment of an expression to a variable."""

    name: str
    expr: Expr


Cmd = Union[If, While, Assign]


@dataclass(frozen=True)
class FunctionDecl:
    """Function definition with parameters, locals, body and result."""

    name: str
    params: Tuple[str, ...]
    local_vars: Tuple[Tuple[str, Expr], ...]
    body: Tuple[Cmd, ...]
    result: Expr


@dataclass(frozen=True)
class Program:
    """A whole program: globals, functions and the main block."""

    global_vars: Tuple[Tuple[str, Expr], ...]
    functions: Tuple[FunctionDecl, ...]
    main: Tuple[Cmd, ...]
    result: Expr


def _is_digit(c: Optional[str]) -> bool:
    return c is not None and "0" <= c <= "9"


def _is_alpha(c: Optional[str]) -> bool:
    return c is not None and c.isascii() and c.isalpha()


def _is_alnum(c: Optional[str]) -> bool:
    return c is not None and c.isascii() and c.isalnum()


class Parser:
    """Character-level parser over a source text."""

    def __init__(self, text):
        self._text = text
        self._pos = 0

    # --- low-level scanning -------------------------------------------------

    def _skip_ws(self, pos: int) -> int:
        text = self._text
        while pos < len(text) and text[pos].isspace():
            pos += 1
        return pos

    def _peek(self) -> Optional[str]:
        pos = self._skip_ws(self._pos)
        return self._text[pos] if pos < len(self._text) else None

    def _next(self) -> Optional[str]:
        pos = self._skip_ws(self._pos)
        if pos >= len(self._text):
            self._pos = pos
            return None
        self._pos = pos + 1
        return self._text[pos]

    def _keyword(self, kw: str) -> bool:
        """Consume ``kw`` if it comes next as a whole word."""
        start = self._skip_ws(self._pos)
        if not self._text.startswith(kw, start):
            return False
        end = start + len(kw)
        if end < len(self._text) and _is_alnum(self._text[end]):
            return False
        self._pos = end
        return True

    def _expect_keyword(self, kw: str) -> None:
        if not self._keyword(kw):
            raise ParseError(f"expected '{kw}'")

    def _expect(self, ch: str) -> None:
        c = self._next()
        if c is None:
            raise ParseError(f"expected '{ch}', but reached end of input")
        if c != ch:
            raise ParseError(f"expected '{ch}', but found '{c}'")

    def _ident(self) -> str:
        chars = []
        first = self._peek()
        if first is not None:
            if not _is_alpha(first):
                raise ParseError("expected identifier")
            chars.append(self._next())
        while _is_alnum(self._peek()):
            chars.append(self._next())
        return "".join(chars)

    def _const(self) -> Const:
        value = 0
        while _is_digit(self._peek()):
            value = value * 10 + int(self._next())
            if value > _INT_MAX:
                raise ParseError("integer constant out of range")
        return Const(value)

    def _declaration(self) -> Tuple[str, Expr]:
        name = self._ident()
        self._expect("=")
        expr = self.parse_expr()
        self._expect(";")
        return name, expr

    def _block_until_brace(self) -> Tuple[Cmd, ...]:
        cmds = []
        while self._peek() != "}":
            cmds.append(self.parse_cmd())
        self._expect("}")
        return tuple(cmds)

    def _cmds_until_return(self) -> Tuple[Cmd, ...]:
        cmds = []
        while not self._keyword("return"):
            cmds.append(self.parse_cmd())
        return tuple(cmds)

    # --- grammar ------------------------------------------------------------

    def parse_program(self) -> Program:
        """Parse a complete program."""
        global_vars = []
        functions = []
        while True:
            if self._keyword("main"):
                break
            if self._keyword("var"):
                global_vars.append(self._declaration())
            elif self._keyword("fun"):
                functions.append(self.parse_function())
            else:
                raise ParseError("expected 'fun', 'var' or 'main'")

        self._expect("{")
        main = self._cmds_until_return()
        result = self.parse_expr()
        self._expect(";")
        self._expect("}")
        return Program(tuple(global_vars), tuple(functions), main, result)

    def parse_function(self) -> FunctionDecl:
        """Parse a function declaration following the ``fun`` keyword."""
        name = self._ident()
        self._expect("(")
        params = []
        if self._peek() != ")":
            params.append(self._ident())
            while self._peek() == ",":
                self._next()
                params.append(self._ident())
        self._expect(")")
        self._expect("{")

        local_vars = []
        while self._keyword("var"):
            local_vars.append(self._declaration())

        body = self._cmds_until_return()
        result = self.parse_expr()
        self._expect(";")
        self._expect("}")
        return FunctionDecl(name, tuple(params), tuple(local_vars), body, result)

    def parse_cmd(self) -> Cmd:
        """Parse one command: ``if``, ``while`` or an assignment."""
        if self._keyword("if"):
            cond = self.parse_expr()
            self._expect("{")
            then_body = self._block_until_brace()
            self._expect_keyword("else")
            self._expect("{")
            else_body = self._block_until_brace()
            return If(cond, then_body, else_body)
        if self._keyword("while"):
            cond = self.parse_expr()
            self._expect("{")
            body = self._block_until_brace()
            return While(cond, body)
        name, expr = self._declaration()
        return Assign(name, expr)

    def parse_expr(self) -> Expr:
        """Parse an expression, including relational operators."""
        expr = self._additive()
        while True:
            c = self._peek()
            if c == "=":
                self._next()
                if self._next() != "=":
                    raise ParseError("malformed '=' operator")
                op = "=="
            elif c in ("<", ">"):
                op = self._next()
            else:
                return expr
            expr = BinOp(op, expr, self._additive())

    def _additive(self) -> Expr:
        expr = self._multiplicative()
        while self._peek() in ("+", "-"):
            op = self._next()
            expr = BinOp(op, expr, self._multiplicative())
        return expr

    def _multiplicative(self) -> Expr:
        expr = self._primary()
        while self._peek() in ("*", "/"):
            op = self._next()
            expr = BinOp(op, expr, self._primary())
        return expr

    def _primary(self) -> Expr:
        c = self._peek()
        if c is None:
            raise ParseError("unexpected end of input")
        if _is_digit(c):
            return self._const()
        if _is_alpha(c):
            name = self._ident()
            if self._peek() != "(":
                return Var(name)
            self._next()
            args = []
            if self._peek() != ")":
                args.append(self.parse_expr())
                while self._peek() == ",":
                    self._next()
                    args.append(self.parse_expr())
            self._expect(")")
            return Call(name, tuple(args))
        if c == "(":
            self._next()
            expr = self.parse_expr()
            self._expect(")")
            return expr
        raise ParseError(f"unexpected token: '{c}'")


def parse_program(text):
    """Parse ``text`` as a complete program."""
    return Parser(text).parse_program()