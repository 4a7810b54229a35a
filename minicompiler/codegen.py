"""x86-64 NASM code generation for parsed programs."""

from __future__ import annotations

from typing import Mapping, Optional

from .parser import (
    Assign,
    BinOp,
    Call,
    Cmd,
    Const,
    Expr,
    FunctionDecl,
    If,
    Program,
    Var,
    While,
)

_COMPARE = ("xor rcx, rcx\n", "cmp rax, rbx\n")

_OPERATORS = {
    "+": ("add rax, rbx\n",),
    "-": ("sub rax, rbx\n",),
    "*": ("imul rax, rbx\n",),
    "/": ("cqo\n", "idiv rbx\n"),
    "==": (*_COMPARE, "setz cl\n", "mov rax, rcx\n"),
    "<": (*_COMPARE, "setl cl\n", "mov rax, rcx\n"),
    ">": (*_COMPARE, "setg cl\n", "mov rax, rcx\n"),
}


class CodegenError(ValueError):
    """Raised when a tree cannot be turned into assembly."""


def _slot(name: str, offsets: Mapping[str, int]) -> str:
    """Memory operand for ``name``: a stack slot if known, else a global."""
    offset = offsets.get(name)
    if offset is None:
        return f"[{name}]"
    sign = "-" if offset < 0 else "+"
    return f"[rbp{sign}{abs(offset)}]"


class CodeGenerator:
    """Emits assembly text, numbering jump labels as it goes."""

    def __init__(self):
        self._labels = 0

    def _new_label(self) -> int:
        label = self._labels
        self._labels += 1
        return label

    def expr(self, expr: Expr, offsets: Optional[Mapping[str, int]] = None) -> str:
        """Code that leaves the value of ``expr`` in ``rax``."""
        offsets = offsets or {}
        if isinstance(expr, Const):
            return f"mov rax, {expr.value}\n"
        if isinstance(expr, Var):
            return f"mov rax, {_slot(expr.name, offsets)}\n"
        if isinstance(expr, BinOp):
            instructions = _OPERATORS.get(expr.op)
            if instructions is None:
                raise CodegenError(f"invalid operator: {expr.op}")
            parts = [
                self.expr(expr.right, offsets),
                "push rax\n",
                self.expr(expr.left, offsets),
                "pop rbx\n",
                *instructions,
            ]
            return "".join(parts)
        if isinstance(expr, Call):
            parts = []
            for arg in reversed(expr.args):
                parts.append(self.expr(arg, offsets))
                parts.append("push rax\n")
            parts.append(f"call {expr.name}\n")
            if expr.args:
                parts.append(f"add rsp, {len(expr.args) * 8}\n")
            return "".join(parts)
        raise CodegenError(f"unknown expression: {expr!r}")

    def cmd(self, cmd: Cmd, offsets: Optional[Mapping[str, int]] = None) -> str:
        """Code for one command."""
        offsets = offsets or {}
        if isinstance(cmd, Assign):
            return self.expr(cmd.expr, offsets) + f"mov {_slot(cmd.name, offsets)}, rax\n"
        if isinstance(cmd, If):
            false_label = self._new_label()
            end_label = self._new_label()
            parts = [
                self.expr(cmd.cond, offsets),
                "cmp rax, 0\n",
                f"je Lfalso{false_label}\n",
            ]
            parts.extend(self.cmd(c, offsets) for c in cmd.then_body)
            parts.append(f"jmp Lfim{end_label}\n")
            parts.append(f"Lfalso{false_label}:\n")
            parts.extend(self.cmd(c, offsets) for c in cmd.else_body)
            parts.append(f"Lfim{end_label}:\n")
            return "".join(parts)
        if isinstance(cmd, While):
            start_label = self._new_label()
            end_label = self._new_label()
            parts = [
                f"Linicio{start_label}:\n",
                self.expr(cmd.cond, offsets),
                "cmp rax, 0\n",
                f"je Lfim{end_label}\n",
            ]
            parts.extend(self.cmd(c, offsets) for c in cmd.body)
            parts.append(f"jmp Linicio{start_label}\n")
            parts.append(f"Lfim{end_label}:\n")
            return "".join(parts)
        raise CodegenError(f"unknown command: {cmd!r}")

    def function(self, func: FunctionDecl) -> str:
        """Code for a function: prologue, locals, body, result and epilogue."""
        offsets = {param: 16 + 8 * i for i, param in enumerate(func.params)}
        for i, (name, _) in enumerate(func.local_vars):
            offsets[name] = -8 * (i + 1)

        stack_size = len(func.local_vars) * 8
        parts = [f"\n{func.name}:\n", "push rbp\n", "mov rbp, rsp\n"]
        if stack_size:
            parts.append(f"sub rsp, {stack_size}\n")
        for name, init in func.local_vars:
            parts.append(self.expr(init, offsets))
            parts.append(f"mov {_slot(name, offsets)}, rax\n")
        parts.extend(self.cmd(c, offsets) for c in func.body)
        parts.append(self.expr(func.result, offsets))
        if stack_size:
            parts.append(f"add rsp, {stack_size}\n")
        parts.append("pop rbp\n")
        parts.append("ret\n")
        return "".join(parts)

    def program(self, program: Program) -> str:
        """Complete assembly for a program, ending in an exit syscall."""
        parts = ["section .bss\n"]
        parts.extend(f"{name}: resq 1\n" for name, _ in program.global_vars)
        parts.append("section .text\n")
        parts.append("global _start\n")
        parts.extend(self.function(func) for func in program.functions)
        parts.append("\n_start:\n")
        for name, init in program.global_vars:
            parts.append(self.expr(init, {}))
            parts.append(f"mov [{name}], rax\n")
        parts.extend(self.cmd(c, {}) for c in program.main)
        parts.append(self.expr(program.result, {}))
        parts.append("mov rdi, rax\n")
        parts.append("mov rax, 60\n")
        parts.append("syscall\n")
        return "".join(parts)


def generate_code(program):
    """Generate NASM assembly text for ``program``."""
    return CodeGenerator().program(program)