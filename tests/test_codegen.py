import pytest

from minicompiler.codegen import CodeGenerator, CodegenError, generate_code
from minicompiler.parser import (
    Assign,
    BinOp,
    Call,
    Const,
    FunctionDecl,
    If,
    Program,
    Var,
    While,
    parse_program,
)


def test_expr_const():
    assert CodeGenerator().expr(Const(42), {}).strip() == "mov rax, 42"


def test_expr_var_global():
    assert CodeGenerator().expr(Var("x"), {}).strip() == "mov rax, [x]"


def test_expr_var_local():
    assert CodeGenerator().expr(Var("x"), {"x": -8}).strip() == "mov rax, [rbp-8]"


def test_expr_var_parameter():
    assert CodeGenerator().expr(Var("a"), {"a": 16}).strip() == "mov rax, [rbp+16]"


def test_expr_opbin_add():
    code = CodeGenerator().expr(BinOp("+", Const(2), Const(3)), {})
    assert "add rax, rbx" in code


def test_binop_evaluates_right_first():
    code = CodeGenerator().expr(BinOp("-", Const(2), Const(3)), {})
    assert code == "mov rax, 3\npush rax\nmov rax, 2\npop rbx\nsub rax, rbx\n"


@pytest.mark.parametrize(
    "op, tail",
    [
        ("*", "imul rax, rbx\n"),
        ("/", "cqo\nidiv rbx\n"),
        ("==", "setz cl\nmov rax, rcx\n"),
        ("<", "setl cl\nmov rax, rcx\n"),
        (">", "setg cl\nmov rax, rcx\n"),
    ],
)
def test_binop_operators(op, tail):
    code = CodeGenerator().expr(BinOp(op, Const(1), Const(2)), {})
    assert code.endswith(tail)


def test_invalid_operator_raises():
    with pytest.raises(CodegenError):
        CodeGenerator().expr(BinOp("%", Const(1), Const(2)), {})


def test_call_pushes_args_in_reverse():
    code = CodeGenerator().expr(Call("f", (Const(1), Const(2))), {})
    assert code == (
        "mov rax, 2\npush rax\nmov rax, 1\npush rax\ncall f\nadd rsp, 16\n"
    )


def test_call_without_args():
    assert CodeGenerator().expr(Call("g"), {}) == "call g\n"


def test_cmd_atrib_global():
    code = CodeGenerator().cmd(Assign("x", Const(5)), {})
    assert "mov [x], rax" in code


def test_cmd_assign_local():
    code = CodeGenerator().cmd(Assign("x", Const(5)), {"x": -16})
    assert code == "mov rax, 5\nmov [rbp-16], rax\n"


def test_if_labels():
    cmd = If(Const(1), (Assign("x", Const(2)),), (Assign("x", Const(3)),))
    code = CodeGenerator().cmd(cmd, {})
    assert code == (
        "mov rax, 1\ncmp rax, 0\nje Lfalso0\n"
        "mov rax, 2\nmov [x], rax\njmp Lfim1\nLfalso0:\n"
        "mov rax, 3\nmov [x], rax\nLfim1:\n"
    )


def test_while_labels():
    cmd = While(Var("x"), (Assign("y", Const(0)),))
    code = CodeGenerator().cmd(cmd, {})
    assert code == (
        "Linicio0:\nmov rax, [x]\ncmp rax, 0\nje Lfim1\n"
        "mov rax, 0\nmov [y], rax\njmp Linicio0\nLfim1:\n"
    )


def test_labels_are_unique_across_commands():
    gen = CodeGenerator()
    first = gen.cmd(While(Const(1), ()), {})
    second = gen.cmd(While(Const(1), ()), {})
    assert "Linicio0:" in first
    assert "Linicio2:" in second and "Lfim3:" in second


def test_function_layout():
    func = FunctionDecl("f", ("a",), (("y", Const(1)),), (), Var("a"))
    code = CodeGenerator().function(func)
    assert code == (
        "\nf:\npush rbp\nmov rbp, rsp\nsub rsp, 8\n"
        "mov rax, 1\nmov [rbp-8], rax\n"
        "mov rax, [rbp+16]\nadd rsp, 8\npop rbp\nret\n"
    )


def test_function_without_locals_has_no_stack_adjust():
    func = FunctionDecl("g", ("a", "b"), (), (), Var("b"))
    code = CodeGenerator().function(func)
    assert "sub rsp" not in code
    assert "mov rax, [rbp+24]" in code


def test_gerar_codigo_minimal():
    prog = Program(
        global_vars=(("x", Const(1)),),
        functions=(),
        main=(Assign("x", Const(2)),),
        result=Var("x"),
    )
    code = generate_code(prog)
    assert "_start:" in code
    assert "mov [x], rax" in code
    assert "mov rdi, rax" in code


def test_program_structure():
    prog = parse_program("var x = 1; fun id(a) { return a; } main { return id(x); }")
    code = generate_code(prog)
    assert code.startswith("section .bss\nx: resq 1\nsection .text\nglobal _start\n")
    assert code.index("\nid:\n") < code.index("\n_start:\n")
    assert code.endswith("call id\nadd rsp, 8\nmov rdi, rax\nmov rax, 60\nsyscall\n")