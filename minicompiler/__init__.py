"""A small compiler for a toy imperative language: parser, x86-64 NASM code generator and command line driver."""

__version__ = "0.1.0"
__all__ = ["parser", "codegen", "cli"]