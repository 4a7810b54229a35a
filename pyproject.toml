[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minicompiler"
version = "0.1.0"
description = "A small compiler for a toy imperative language that emits x86-64 NASM assembly"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "assembly", "x86-64", "nasm", "parser", "codegen"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minicompiler = "minicompiler.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["minicompiler"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
