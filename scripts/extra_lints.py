#!/usr/bin/env python3
"""Project-specific lint rules that ruff does not cover.

Rules:
1. No class-based tests in test files (Hypothesis state machines excepted)
2. No imports inside library functions
3. No mutable default arguments
4. No print() in library code (use logging)
5. No TODO/FIXME comments without an issue reference
6. No calls into the global ``random`` module outside roulette/sampler.py;
   randomness reaches the rest of the package through an injected source

Usage: python scripts/extra_lints.py [ROOT]
"""

import ast
import re
import sys
from dataclasses import dataclass
from pathlib import Path

LINTED_DIRECTORIES = ("src", "tests")
RANDOM_SOURCE_MODULE = "sampler.py"
MUTABLE_FACTORIES = frozenset({"list", "dict", "set"})


@dataclass
class LintError:
    file: Path
    line: int
    column: int
    rule: str
    message: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}: {self.rule}: {self.message}"


class LintVisitor(ast.NodeVisitor):
    """Walks one module and records rule violations."""

    def __init__(self, file: Path) -> None:
        self.file = file
        self.errors: list[LintError] = []
        self.is_test_file = file.name.startswith("test_")
        self.may_use_global_random = (
            self.is_test_file or file.name == RANDOM_SOURCE_MODULE
        )
        self._function_depth = 0

    def _report(self, node: ast.AST, rule: str, message: str) -> None:
        self.errors.append(
            LintError(
                self.file,
                getattr(node, "lineno", 0),
                getattr(node, "col_offset", 0),
                rule,
                message,
            )
        )

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        # class TestX(Machine.TestCase) wraps a Hypothesis state machine.
        is_state_machine_case = any(
            isinstance(base, ast.Attribute) and base.attr == "TestCase"
            for base in node.bases
        )
        if (
            self.is_test_file
            and node.name.startswith("Test")
            and not is_state_machine_case
        ):
            self._report(
                node,
                "no-class-tests",
                f"Class-based test '{node.name}' found. Use module-level functions.",
            )
        self.generic_visit(node)

    def _visit_function(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> None:
        defaults = [*node.args.defaults, *node.args.kw_defaults]
        for default in defaults:
            if default is not None and is_mutable_literal(default):
                self._report(
                    default, "mutable-default", "Mutable default argument. Use None."
                )

        self._function_depth += 1
        self.generic_visit(node)
        self._function_depth -= 1

    visit_FunctionDef = _visit_function
    visit_AsyncFunctionDef = _visit_function

    def _visit_import(self, node: ast.Import | ast.ImportFrom) -> None:
        if self._function_depth and not self.is_test_file:
            self._report(
                node, "import-in-function", "Import inside function. Move to top."
            )
        self.generic_visit(node)

    visit_Import = _visit_import
    visit_ImportFrom = _visit_import

    def visit_Call(self, node: ast.Call) -> None:
        func = node.func
        if not self.is_test_file and isinstance(func, ast.Name) and func.id == "print":
            self._report(node, "no-print", "Use logging instead of print().")

        calls_global_random = (
            isinstance(func, ast.Attribute)
            and isinstance(func.value, ast.Name)
            and func.value.id == "random"
            and func.attr != "Random"
        )
        if calls_global_random and not self.may_use_global_random:
            self._report(
                node,
                "global-random",
                f"random.{func.attr}() bypasses the injected random source.",
            )
        self.generic_visit(node)


def is_mutable_literal(node: ast.expr) -> bool:
    if isinstance(node, (ast.List, ast.Dict, ast.Set)):
        return True
    return (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id in MUTABLE_FACTORIES
    )


TODO_PATTERN = re.compile(r"#\s*(TODO|FIXME)(?!\(#\d+\)|:\s*#\d+)", re.IGNORECASE)


def check_todo_comments(file: Path, source: str) -> list[LintError]:
    """TODO and FIXME comments must name an issue, e.g. ``# TODO(#12)``."""
    errors: list[LintError] = []
    for lineno, line in enumerate(source.splitlines(), 1):
        match = TODO_PATTERN.search(line)
        if match:
            errors.append(
                LintError(
                    file,
                    lineno,
                    match.start(),
                    "todo-needs-issue",
                    f"{match.group(1)} needs an issue reference, e.g. TODO(#12).",
                )
            )
    return errors


def lint_file(path: Path) -> list[LintError]:
    """Lint a single file and return any errors."""
    source = path.read_text()
    try:
        tree = ast.parse(source, filename=str(path))
    except SyntaxError as e:
        return [LintError(path, e.lineno or 0, e.offset or 0, "syntax-error", str(e))]

    visitor = LintVisitor(path)
    visitor.visit(tree)
    return visitor.errors + check_todo_comments(path, source)


def lint_tree(root: Path) -> list[LintError]:
    """Lint every Python file under the linted directories of ``root``."""
    errors: list[LintError] = []
    for directory in LINTED_DIRECTORIES:
        dir_path = root / directory
        if not dir_path.exists():
            continue
        for py_file in sorted(dir_path.rglob("*.py")):
            errors.extend(lint_file(py_file))
    return sorted(errors, key=lambda e: (str(e.file), e.line, e.column))


def main(argv: list[str]) -> int:
    root = Path(argv[0]) if argv else Path(".")
    errors = lint_tree(root)

    if errors:
        for error in errors:
            print(error)
        print(f"\nFound {len(errors)} custom lint error(s)")
        return 1

    print("All custom lint checks passed!")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
