"""Tests for the custom lint rules in scripts/extra_lints.py."""

import importlib.util
from pathlib import Path
from types import ModuleType

ROOT = Path(__file__).resolve().parent.parent


def load_lints() -> ModuleType:
    spec = importlib.util.spec_from_file_location(
        "extra_lints", ROOT / "scripts" / "extra_lints.py"
    )
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def rules_for(tmp_path: Path, name: str, source: str) -> list[str]:
    path = tmp_path / name
    path.write_text(source)
    return [error.rule for error in load_lints().lint_file(path)]


def test_project_tree_is_clean() -> None:
    """The package and its tests pass every custom rule."""
    errors = load_lints().lint_tree(ROOT)
    assert errors == [], "\n".join(str(e) for e in errors)


def test_print_in_library_code(tmp_path: Path) -> None:
    """print() is reported outside test files."""
    assert rules_for(tmp_path, "module.py", "print('x')\n") == ["no-print"]
    assert rules_for(tmp_path, "test_module.py", "print('x')\n") == []


def test_import_in_function(tmp_path: Path) -> None:
    """Imports inside library functions are reported."""
    source = "def f():\n    import os\n    return os\n"
    assert rules_for(tmp_path, "module.py", source) == ["import-in-function"]
    assert rules_for(tmp_path, "test_module.py", source) == []


def test_mutable_default(tmp_path: Path) -> None:
    """List, dict and set defaults are reported."""
    source = "def f(a=[], b=dict(), *, c={1}):\n    pass\n"
    assert rules_for(tmp_path, "module.py", source) == ["mutable-default"] * 3


def test_class_based_tests(tmp_path: Path) -> None:
    """Test classes are reported; state machine assignments are not."""
    source = "class TestThing:\n    pass\n\nTestMachine = Machine.TestCase\n"
    assert rules_for(tmp_path, "test_module.py", source) == ["no-class-tests"]


def test_todo_needs_issue(tmp_path: Path) -> None:
    """TODO comments must reference an issue."""
    marker = "TO" + "DO"
    bare = f"x = 1  # {marker} tidy up\n"
    linked = f"x = 1  # {marker}(#12) tidy up\n"
    assert rules_for(tmp_path, "module.py", bare) == ["todo-needs-issue"]
    assert rules_for(tmp_path, "module.py", linked) == []


def test_global_random_outside_sampler(tmp_path: Path) -> None:
    """Only the sampler module may call into the global random module."""
    source = "import random\n\nx = random.random()\nrng = random.Random(1)\n"
    assert rules_for(tmp_path, "collection.py", source) == ["global-random"]
    assert rules_for(tmp_path, "sampler.py", source) == []


def test_state_machine_test_case_subclass(tmp_path: Path) -> None:
    """Subclassing a state machine's TestCase is allowed."""
    source = "class TestMachine(Machine.TestCase):\n    pass\n"
    assert rules_for(tmp_path, "test_module.py", source) == []
