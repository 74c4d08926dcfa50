from pathlib import Path

import pytest

from homestead.executor import BashExecutor
from homestead.models import (
    Category,
    ExecutionFailedError,
    InvalidInputError,
    Script,
)


def _script(path: str, **kwargs) -> Script:
    return Script(
        id=kwargs.pop("id", "test-script"),
        name=kwargs.pop("name", "Test Script"),
        path=path,
        category=kwargs.pop("category", Category.MONITORING),
        **kwargs,
    )


def _write(root: Path, name: str, body: str) -> None:
    (root / name).write_text(body, encoding="utf-8")


def test_can_execute_none_is_false(tmp_path):
    assert BashExecutor(tmp_path).can_execute(None) is False


def test_can_execute_missing_file_is_false(tmp_path):
    assert BashExecutor(tmp_path).can_execute(_script("missing.sh")) is False


def test_can_execute_existing_file_is_true(tmp_path):
    _write(tmp_path, "ok.sh", "exit 0\n")
    assert BashExecutor(tmp_path).can_execute(_script("ok.sh")) is True


def test_validate_none_raises_invalid_input(tmp_path):
    with pytest.raises(InvalidInputError):
        BashExecutor(tmp_path).validate(None)


def test_validate_incomplete_script_raises_invalid_input(tmp_path):
    _write(tmp_path, "ok.sh", "exit 0\n")
    with pytest.raises(InvalidInputError):
        BashExecutor(tmp_path).validate(_script("ok.sh", name=""))


def test_validate_missing_file_raises_execution_failed(tmp_path):
    with pytest.raises(ExecutionFailedError):
        BashExecutor(tmp_path).validate(_script("missing.sh"))


def test_execute_runs_script(tmp_path):
    marker = tmp_path / "marker.txt"
    _write(tmp_path, "run.sh", f"printf ran > '{marker}'\n")
    BashExecutor(tmp_path).execute(_script("run.sh"))
    assert marker.read_text() == "ran"


def test_execute_passes_real_user_environment(tmp_path):
    out = tmp_path / "env.txt"
    _write(tmp_path, "env.sh", f'printf "%s|%s" "$REAL_USER" "$REAL_HOME" > \'{out}\'\n')
    BashExecutor(tmp_path).execute(_script("env.sh"))
    user, _, home = out.read_text().partition("|")
    assert user.strip() != "" and home.startswith("/")


def test_execute_failing_script_raises(tmp_path):
    _write(tmp_path, "fail.sh", "exit 4\n")
    with pytest.raises(ExecutionFailedError):
        BashExecutor(tmp_path).execute(_script("fail.sh"))


def test_execute_missing_script_raises(tmp_path):
    with pytest.raises(ExecutionFailedError):
        BashExecutor(tmp_path).execute(_script("nope.sh"))