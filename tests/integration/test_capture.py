"""Integration tests running real child processes."""

import io
import shlex
import sys
from pathlib import Path

import pytest

from scenario_miner.config import MinerConfig
from scenario_miner.runner.capture import execute
from scenario_miner.runner.test_runner import TestRunner
from scenario_miner.testing.transcripts import FAILING_RUN, PASSING_RUN


async def run_python(code: str, tmp_path: Path) -> tuple[str, str, int, str]:
    stdout, stderr = io.StringIO(), io.StringIO()
    transcript = await execute(
        sys.executable, ["-c", code], tmp_path, stdout=stdout, stderr=stderr
    )
    return transcript.text, stdout.getvalue(), transcript.exit_code, stderr.getvalue()


async def test_captures_both_streams(tmp_path: Path) -> None:
    """Output of both pipes ends up in the transcript and is echoed."""
    text, echoed_out, exit_code, echoed_err = await run_python(
        "import sys; print('out line'); sys.stdout.flush(); "
        "print('err line', file=sys.stderr)",
        tmp_path,
    )

    assert exit_code == 0
    assert "out line\n" in text
    assert "err line\n" in text
    assert echoed_out == "out line\n"
    assert echoed_err == "err line\n"


async def test_nonzero_exit_is_a_result(tmp_path: Path) -> None:
    """A failing command returns its exit code instead of raising."""
    text, _, exit_code, _ = await run_python(
        "import sys; print('boom'); sys.exit(3)", tmp_path
    )

    assert exit_code == 3
    assert text == "boom\n"


async def test_decodes_multibyte_output(tmp_path: Path) -> None:
    """Multibyte characters survive chunked reads."""
    text, _, _, _ = await run_python(
        "import sys; sys.stdout.buffer.write('윤년 ✓ ×\\n'.encode() * 2000)",
        tmp_path,
    )

    assert text == "윤년 ✓ ×\n" * 2000


async def test_runs_in_working_directory(tmp_path: Path) -> None:
    """The child process starts in the given directory."""
    text, _, _, _ = await run_python("import os; print(os.getcwd())", tmp_path)

    assert Path(text.strip()).resolve() == tmp_path.resolve()


async def test_stdin_is_not_inherited(tmp_path: Path) -> None:
    """Reading stdin hits end of file immediately."""
    text, _, _, _ = await run_python(
        "import sys; print(repr(sys.stdin.read()))", tmp_path
    )

    assert text == "''\n"


async def test_missing_executable_raises(tmp_path: Path) -> None:
    """A command that cannot be launched raises OSError."""
    with pytest.raises(OSError):
        await execute("definitely-not-a-real-command-xyz", [], tmp_path)


@pytest.mark.parametrize(
    ("output", "exit_code", "all_passed", "failed"),
    [
        (FAILING_RUN, 1, False, 2),
        (PASSING_RUN, 0, True, 0),
    ],
)
async def test_runner_parses_real_output(
    tmp_path: Path, output: str, exit_code: int, all_passed: bool, failed: int
) -> None:
    """A fake test command's console output is parsed into a result."""
    (tmp_path / "output.txt").write_text(output, encoding="utf-8")
    (tmp_path / "fake_runner.py").write_text(
        "import sys\n"
        "from pathlib import Path\n"
        "sys.stdout.buffer.write(Path('output.txt').read_bytes())\n"
        f"sys.exit({exit_code})\n",
        encoding="utf-8",
    )
    config = MinerConfig(
        project_root=tmp_path,
        test_command=f"{shlex.quote(sys.executable)} fake_runner.py",
    )

    result = await TestRunner(
        config=config, stdout=io.StringIO(), stderr=io.StringIO()
    ).run_file("src/__tests__/unit/dateUtils.spec.ts")

    assert result.exit_code == exit_code
    assert result.all_passed is all_passed
    assert result.totals.failed == failed
    assert len(result.failures) == failed
    assert result.raw_text == output
    assert result.duration_ms >= 0
