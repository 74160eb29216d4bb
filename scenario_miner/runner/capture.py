"""Run an external command and capture its combined output."""

import asyncio
import codecs
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from scenario_miner.models.result import Transcript

log = logging.getLogger(__name__)

CHUNK_SIZE = 4096


async def execute(
    command: str,
    args: Sequence[str],
    working_directory: Path,
    *,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> Transcript:
    """Run ``command`` to completion and return its transcript.

    Output from both pipes is appended to a single transcript in the order
    it arrives and echoed live to ``stdout``/``stderr`` (the current
    ``sys.stdout``/``sys.stderr`` by default). A non-zero exit code is a
    normal result.

    Args:
        command: Executable to launch
        args: Arguments passed to the executable
        working_directory: Directory the process runs in
        stdout: Stream receiving the child's standard output
        stderr: Stream receiving the child's standard error

    Returns:
        The combined output and the exit code

    Raises:
        OSError: If the process cannot be launched

    """
    log.info("Running: %s %s", command, " ".join(args))
    process = await asyncio.create_subprocess_exec(
        command,
        *args,
        cwd=working_directory,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    if process.stdout is None or process.stderr is None:
        raise RuntimeError(f"Output pipes not available for {command}")

    chunks: list[str] = []
    await asyncio.gather(
        _pump(process.stdout, chunks, stdout or sys.stdout),
        _pump(process.stderr, chunks, stderr or sys.stderr),
    )
    return_code = await process.wait()

    return Transcript(text="".join(chunks), exit_code=return_code or 0)


async def _pump(
    stream: asyncio.StreamReader, chunks: list[str], echo: TextIO
) -> None:
    """Read a pipe until EOF, collecting and echoing decoded chunks."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    while data := await stream.read(CHUNK_SIZE):
        _emit(decoder.decode(data), chunks, echo)

    _emit(decoder.decode(b"", final=True), chunks, echo)


def _emit(text: str, chunks: list[str], echo: TextIO) -> None:
    if not text:
        return
    chunks.append(text)
    echo.write(text)
    echo.flush()
