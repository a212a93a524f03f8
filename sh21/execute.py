"""Running parsed commands: path lookup, redirections and pipes."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Mapping, MutableMapping, Sequence
from typing import NoReturn

from .builtins import run_builtin
from .errors import ShellError, Status, report_error
from .parser import CLOSE_FD, Command, SimpleCommand

_STANDARD = (0, 1, 2)


def split_path(path: str | None) -> list[str]:
    """Split a ``PATH`` value on ``:``, dropping empty entries."""
    if path is None:
        return []
    return [part for part in path.split(":") if part]


def search_in_path(name: str | None, path: str | None = None) -> str | None:
    """Return the first ``dir/name`` that exists for a directory in ``path``."""
    if not name:
        return None
    if path is None:
        path = os.environ.get("PATH")
    for directory in split_path(path):
        candidate = f"{directory}/{name}"
        if os.path.exists(candidate):
            return candidate
    return None


def run_program(
    pathname: str, argv: Sequence[str], env: Mapping[str, str] | None = None
) -> int:
    """Run an executable and wait for it; return its exit status or signal number."""
    if not os.access(pathname, os.X_OK):
        raise ShellError(pathname, "Permission denied.")
    environment = dict(os.environ if env is None else env)
    try:
        completed = subprocess.run(list(argv), executable=pathname, env=environment)
    except OSError:
        raise ShellError("execve", "Failed.") from None
    return abs(completed.returncode)


def search_and_run(
    argv: Sequence[str], env: MutableMapping[str, str] | None = None
) -> int:
    """Run a builtin or a program found in ``PATH``; names with ``/`` are ignored."""
    target = os.environ if env is None else env
    name = argv[0]
    if "/" in name:
        return Status.DONE
    code = run_builtin(name, argv, target)
    if code != Status.NO_MATCH:
        return code
    found = search_in_path(name, target.get("PATH", ""))
    if found is None:
        return report_error(name, "Command not found.", 127)
    try:
        return run_program(found, argv, target)
    except ShellError as exc:
        return report_error(exc.prefix, exc.message, exc.code)


def _open(path: str, flags: int) -> int:
    try:
        return os.open(path, flags, 0o755)
    except OSError as exc:
        raise ShellError("open", exc.strerror or "Cannot open file.") from None


def open_streams(pipeline: list[SimpleCommand]) -> None:
    """Open the files and pipes the commands of a pipeline redirect to."""
    for index, command in enumerate(pipeline):
        if command.input and command.input != "|":
            command.in_fd = _open(command.input, os.O_RDONLY)
        if command.output:
            if command.output == "|":
                if index + 1 >= len(pipeline):
                    raise ShellError("pipe()", "No command after '|'.")
                try:
                    read_end, write_end = os.pipe()
                except OSError as exc:
                    raise ShellError("pipe()", exc.strerror or "Failed.") from None
                command.out_fd = write_end
                pipeline[index + 1].in_fd = read_end
            else:
                command.out_fd = _open(command.output, command.open_flags)
        if command.error:
            command.err_fd = _open(command.error, command.open_flags)


def _is_open(fd: int) -> bool:
    try:
        os.fstat(fd)
    except OSError:
        return False
    return True


def _descriptors(command: SimpleCommand) -> tuple[int, int, int]:
    return (command.in_fd, command.out_fd, command.err_fd)


def _text_stream(fd: int, closed: bool):
    if closed:
        return open(os.devnull, "w")
    return os.fdopen(fd, "w", closefd=False)


def _run_child(command: SimpleCommand, env: MutableMapping[str, str]) -> NoReturn:
    code = int(Status.ERR)
    try:
        for fd, standard in zip(_descriptors(command), _STANDARD):
            if fd == CLOSE_FD:
                os.close(standard)
            elif fd != standard:
                os.dup2(fd, standard)
        sys.stdout = _text_stream(1, command.out_fd == CLOSE_FD)
        sys.stderr = _text_stream(2, command.err_fd == CLOSE_FD)
        code = int(search_and_run(command.argv, env))
    except BaseException:
        code = int(Status.ERR)
    finally:
        for stream in (sys.stdout, sys.stderr):
            try:
                stream.flush()
            except (OSError, ValueError):
                pass
        os._exit(code & 0xFF)


def run_redirected(
    command: SimpleCommand, env: MutableMapping[str, str] | None = None
) -> int:
    """Run a command in a child process with its streams redirected."""
    target = os.environ if env is None else env
    labels = ("INPUT", "OUTPUT", "OUTPUT")
    for fd, label in zip(_descriptors(command), labels):
        if fd > -1 and not _is_open(fd):
            raise ShellError(None, f"{label} is not a valid descriptor.")
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        pid = os.fork()
    except OSError as exc:
        raise ShellError("fork()", exc.strerror or "Failed.") from None
    if pid == 0:
        _run_child(command, target)
    for fd, standard in zip(_descriptors(command), _STANDARD):
        if fd != standard and fd >= 0:
            try:
                os.close(fd)
            except OSError:
                pass
    try:
        _, status = os.waitpid(pid, 0)
    except OSError:
        raise ShellError("waitpid", "Interupted by a signal.") from None
    return abs(os.waitstatus_to_exitcode(status))


def execute_pipeline(
    pipeline: list[SimpleCommand], env: MutableMapping[str, str] | None = None
) -> int:
    """Run each command of a pipeline in turn; stop on ``EXIT`` or ``ERR``."""
    target = os.environ if env is None else env
    try:
        open_streams(pipeline)
    except ShellError as exc:
        report_error(exc.prefix, exc.message, exc.code)
    for command in pipeline:
        if _descriptors(command) == _STANDARD:
            code = search_and_run(command.argv, target)
        else:
            try:
                code = run_redirected(command, target)
            except ShellError as exc:
                code = report_error(exc.prefix, exc.message, exc.code)
        if code == Status.EXIT:
            return Status.EXIT
        if code == Status.ERR:
            return Status.ERR
    return Status.DONE


def execute(
    commands: Sequence[Command], env: MutableMapping[str, str] | None = None
) -> int:
    """Run the commands in order; stop on ``EXIT`` or ``ERR``."""
    target = os.environ if env is None else env
    code: int = Status.DONE
    for command in commands:
        code = execute_pipeline(command.pipeline, target)
        if code in (Status.EXIT, Status.ERR):
            return code
    return code