import os

import pytest

from sh21.errors import ShellError, Status
from sh21.execute import (
    execute,
    execute_pipeline,
    open_streams,
    run_program,
    run_redirected,
    search_and_run,
    search_in_path,
    split_path,
)
from sh21.parser import Command, SimpleCommand

WRITE_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_TRUNC


def _script(directory, name, body):
    path = directory / name
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(0o755)
    return path


def _env(extra_dir=None):
    path = os.environ.get("PATH", "")
    if extra_dir is not None:
        path = f"{extra_dir}:{path}"
    return {"PATH": path}


def test_split_path_drops_empty_entries():
    assert split_path("/bin::/usr/bin:") == ["/bin", "/usr/bin"]
    assert split_path(None) == []
    assert split_path("") == []


def test_search_in_path_first_match(tmp_path):
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.mkdir()
    second.mkdir()
    (second / "tool").write_text("")
    assert search_in_path("tool", f"{first}:{second}") == f"{second}/tool"
    (first / "tool").write_text("")
    assert search_in_path("tool", f"{first}:{second}") == f"{first}/tool"


def test_search_in_path_missing(tmp_path):
    assert search_in_path("nothing-here", str(tmp_path)) is None
    assert search_in_path("", str(tmp_path)) is None


def test_run_program_returns_exit_status(tmp_path):
    script = _script(tmp_path, "three", "exit 3")
    assert run_program(str(script), [str(script)], _env()) == 3


def test_run_program_not_executable(tmp_path):
    plain = tmp_path / "plain"
    plain.write_text("")
    plain.chmod(0o644)
    with pytest.raises(ShellError) as exc:
        run_program(str(plain), [str(plain)], _env())
    assert exc.value.message == "Permission denied."


def test_search_and_run_not_found(tmp_path, capsys):
    assert search_and_run(["nothing-here"], {"PATH": str(tmp_path)}) == 127
    assert "nothing-here: Command not found." in capsys.readouterr().err


def test_search_and_run_builtin_and_slash(tmp_path):
    assert search_and_run(["exit"], {}) == Status.EXIT
    assert search_and_run(["./anything"], {}) == Status.DONE


def test_search_and_run_program_from_path(tmp_path):
    _script(tmp_path, "seven", "exit 7")
    assert search_and_run(["seven"], _env(tmp_path)) == 7


def test_open_streams_creates_pipe():
    first = SimpleCommand(["a"], output="|")
    second = SimpleCommand(["b"])
    open_streams([first, second])
    try:
        os.write(first.out_fd, b"data")
        assert os.read(second.in_fd, 4) == b"data"
    finally:
        os.close(first.out_fd)
        os.close(second.in_fd)


def test_open_streams_missing_input(tmp_path):
    command = SimpleCommand(["cat"], input=str(tmp_path / "missing"))
    with pytest.raises(ShellError) as exc:
        open_streams([command])
    assert exc.value.prefix == "open"


def test_open_streams_trailing_pipe():
    with pytest.raises(ShellError):
        open_streams([SimpleCommand(["ls"], output="|")])


def test_output_redirection(tmp_path):
    target = tmp_path / "out.txt"
    command = SimpleCommand(["echo", "hello"], output=str(target), open_flags=WRITE_FLAGS)
    assert execute_pipeline([command], _env()) == Status.DONE
    assert target.read_text() == "hello\n"


def test_pipe_into_file(tmp_path):
    target = tmp_path / "out.txt"
    pipeline = [
        SimpleCommand(["echo", "hello"], output="|"),
        SimpleCommand(["cat"], output=str(target), open_flags=WRITE_FLAGS),
    ]
    assert execute_pipeline(pipeline, _env()) == Status.DONE
    assert target.read_text() == "hello\n"


def test_run_redirected_rejects_closed_descriptor():
    read_end, write_end = os.pipe()
    os.close(read_end)
    os.close(write_end)
    with pytest.raises(ShellError) as exc:
        run_redirected(SimpleCommand(["echo"], out_fd=write_end), _env())
    assert exc.value.message == "OUTPUT is not a valid descriptor."


def test_execute_stops_on_exit(tmp_path):
    target = tmp_path / "never"
    commands = [
        Command([SimpleCommand(["exit"])]),
        Command([SimpleCommand(["echo", "x"], output=str(target), open_flags=WRITE_FLAGS)]),
    ]
    assert execute(commands, _env()) == Status.EXIT
    assert not target.exists()


def test_execute_stops_on_error(tmp_path):
    _script(tmp_path, "fails", "exit 1")
    target = tmp_path / "never"
    commands = [
        Command([SimpleCommand(["fails"])]),
        Command([SimpleCommand(["echo", "x"], output=str(target), open_flags=WRITE_FLAGS)]),
    ]
    assert execute(commands, _env(tmp_path)) == Status.ERR
    assert not target.exists()


def test_execute_empty():
    assert execute([], {}) == Status.DONE