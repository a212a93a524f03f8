import os

import pytest

from sh21.builtins import builtin_cd, canonical_path, run_builtin, set_env
from sh21.errors import ShellError, Status


def test_canonical_root_for_empty_result():
    assert canonical_path("/") == "/"
    assert canonical_path("/a/..") == "/"


def test_canonical_folds_dot_and_dotdot():
    assert canonical_path("/a/./b/../c") == "/a/c"


def test_canonical_keeps_leading_dotdot():
    assert canonical_path("/../a") == "/../a"


def test_canonical_none():
    assert canonical_path(None) is None


@pytest.mark.parametrize("path", ["/a/./b/../c", "x//y/", "/../..", "/p/q/../../r/."])
def test_canonical_is_idempotent(path):
    once = canonical_path(path)
    assert canonical_path(once) == once
    assert once.startswith("/")


def test_canonical_of_real_directory(tmp_path):
    assert canonical_path(str(tmp_path) + "/x/./..") == str(tmp_path)


def test_set_env_sets_value():
    env = {}
    assert set_env("FOO", "bar", True, env) == Status.DONE
    assert env["FOO"] == "bar"


def test_set_env_without_overwrite_keeps_value():
    env = {"FOO": "old"}
    set_env("FOO", "new", False, env)
    assert env["FOO"] == "old"
    set_env("FOO", "new", True, env)
    assert env["FOO"] == "new"


def test_set_env_rejects_bad_names():
    with pytest.raises(ShellError) as exc:
        set_env("A=B", "x", True, {})
    assert exc.value.message == "Var name cantain a '='."
    with pytest.raises(ShellError) as exc:
        set_env(None, "x", True, {})
    assert exc.value.message == "Var name is Null."


def test_cd_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "dest"
    target.mkdir()
    env = {"PWD": str(tmp_path)}
    assert builtin_cd(["cd", str(target)], env) == Status.DONE
    assert env["PWD"] == str(target)
    assert env["OLDPWD"] == str(tmp_path)
    assert os.path.samefile(os.getcwd(), target)


def test_cd_relative(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "sub").mkdir()
    env = {"PWD": str(tmp_path)}
    builtin_cd(["cd", "sub"], env)
    assert env["PWD"] == str(tmp_path / "sub")
    builtin_cd(["cd", ".."], env)
    assert env["PWD"] == str(tmp_path)


def test_cd_dash_prints_oldpwd(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    previous = str(tmp_path.parent)
    env = {"PWD": previous, "OLDPWD": str(tmp_path)}
    builtin_cd(["cd", "-"], env)
    assert capsys.readouterr().out == str(tmp_path) + "\n"
    assert env["PWD"] == str(tmp_path)
    assert env["OLDPWD"] == previous


def test_cd_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    env = {"PWD": str(tmp_path), "HOME": str(home)}
    builtin_cd(["cd"], env)
    assert env["PWD"] == str(home)


def test_cd_without_home_does_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = {"PWD": str(tmp_path)}
    assert builtin_cd(["cd"], env) == Status.DONE
    assert env == {"PWD": str(tmp_path)}


def test_cd_without_pwd_fails():
    with pytest.raises(ShellError) as exc:
        builtin_cd(["cd", "/"], {})
    assert exc.value.prefix == "cd"


def test_cd_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = {"PWD": str(tmp_path)}
    with pytest.raises(ShellError) as exc:
        builtin_cd(["cd", "nowhere"], env)
    assert exc.value.prefix == "nowhere"
    assert env == {"PWD": str(tmp_path)}


def test_run_builtin_dispatch():
    env = {}
    assert run_builtin("exit", ["exit"], env) == Status.EXIT
    assert run_builtin("ls", ["ls"], env) == Status.NO_MATCH
    assert run_builtin("setenv", ["setenv", "A", "b"], env) == Status.DONE
    assert env["A"] == "b"


def test_run_builtin_reports_errors(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    env = {"PWD": str(tmp_path)}
    assert run_builtin("cd", ["cd", "nowhere"], env) == Status.ERR
    assert capsys.readouterr().err.startswith("21sh: nowhere: ")
    assert run_builtin("setenv", ["setenv"], env) == Status.ERR
    assert "Var name is Null." in capsys.readouterr().err