"""Commands the shell runs itself: ``cd``, ``setenv`` and ``exit``."""

from __future__ import annotations

import os
import sys
from collections.abc import MutableMapping, Sequence

from .errors import ShellError, Status, path_join, report_error


def canonical_path(path: str | None) -> str | None:
    """Remove ``.`` components and fold ``..`` into the component before it.

    A ``..`` with nothing left before it is kept as it is.  The result is
    always absolute; an empty result becomes ``/``.
    """
    if path is None:
        return None
    parts: list[str] = []
    for part in path.split("/"):
        if not part or part == ".":
            continue
        if part == ".." and parts:
            parts.pop()
        else:
            parts.append(part)
    return "/" + "/".join(parts)


def set_env(
    name: str | None,
    value: str | None,
    overwrite: bool = True,
    env: MutableMapping[str, str] | None = None,
) -> Status:
    """Set ``name`` to ``value`` in ``env`` (the process environment by default)."""
    target = os.environ if env is None else env
    if name is None:
        raise ShellError("ft_setenv", "Var name is Null.")
    if "=" in name:
        raise ShellError("ft_setenv", "Var name cantain a '='.")
    if name in target and not overwrite:
        return Status.DONE
    target[name] = "" if value is None else value
    return Status.DONE


def builtin_cd(
    argv: Sequence[str], env: MutableMapping[str, str] | None = None
) -> Status:
    """Change the working directory and update ``PWD`` and ``OLDPWD``."""
    target = os.environ if env is None else env
    operand = argv[1] if len(argv) > 1 else None
    home = target.get("HOME")
    pwd = target.get("PWD")
    if pwd is None:
        raise ShellError("cd", "Failed to get 'PWD' env.")
    if operand is None:
        if home is None:
            return Status.DONE
        curpath = home
    elif operand == "-":
        oldpwd = target.get("OLDPWD")
        if oldpwd is None:
            raise ShellError("cd", "OLDPWD not set.")
        curpath = oldpwd
        sys.stdout.write(curpath + "\n")
        sys.stdout.flush()
    elif operand.startswith("/"):
        curpath = operand
    else:
        curpath = path_join(pwd, operand)
    curpath = canonical_path(curpath)
    try:
        os.chdir(curpath)
    except OSError as exc:
        raise ShellError(operand, exc.strerror or "Cannot change directory.") from None
    set_env("OLDPWD", pwd, True, target)
    set_env("PWD", curpath, True, target)
    return Status.DONE


def run_builtin(
    name: str, argv: Sequence[str], env: MutableMapping[str, str] | None = None
) -> int:
    """Run ``name`` if it is a builtin; return its status or ``NO_MATCH``."""
    target = os.environ if env is None else env
    try:
        if name == "exit":
            return Status.EXIT
        if name == "cd":
            return builtin_cd(argv, target)
        if name == "setenv":
            return set_env(
                argv[1] if len(argv) > 1 else None,
                argv[2] if len(argv) > 2 else None,
                True,
                target,
            )
    except ShellError as exc:
        return report_error(exc.prefix, exc.message, exc.code)
    return Status.NO_MATCH