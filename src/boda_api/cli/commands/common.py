"""Shared helpers and filesystem paths for the Boda CLI."""

from __future__ import annotations

import importlib.util
import os
import subprocess
import sys
from collections.abc import Iterable
from pathlib import Path

import typer

from boda_api.settings import DEFAULT_PROJECT_ROOT

PROJECT_ROOT = DEFAULT_PROJECT_ROOT
PACKAGE_DIR = PROJECT_ROOT / "src" / "boda_api"
README_HINT = "See README: Developer setup."
INSTALL_HINT = "Install the project with dev extras (e.g., `pip install -e '.[dev,test]'`)."


def run(command: Iterable[str], cwd: Path | None = None, env: dict[str, str] | None = None) -> None:
    """Run a command, streaming output and raising on failure."""

    cmd_list = list(command)
    typer.echo(f"↪️  {' '.join(cmd_list)}", err=True)
    completed = subprocess.run(
        cmd_list,
        cwd=cwd or PROJECT_ROOT,
        env=env,
        check=False,
    )
    if completed.returncode != 0:
        raise typer.Exit(code=completed.returncode)


def require_python_module(module: str, fix_hint: str = INSTALL_HINT) -> None:
    """Ensure a Python module is importable in the current environment."""

    if importlib.util.find_spec(module) is None:
        typer.echo(
            f"❌ Required Python module '{module}' is unavailable in the current environment.\n"
            f"{fix_hint}\n\n{README_HINT}",
            err=True,
        )
        raise typer.Exit(code=1)


def build_env() -> dict[str, str]:
    """Copy of the environment with the interpreter's bin dir first on PATH."""

    env = os.environ.copy()
    python_bin = str(Path(sys.executable).parent)
    env["PATH"] = f"{python_bin}{os.pathsep}{env.get('PATH', '')}"
    return env


def uvicorn_command(*, host: str, port: int, reload: bool) -> list[str]:
    require_python_module("uvicorn")
    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "boda_api.main:create_app",
        "--factory",
        "--host",
        host,
        "--port",
        str(port),
    ]
    if reload:
        cmd += ["--reload", "--reload-dir", str(PACKAGE_DIR)]
    return cmd
