"""
version.py

Responsibility: Derive a pkgver string from a fresh clone of the repository.

The clone lives in a temporary directory that is removed on every exit path.
`PKGVER_SCRIPT` is shared with the rendered PKGBUILD so the generated `pkgver()`
function reproduces the same string at build time.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path

from genpkgbuild.errors import CloneError, VersionCommandError
from genpkgbuild.resolver import RepoRoot

logger = logging.getLogger(__name__)

PKGVER_SCRIPT = """\
set -o pipefail
git describe --long --tags 2>/dev/null | sed 's/\\([^-]*-g\\)/r\\1/;s/-/./g' ||
printf "r%s.%s" "$(git rev-list --count HEAD)" "$(git rev-parse --short HEAD)"\
"""


def _git_env(base_env: dict[str, str]) -> dict[str, str]:
    """
    The terminal belongs to the prompter while the clone runs in the background,
    so git must never ask for credentials interactively.
    """
    env = dict(base_env)
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def _clone(repo: str, dest: Path, *, env: dict[str, str]) -> None:
    cmd = ["git", "clone", "--", repo, str(dest)]
    logger.debug("cloning %s into %s", repo, dest)
    try:
        subprocess.run(
            cmd,
            env=env,
            check=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except subprocess.CalledProcessError as e:
        raise CloneError(f"could not clone the repo: {repo}\n\n{e.stdout or ''}".rstrip()) from e
    except OSError as e:
        raise CloneError(f"could not run git: {e}") from e


def _describe(workdir: Path, *, env: dict[str, str]) -> str:
    try:
        result = subprocess.run(
            ["bash", "-c", PKGVER_SCRIPT],
            cwd=str(workdir),
            env=env,
            check=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except subprocess.CalledProcessError as e:
        raise VersionCommandError(
            f"version command exited with status {e.returncode}", stderr=e.stderr or ""
        ) from e
    except OSError as e:
        raise VersionCommandError(f"could not run the version command: {e}") from e
    return result.stdout.strip()


def fetch_version(repo_root: RepoRoot) -> str:
    """
    Clone repo_root.repo into a temporary directory and return its pkgver,
    e.g. `v1.2.r3.gabc1234` (tagged) or `r42.abc1234` (untagged).
    """
    env = _git_env(os.environ.copy())
    with tempfile.TemporaryDirectory(prefix="genpkgbuild") as tmp:
        workdir = Path(tmp)
        _clone(repo_root.repo, workdir, env=env)
        version = _describe(workdir, env=env)
    logger.debug("derived version %s for %s", version, repo_root.root)
    return version
