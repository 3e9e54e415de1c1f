"""
cli.py

Responsibility: CLI entrypoint for genpkgbuild.

High-level flow (single command):
1) Validate arguments and load configuration
2) Open the controlling terminal and the destination
3) Resolve the import path -> repository root
4) Fetch the version in the background while prompting the user
5) Render the PKGBUILD to the destination

This module should orchestrate behavior but keep concerns isolated:
- Resolution: `resolver.py`
- Version derivation: `version.py`
- Prompts: `prompter.py`
- Rendering: `renderer.py`
"""

from __future__ import annotations

import argparse
import concurrent.futures
import logging
import posixpath
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import NoReturn, TextIO

from genpkgbuild import __version__
from genpkgbuild.config import load_config
from genpkgbuild.errors import DestinationError, GenPkgbuildError, UsageError
from genpkgbuild.prompter import open_terminal
from genpkgbuild.renderer import PkgbuildData, write_pkgbuild
from genpkgbuild.resolver import RepoResolver, resolve
from genpkgbuild.version import fetch_version

logger = logging.getLogger(__name__)

STDOUT_MARKER = "-"

USAGE = """\
Usage: genpkgbuild <import-path> [-o <output>]

Specify Go import path as the argument.

e.g. genpkgbuild golang.org/x/tools/cmd/godoc

The output filename can be specified with -o flag. The default is PKGBUILD.
Specify "-" to write STDOUT instead of an actual file."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def relative_import_path(root: str, import_path: str) -> str:
    """
    Import path relative to the repository root; empty when they are the same.
    """
    try:
        rel = PurePosixPath(import_path).relative_to(PurePosixPath(root)).as_posix()
    except ValueError as e:
        raise GenPkgbuildError(f"{import_path} is not inside repository root {root}") from e
    return "" if rel == "." else rel


@contextmanager
def _open_destination(output_path: str) -> Iterator[TextIO]:
    """
    Yield stdout for "-", otherwise a newly created file. An existing file is
    never opened. A created file that is still empty when the block fails is
    removed.
    """
    if output_path == STDOUT_MARKER:
        yield sys.stdout
        return

    path = Path(output_path)
    try:
        fh = path.open("x", encoding="utf-8", newline="\n")
    except FileExistsError as e:
        raise DestinationError(f"{path} already exists") from e
    except OSError as e:
        raise DestinationError(f"could not create {path}: {e}") from e

    logger.debug("writing PKGBUILD to %s", path)
    try:
        with fh:
            yield fh
    except BaseException:
        if path.exists() and path.stat().st_size == 0:
            path.unlink()
        raise


def run(args: argparse.Namespace) -> int:
    import_path = (args.import_path or "").strip().rstrip("/")
    if not import_path:
        raise UsageError("specify import path")

    config = load_config(args.config)
    output_path = args.output or config.output

    with open_terminal() as terminal, _open_destination(output_path) as destination:
        repo_root = resolve(import_path, resolver=RepoResolver(timeout=config.timeout))

        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            pending = pool.submit(fetch_version, repo_root)

            dirname = posixpath.basename(repo_root.root)
            pkgname = terminal.prompt("Package Name", f"{dirname}-git")
            depends = terminal.prompt("Dependent Packages(split by space)", " ".join(config.depends)).split()
            path = relative_import_path(repo_root.root, import_path)
            binname = terminal.prompt("Binary name to be installed", posixpath.basename(import_path))

            terminal.write("Please wait...")
            version = pending.result()
            terminal.write(" done\n")

        if destination is sys.stdout:
            terminal.write("===========================\n")

        write_pkgbuild(
            PkgbuildData(
                pkgname=pkgname,
                dirname=dirname,
                pkgver=version,
                repo=repo_root.repo,
                root=repo_root.root,
                binname=binname,
                depends=depends,
                path=path,
            ),
            destination,
        )

    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="genpkgbuild",
        usage="genpkgbuild <import-path> [-o <output>]",
        description="Generate a PKGBUILD for a Go application hosted in a git repository",
    )
    p.add_argument("import_path", nargs="?", default=None, help="Go import path, e.g. golang.org/x/tools/cmd/godoc")
    p.add_argument("-o", "--output", default=None, help='Output file (default: PKGBUILD); "-" writes to stdout')
    p.add_argument("-c", "--config", default=None, help="Path to a YAML config file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
        _configure_logging(bool(args.verbose))
        return run(args)
    except UsageError as e:
        print(e, file=sys.stderr)
        print(file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1
    except GenPkgbuildError as e:
        logger.debug("run failed", exc_info=True)
        print(e, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("interrupted", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
