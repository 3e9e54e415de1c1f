"""
renderer.py

Responsibility: Render the fixed PKGBUILD template from the collected fields.

Rules:
- Every field except `depends` and `path` must be non-empty.
- The whole recipe is rendered before anything is written, so a template
  failure never leaves partial output behind.
- Output always uses `\\n` newlines.

This module intentionally does NOT know about terminals, git, or CLI parsing.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TextIO

from jinja2 import Environment, StrictUndefined, TemplateError

from genpkgbuild.errors import RenderError
from genpkgbuild.version import PKGVER_SCRIPT

PKGBUILD_TEMPLATE = """\
pkgname={{ pkgname }}
_pkgname={{ dirname }}
pkgver={{ pkgver }}
pkgrel=1
arch=('i686' 'x86_64')
url='{{ repo }}'
source=('git+https://{{ root }}')
depends={{ depends | quote_list }}
makedepends=('go')
sha1sums=('SKIP')

pkgver() {
  cd "$srcdir/$_pkgname"
  ( {{ pkgver_script | indent(4) }}
  )
}

build(){
  cd "$srcdir/$_pkgname{% if path %}/{{ path }}{% endif %}"
  GO111MODULE=on go build -o "$srcdir/bin/{{ binname }}"
}

package() {
  cd "$srcdir/bin"
  install -Dm755 '{{ binname }}' "$pkgdir/usr/bin/{{ binname }}"
}
"""

OPTIONAL_FIELDS = frozenset({"depends", "path"})


@dataclass(frozen=True)
class PkgbuildData:
    """Fields of a single PKGBUILD; built once per run."""

    pkgname: str
    dirname: str
    pkgver: str
    repo: str
    root: str
    binname: str
    depends: list[str] = field(default_factory=list)
    path: str = ""

    def missing_fields(self) -> list[str]:
        return [f.name for f in fields(self) if f.name not in OPTIONAL_FIELDS and not getattr(self, f.name)]


def quote_list(items: list[str]) -> str:
    """`['a', 'b']` -> `('a' 'b')`; an empty list renders as `()`."""
    return "(" + " ".join(f"'{item}'" for item in items) + ")"


def _environment() -> Environment:
    env = Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    env.filters["quote_list"] = quote_list
    return env


def render_pkgbuild(data: PkgbuildData) -> str:
    missing = data.missing_fields()
    if missing:
        raise RenderError(f"Cannot render PKGBUILD, empty fields: {', '.join(missing)}")

    try:
        template = _environment().from_string(PKGBUILD_TEMPLATE)
        return template.render(
            pkgname=data.pkgname,
            dirname=data.dirname,
            pkgver=data.pkgver,
            repo=data.repo,
            root=data.root,
            depends=list(data.depends),
            path=data.path,
            binname=data.binname,
            pkgver_script=PKGVER_SCRIPT,
        )
    except TemplateError as e:
        raise RenderError("Failed rendering PKGBUILD template") from e


def write_pkgbuild(data: PkgbuildData, destination: TextIO) -> None:
    destination.write(render_pkgbuild(data))
    destination.flush()
