from __future__ import annotations

import io

import pytest

from genpkgbuild.errors import RenderError
from genpkgbuild.renderer import PkgbuildData, quote_list, render_pkgbuild, write_pkgbuild
from genpkgbuild.version import PKGVER_SCRIPT


def _data(**overrides) -> PkgbuildData:
    values = {
        "pkgname": "bar-git",
        "dirname": "bar",
        "pkgver": "r12.abcdef0",
        "repo": "https://example.com/foo/bar",
        "root": "example.com/foo/bar",
        "binname": "baz",
        "depends": [],
        "path": "",
    }
    values.update(overrides)
    return PkgbuildData(**values)


def test_header_fields() -> None:
    lines = render_pkgbuild(_data()).splitlines()
    assert lines[:10] == [
        "pkgname=bar-git",
        "_pkgname=bar",
        "pkgver=r12.abcdef0",
        "pkgrel=1",
        "arch=('i686' 'x86_64')",
        "url='https://example.com/foo/bar'",
        "source=('git+https://example.com/foo/bar')",
        "depends=()",
        "makedepends=('go')",
        "sha1sums=('SKIP')",
    ]


def test_depends_are_quoted() -> None:
    out = render_pkgbuild(_data(depends="foo bar".split()))
    assert "depends=('foo' 'bar')\n" in out


def test_quote_list() -> None:
    assert quote_list([]) == "()"
    assert quote_list(["glibc"]) == "('glibc')"
    assert quote_list(["foo", "bar"]) == "('foo' 'bar')"


def test_build_at_repository_root() -> None:
    out = render_pkgbuild(_data())
    assert '  cd "$srcdir/$_pkgname"\n  GO111MODULE=on go build -o "$srcdir/bin/baz"\n' in out


def test_build_in_sub_path() -> None:
    out = render_pkgbuild(_data(path="cmd/baz"))
    assert '  cd "$srcdir/$_pkgname/cmd/baz"\n' in out


def test_package_installs_binary() -> None:
    out = render_pkgbuild(_data())
    assert "  install -Dm755 'baz' \"$pkgdir/usr/bin/baz\"\n" in out


def test_pkgver_function_reuses_version_script() -> None:
    out = render_pkgbuild(_data())
    first, *rest = PKGVER_SCRIPT.splitlines()
    expected = "\n".join([f"  ( {first}", *(f"    {line}" for line in rest), "  )"])
    assert expected in out
    assert "git describe --long --tags 2>/dev/null | sed 's/\\([^-]*-g\\)/r\\1/;s/-/./g' ||" in out


def test_values_are_not_html_escaped() -> None:
    out = render_pkgbuild(_data(repo="https://example.com/a?b=1&c=2"))
    assert "url='https://example.com/a?b=1&c=2'" in out


def test_empty_required_field_is_rejected() -> None:
    with pytest.raises(RenderError, match="pkgver"):
        render_pkgbuild(_data(pkgver=""))


def test_write_pkgbuild_writes_whole_recipe() -> None:
    out = io.StringIO()
    write_pkgbuild(_data(), out)
    assert out.getvalue() == render_pkgbuild(_data())
    assert out.getvalue().endswith("}\n")


def test_nothing_written_on_render_failure() -> None:
    out = io.StringIO()
    with pytest.raises(RenderError):
        write_pkgbuild(_data(binname=""), out)
    assert out.getvalue() == ""
