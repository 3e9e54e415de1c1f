from __future__ import annotations

import pytest

from genpkgbuild.config import Config, default_config_path, load_config
from genpkgbuild.errors import ConfigError


def test_defaults_without_file() -> None:
    assert load_config() == Config(output="PKGBUILD", depends=[], timeout=30.0)


def test_default_path_follows_xdg(tmp_path) -> None:
    assert default_config_path() == tmp_path / "xdg" / "genpkgbuild" / "config.yaml"


def test_default_file_is_loaded(tmp_path) -> None:
    path = tmp_path / "xdg" / "genpkgbuild" / "config.yaml"
    path.parent.mkdir(parents=True)
    path.write_text("output: recipe\ndepends: glibc  git\ntimeout: 5\n", encoding="utf-8")

    assert load_config() == Config(output="recipe", depends=["glibc", "git"], timeout=5.0)


def test_env_var_points_at_file(tmp_path, monkeypatch) -> None:
    path = tmp_path / "custom.yaml"
    path.write_text("depends:\n  - glibc\n", encoding="utf-8")
    monkeypatch.setenv("GENPKGBUILD_CONFIG", str(path))

    assert load_config().depends == ["glibc"]


def test_explicit_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path / "missing.yaml")


def test_empty_file_gives_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == Config()


@pytest.mark.parametrize(
    "body, message",
    [
        ("- just\n- a list\n", "mapping"),
        ("depends: 3\n", "depends"),
        ("timeout: -1\n", "timeout"),
        ("timeout: fast\n", "timeout"),
        ("output: [unclosed\n", "Could not read"),
    ],
)
def test_invalid_files(tmp_path, body: str, message: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_config(path)
