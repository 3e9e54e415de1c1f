"""
resolver.py

Responsibility: Map a Go import path to the repository that hosts it.

This module must be the only place that:
- Knows the static hosting rules (github.com, bitbucket.org, ...)
- Sends HTTP requests to discover repositories (`?go-get=1` meta tags, Bitbucket API)
- Decides whether the resolved VCS is supported

Everything else (cloning, prompting, rendering) consumes the resulting `RepoRoot`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

import requests
from bs4 import BeautifulSoup

from genpkgbuild import __version__
from genpkgbuild.errors import ResolutionError, UnsupportedVCS

logger = logging.getLogger(__name__)

SUPPORTED_VCS = "git"
KNOWN_VCS = ("bzr", "fossil", "git", "hg", "svn")

_ELEM = r"[A-Za-z0-9_.\-]+"

_GITHUB_RE = re.compile(rf"^(?P<root>github\.com/{_ELEM}/{_ELEM})(/{_ELEM})*$")
_BITBUCKET_RE = re.compile(rf"^(?P<root>bitbucket\.org/(?P<bitname>{_ELEM}/{_ELEM}))(/{_ELEM})*$")
_LAUNCHPAD_RE = re.compile(
    rf"^(?P<root>launchpad\.net/(({_ELEM})(/{_ELEM})?|~{_ELEM}/(\+junk|{_ELEM})/{_ELEM}))(/{_ELEM})*$"
)
_APACHE_RE = re.compile(rf"^(?P<root>git\.apache\.org/[a-z0-9_.\-]+\.git)(/{_ELEM})*$")
_GENERIC_RE = re.compile(
    r"^(?P<root>(?P<repo>([a-z0-9.\-]+\.)+[a-z0-9.\-]+(:[0-9]+)?(/~?[A-Za-z0-9_.\-]+)+?)"
    rf"\.(?P<vcs>{'|'.join(KNOWN_VCS)}))(/~?{_ELEM})*$"
)


@dataclass(frozen=True)
class RepoRoot:
    repo: str
    root: str
    vcs: str


@dataclass(frozen=True)
class _MetaImport:
    prefix: str
    vcs: str
    repo: str


def _check_no_vcs_suffix(root: str) -> None:
    for vcs in KNOWN_VCS:
        if root.endswith(f".{vcs}"):
            raise ResolutionError(f"invalid version control suffix in {root.split('/')[0]}/ path: {root}")


def _has_path_prefix(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def _parse_meta_imports(html: str) -> list[_MetaImport]:
    """
    Collect every `<meta name="go-import" content="prefix vcs repo">` in the page.
    Malformed entries (not exactly three fields) and module proxy entries
    (`mod`) are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")
    out: list[_MetaImport] = []
    for meta in soup.find_all("meta", attrs={"name": "go-import"}):
        fields = str(meta.get("content") or "").split()
        if len(fields) != 3 or fields[1] == "mod":
            continue
        out.append(_MetaImport(prefix=fields[0], vcs=fields[1], repo=fields[2]))
    return out


def _match_meta_import(import_path: str, imports: list[_MetaImport]) -> _MetaImport:
    matches = [mi for mi in imports if _has_path_prefix(import_path, mi.prefix)]
    if not matches:
        raise ResolutionError(f"no go-import meta tags found for {import_path}")
    if len({(mi.prefix, mi.vcs, mi.repo) for mi in matches}) > 1:
        found = ", ".join(mi.prefix for mi in matches)
        raise ResolutionError(f"multiple go-import meta tags match {import_path}: {found}")
    return matches[0]


class RepoResolver:
    def __init__(self, session: requests.Session | None = None, timeout: float = 30.0) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": f"genpkgbuild/{__version__}"}

    def _get(self, url: str, *, params: dict[str, str] | None = None) -> requests.Response:
        try:
            return self._session.get(url, params=params, headers=self._headers(), timeout=self._timeout)
        except requests.RequestException as e:
            raise ResolutionError(f"could not fetch {url}: {e}") from e

    def _fetch_meta_imports(self, import_path: str) -> list[_MetaImport]:
        url = f"https://{import_path}"
        logger.debug("fetching %s?go-get=1", url)
        r = self._get(url, params={"go-get": "1"})
        # Servers may answer go-get requests with an error status and still
        # carry the meta tags, so the body is parsed regardless.
        return _parse_meta_imports(r.text)

    def _bitbucket_vcs(self, bitname: str) -> str:
        url = f"https://api.bitbucket.org/2.0/repositories/{bitname}"
        r = self._get(url, params={"fields": "scm"})
        if r.status_code >= 400:
            raise ResolutionError(f"Bitbucket API error {r.status_code} for {bitname}")
        try:
            payload: Any = r.json()
        except ValueError as e:
            raise ResolutionError(f"unexpected Bitbucket API response for {bitname}") from e
        scm = payload.get("scm") if isinstance(payload, dict) else None
        if scm not in ("git", "hg"):
            raise ResolutionError(f"unable to detect version control system for bitbucket.org/{bitname}")
        return str(scm)

    def _static(self, import_path: str) -> RepoRoot | None:
        m = _GITHUB_RE.match(import_path)
        if m:
            root = m.group("root")
            _check_no_vcs_suffix(root)
            return RepoRoot(repo=f"https://{root}", root=root, vcs="git")

        m = _BITBUCKET_RE.match(import_path)
        if m:
            root = m.group("root")
            _check_no_vcs_suffix(root)
            return RepoRoot(repo=f"https://{root}", root=root, vcs=self._bitbucket_vcs(m.group("bitname")))

        m = _LAUNCHPAD_RE.match(import_path)
        if m:
            root = m.group("root")
            return RepoRoot(repo=f"https://{root}", root=root, vcs="bzr")

        m = _APACHE_RE.match(import_path)
        if m:
            root = m.group("root")
            return RepoRoot(repo=f"https://{root}", root=root, vcs="git")

        m = _GENERIC_RE.match(import_path)
        if m:
            root = m.group("root")
            return RepoRoot(repo=f"https://{root}", root=root, vcs=m.group("vcs"))

        return None

    def _dynamic(self, import_path: str) -> RepoRoot:
        mi = _match_meta_import(import_path, self._fetch_meta_imports(import_path))
        if mi.prefix != import_path:
            # The prefix page must declare the same repository.
            confirmed = _match_meta_import(mi.prefix, self._fetch_meta_imports(mi.prefix))
            if confirmed != mi:
                raise ResolutionError(
                    f"{import_path} declares {mi.prefix} {mi.vcs} {mi.repo} "
                    f"but {mi.prefix} declares {confirmed.prefix} {confirmed.vcs} {confirmed.repo}"
                )
        if "://" not in mi.repo:
            raise ResolutionError(f"{import_path}: invalid repo root {mi.repo!r}; no scheme")
        return RepoRoot(repo=mi.repo, root=mi.prefix, vcs=mi.vcs)

    def repo_root_for_import_path(self, import_path: str) -> RepoRoot:
        """
        Return the repository hosting import_path. Static hosting rules are tried
        first; anything else is discovered through `?go-get=1` meta tags.
        """
        if "://" in import_path:
            raise ResolutionError(f"import path should not include a scheme: {import_path}")
        host = import_path.split("/", 1)[0]
        if "." not in host:
            raise ResolutionError(f"unrecognized import path {import_path!r}")

        repo_root = self._static(import_path)
        if repo_root is None:
            repo_root = self._dynamic(import_path)
        logger.debug("resolved %s -> root=%s vcs=%s repo=%s", import_path, repo_root.root, repo_root.vcs, repo_root.repo)
        return repo_root


def resolve(import_path: str, *, resolver: RepoResolver | None = None) -> RepoRoot:
    """
    Resolve import_path and require it to be hosted in a git repository.
    """
    resolver = resolver or RepoResolver()
    try:
        repo_root = resolver.repo_root_for_import_path(import_path)
    except ResolutionError as e:
        raise ResolutionError(f"can't get root repo for the import path: {e}") from e
    if repo_root.vcs != SUPPORTED_VCS:
        raise UnsupportedVCS(repo_root.vcs)
    return repo_root
