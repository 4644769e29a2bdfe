"""Parsing of install source identifiers.

Supported forms:

| Form                     | Example                                              | Kind   |
|--------------------------|------------------------------------------------------|--------|
| Local path               | `./my-skills`, `/abs/path`, `~/skills`               | local  |
| GitHub shorthand         | `acme/skills`, `acme/skills/skills/code-review`      | github |
| GitHub URL               | `https://github.com/acme/skills/tree/main/skills/x`  | github |
| Other git URL            | `https://gitlab.com/acme/skills.git`, `git@host:a/b` | git    |
"""

import re
from dataclasses import dataclass
from pathlib import Path

from skillcopy.exceptions import SourceParseError

GITHUB_URL_PATTERN = re.compile(
    r"^https?://(?:www\.)?github\.com/"
    r"(?P<owner>[^/]+)/(?P<repo>[^/#?]+?)(?:\.git)?"
    r"(?:/tree/(?P<ref>[^/]+)(?:/(?P<subpath>.+?))?)?/?$"
)
SHORTHAND_PATTERN = re.compile(
    r"^(?P<owner>[A-Za-z0-9][A-Za-z0-9_.-]*)/(?P<repo>[A-Za-z0-9_.-]+)(?:/(?P<subpath>.+?))?/?$"
)
GIT_URL_PATTERN = re.compile(r"^(?:https?://|ssh://|git@)\S+$")


@dataclass(frozen=True)
class ParsedSource:
    """An install source, ready to be fetched.

    Attributes:
        kind: "github", "git", or "local"
        url: Canonical URL (clone URL for git sources, path for local ones)
        owner: GitHub owner, None for other kinds
        repo: GitHub repository name, None for other kinds
        ref: Branch or tag, None for the default branch
        subpath: Directory inside the source to search for skills
        local_path: Resolved path for local sources
    """

    kind: str
    url: str
    owner: str | None = None
    repo: str | None = None
    ref: str | None = None
    subpath: str | None = None
    local_path: Path | None = None

    @property
    def display(self) -> str:
        """Short form for messages and the lock file."""
        if self.kind == "github":
            return f"{self.owner}/{self.repo}"
        return self.url


def split_source(source: str, default_name: str) -> tuple[str, str]:
    """Split "repo@skill" into (install-from identifier, skill name filter).

    The trailing "@name" is only split off when it contains no "/" or ":",
    so that "git@host:owner/repo.git" stays intact.

    Examples:
        >>> split_source("acme/skills@code-review", "x")
        ('acme/skills', 'code-review')
        >>> split_source("https://github.com/acme/skills.git", "code-review")
        ('https://github.com/acme/skills.git', 'code-review')
    """
    repo_source, sep, name = source.rpartition("@")
    if sep and repo_source and name and "/" not in name and ":" not in name:
        return repo_source, name
    return source, default_name


def _is_local_path(ref: str) -> bool:
    """Check if a reference is a local path."""
    return ref.startswith(("./", "../", "/", "~")) or ref in (".", "..")


def parse_source(source: str, cwd: Path | None = None) -> ParsedSource:
    """Parse an install source identifier.

    Args:
        source: Identifier to parse
        cwd: Directory relative local paths are resolved against (defaults to cwd)

    Raises:
        SourceParseError: If the identifier matches no supported form
    """
    source = source.strip()
    if not source:
        raise SourceParseError("Source cannot be empty")

    base = cwd if cwd is not None else Path.cwd()

    if _is_local_path(source):
        path = Path(source).expanduser()
        if not path.is_absolute():
            path = base / path
        return ParsedSource(kind="local", url=str(path), local_path=path.resolve())

    match = GITHUB_URL_PATTERN.match(source)
    if match:
        owner, repo = match.group("owner"), match.group("repo")
        return ParsedSource(
            kind="github",
            url=f"https://github.com/{owner}/{repo}.git",
            owner=owner,
            repo=repo,
            ref=match.group("ref"),
            subpath=match.group("subpath"),
        )

    if GIT_URL_PATTERN.match(source):
        return ParsedSource(kind="git", url=source)

    match = SHORTHAND_PATTERN.match(source)
    if match:
        owner, repo = match.group("owner"), match.group("repo")
        return ParsedSource(
            kind="github",
            url=f"https://github.com/{owner}/{repo}.git",
            owner=owner,
            repo=repo,
            subpath=match.group("subpath"),
        )

    if (base / source).is_dir():
        path = (base / source).resolve()
        return ParsedSource(kind="local", url=str(path), local_path=path)

    raise SourceParseError(
        f"Invalid source: '{source}'. Expected a local path, <owner>/<repo>, or a git URL"
    )
