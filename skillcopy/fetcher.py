"""Fetching install sources into a local directory."""

import shutil
import subprocess
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import httpx

from skillcopy.config import DEFAULT_TIMEOUT
from skillcopy.exceptions import RepoNotFoundError, SkillCopyError
from skillcopy.source import ParsedSource

GIT_CLONE_TIMEOUT = 300


def _download_and_extract_tarball(
    tarball_url: str, display_name: str, tmp_path: Path, timeout: float = DEFAULT_TIMEOUT
) -> Path:
    """Download and extract a GitHub tarball, returning the repo directory path."""
    tarball_path = tmp_path / "repo.tar.gz"

    try:
        with httpx.Client(follow_redirects=True, timeout=timeout) as client:
            response = client.get(tarball_url)
            if response.status_code == 404:
                raise RepoNotFoundError(f"Repository '{display_name}' not found on GitHub.")
            response.raise_for_status()
            tarball_path.write_bytes(response.content)
    except httpx.HTTPStatusError as e:
        raise SkillCopyError(f"Failed to download repository: {e}")
    except httpx.RequestError as e:
        raise SkillCopyError(f"Network error: {e}")

    extract_path = tmp_path / "extracted"
    try:
        with tarfile.open(tarball_path, "r:gz") as tar:
            tar.extractall(extract_path)
    except tarfile.TarError as e:
        raise SkillCopyError(f"Failed to extract repository archive: {e}")

    # GitHub archives contain a single top-level "<repo>-<ref>" directory
    children = [child for child in extract_path.iterdir() if child.is_dir()]
    if len(children) != 1:
        raise SkillCopyError(f"Unexpected archive layout for '{display_name}'")
    return children[0]


def _clone_repo(url: str, tmp_path: Path, ref: str | None = None) -> Path:
    """Shallow-clone a git repository, returning the checkout path."""
    checkout = tmp_path / "repo"
    cmd = ["git", "clone", "--depth", "1"]
    if ref:
        cmd += ["--branch", ref]
    cmd += [url, str(checkout)]

    try:
        subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=GIT_CLONE_TIMEOUT)
    except FileNotFoundError:
        raise SkillCopyError("git is not installed; it is required for non-GitHub sources")
    except subprocess.TimeoutExpired:
        raise SkillCopyError(f"Timed out cloning {url}")
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise RepoNotFoundError(f"Failed to clone {url}: {detail}")

    shutil.rmtree(checkout / ".git", ignore_errors=True)
    return checkout


@contextmanager
def fetched_source(
    source: ParsedSource, timeout: float = DEFAULT_TIMEOUT
) -> Generator[Path, None, None]:
    """
    Context manager that makes a source available as a local directory.

    GitHub sources are downloaded as a tarball, other git sources are cloned,
    and local sources are used in place. Temporary directories are removed
    on exit.

    Yields:
        Path to the source directory (the subpath, when one was given)

    Raises:
        RepoNotFoundError: If the repository or local path doesn't exist
        SkillCopyError: On download, clone, or extraction failures
    """
    if source.kind == "local":
        if source.local_path is None or not source.local_path.is_dir():
            raise RepoNotFoundError(f"Local source does not exist: {source.local_path}")
        yield source.local_path
        return

    with tempfile.TemporaryDirectory() as tmp_dir:
        tmp_path = Path(tmp_dir)
        if source.kind == "github":
            ref = source.ref or "HEAD"
            tarball_url = f"https://github.com/{source.owner}/{source.repo}/archive/{ref}.tar.gz"
            root = _download_and_extract_tarball(tarball_url, source.display, tmp_path, timeout)
        else:
            root = _clone_repo(source.url, tmp_path, source.ref)

        if source.subpath:
            root = root / source.subpath
            if not root.is_dir():
                raise RepoNotFoundError(
                    f"Path '{source.subpath}' not found in {source.display}"
                )
        yield root
