"""Build ``empty.html`` for a PR and for its merge base, and compare sizes.

The PR head and the merge base with the target branch are checked out in two
copies of one clone and built concurrently. Results travel to the commenting
workflow as a ``repository_dispatch`` event; the job that builds PR code holds
no write token.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import tempfile
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from pathlib import Path

from cerebrus.exceptions import BuildSizeError

logger = logging.getLogger("cerebrus.buildsize")

EVENT_TYPE = "pr_build_size_report"
BUILD_OUTPUT = "output/empty.html"

_SAFE_REF_RE = re.compile(r"[a-zA-Z0-9/_\-.]+")

Runner = Callable[..., subprocess.CompletedProcess]


@dataclass(frozen=True)
class BuildSizes:
    pr_size: int
    base_size: int
    merge_base: str

    def to_dict(self) -> dict:
        return asdict(self)


def is_safe_git_ref(ref: object) -> bool:
    return bool(_SAFE_REF_RE.fullmatch(str(ref)))


class BuildSizeComparer:
    """Runs the git and node commands of one comparison."""

    def __init__(self, runner: Runner = subprocess.run, build_output: str = BUILD_OUTPUT) -> None:
        self._run = runner
        self.build_output = build_output

    def run(self, args: list[str], cwd: Path | None = None, capture: bool = False) -> str:
        command = " ".join(args)
        logger.info("> Running: %s (cwd: %s)", command, cwd)
        try:
            result = self._run(args, cwd=cwd, capture_output=capture, text=True)
        except (OSError, subprocess.SubprocessError) as e:
            raise BuildSizeError(f"Command failed:\n  {command}\n  cwd: {cwd}\n  {e}") from e
        if result.returncode != 0:
            detail = (result.stderr or "").strip() if capture else f"exit status {result.returncode}"
            raise BuildSizeError(f"Command failed:\n  {command}\n  cwd: {cwd}\n  {detail}")
        return (result.stdout or "").strip() if capture else ""

    def merge_base(self, repo_url: str, base_ref: str, pr_number: int, work_dir: Path) -> tuple[str, str]:
        """Clone without checkout and return ``(merge_base_sha, pr_branch)``."""
        pr_branch = f"pr-{pr_number}"
        self.run(["git", "clone", "-q", "--no-checkout", repo_url, str(work_dir)])
        self.run(["git", "fetch", "-q", "origin", base_ref], cwd=work_dir)
        self.run(["git", "fetch", "-q", "origin", f"pull/{pr_number}/head:{pr_branch}"], cwd=work_dir)
        sha = self.run(["git", "merge-base", f"origin/{base_ref}", pr_branch], cwd=work_dir, capture=True)
        logger.info("Merge base between origin/%s and %s is %s", base_ref, pr_branch, sha)
        return sha, pr_branch

    def checkout_and_build(self, work_dir: Path, ref: str) -> int:
        self.run(["git", "-c", "advice.detachedHead=false", "checkout", ref], cwd=work_dir)
        self.run(
            ["node", "tiddlywiki.js", "./editions/empty", "--output", "output", "--build", "empty"],
            cwd=work_dir,
        )
        output = work_dir / self.build_output
        if not output.is_file():
            raise BuildSizeError(f"Build output file not found: {output}")
        size = output.stat().st_size
        logger.info("Measured size of %s: %d bytes", output, size)
        return size

    def compare(self, repo_url: str, pr_number: int, base_ref: str) -> BuildSizes:
        if not repo_url or not pr_number:
            raise BuildSizeError("Missing required parameters: repo_url, pr_number")
        if not is_safe_git_ref(pr_number):
            raise BuildSizeError(f"Unsafe PR ref: {pr_number}")
        if not is_safe_git_ref(base_ref):
            raise BuildSizeError(f"Unsafe base ref: {base_ref}")

        root = Path(tempfile.mkdtemp(prefix="compare-size-"))
        logger.info("> Created temp root: %s", root)
        try:
            base_dir = root / "merge-base"
            pr_dir = root / "pr"
            sha, pr_branch = self.merge_base(repo_url, base_ref, pr_number, base_dir)
            shutil.copytree(base_dir, pr_dir, symlinks=True)

            with ThreadPoolExecutor(max_workers=2) as pool:
                pr_future = pool.submit(self.checkout_and_build, pr_dir, pr_branch)
                base_future = pool.submit(self.checkout_and_build, base_dir, sha)
                pr_size = pr_future.result()
                base_size = base_future.result()

            return BuildSizes(pr_size=pr_size, base_size=base_size, merge_base=sha)
        finally:
            shutil.rmtree(root, ignore_errors=True)
            logger.info("> Cleaned up: %s", root)


def compare_build_size(
    repo_url: str,
    pr_number: int,
    base_ref: str,
    runner: Runner = subprocess.run,
    build_output: str = BUILD_OUTPUT,
) -> BuildSizes:
    """Sizes of ``empty.html`` built from the PR head and from its merge base."""
    return BuildSizeComparer(runner, build_output).compare(repo_url, pr_number, base_ref)
