"""GitHub access through the ``gh`` CLI.

Every call shells out to ``gh api`` with ``GH_TOKEN`` set, which is what the
GitHub-hosted runners ship with. Failures are raised as ``GitHubError``; the
run has no way to recover from a failed API call.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from cerebrus.exceptions import GitHubError

logger = logging.getLogger("cerebrus.github")

Runner = Callable[..., subprocess.CompletedProcess]


@dataclass(frozen=True)
class Comment:
    """An issue comment on a pull request."""

    id: int
    body: str


class GitHubClient:
    """Minimal client for the endpoints Cerebrus needs."""

    def __init__(
        self,
        repo: str,
        token: str = "",
        runner: Runner = subprocess.run,
        timeout: int = 60,
    ) -> None:
        self.repo = repo
        self._token = token
        self._run = runner
        self._timeout = timeout

    def _api(self, *args: str, stdin: str | None = None) -> str:
        cmd = ["gh", "api", *args]
        env = dict(os.environ)
        if self._token:
            env["GH_TOKEN"] = self._token
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = self._run(
                cmd,
                input=stdin,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                env=env,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError) as e:
            raise GitHubError(f"gh api {args[-1] if args else ''} failed: {e}") from e
        if result.returncode != 0:
            raise GitHubError(
                f"gh api {' '.join(args)} exited with {result.returncode}: "
                f"{(result.stderr or '').strip()}"
            )
        return result.stdout

    def get_changed_files(self, pr_number: int) -> list[str]:
        """Paths of every file changed by the PR, across all pages."""
        out = self._api(
            "--paginate",
            f"repos/{self.repo}/pulls/{pr_number}/files",
            "--jq", ".[].filename",
        )
        return [line for line in out.splitlines() if line]

    def get_base_ref(self, pr_number: int) -> str:
        """The branch the PR targets."""
        out = self._api(f"repos/{self.repo}/pulls/{pr_number}", "--jq", ".base.ref")
        base_ref = out.strip()
        if not base_ref:
            raise GitHubError(f"Could not determine base branch of PR #{pr_number}")
        return base_ref

    def find_comment(self, pr_number: int, identifier: str) -> Comment | None:
        """The first PR comment whose body contains ``identifier``."""
        out = self._api(
            "--paginate",
            f"repos/{self.repo}/issues/{pr_number}/comments",
            "--jq", ".[] | {id, body}",
        )
        for line in out.splitlines():
            if not line.strip():
                continue
            data = json.loads(line)
            body = data.get("body") or ""
            if identifier in body:
                return Comment(id=int(data["id"]), body=body)
        return None

    def create_comment(self, pr_number: int, body: str) -> None:
        self._api(
            "--method", "POST",
            f"repos/{self.repo}/issues/{pr_number}/comments",
            "--input", "-",
            stdin=json.dumps({"body": body}),
        )

    def update_comment(self, comment_id: int, body: str) -> None:
        self._api(
            "--method", "PATCH",
            f"repos/{self.repo}/issues/comments/{comment_id}",
            "--input", "-",
            stdin=json.dumps({"body": body}),
        )

    def dispatch_event(self, event_type: str, payload: dict) -> None:
        """Send a repository_dispatch event."""
        self._api(
            "--method", "POST",
            f"repos/{self.repo}/dispatches",
            "--input", "-",
            stdin=json.dumps({"event_type": event_type, "client_payload": payload}),
        )
