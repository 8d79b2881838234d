"""GitHub collaborator: changed files, the Cerebrus comment, dispatch events."""

from cerebrus.github.client import Comment, GitHubClient

__all__ = ["Comment", "GitHubClient"]
