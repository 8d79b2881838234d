"""Cerebrus - pull request checks for TiddlyWiki."""

__version__ = "0.2.0"
