"""The canonical rule set.

Order is significant: rules run in ascending id order and a matched rule
with ``stop_processing`` ends the run. Ids are stable and referenced by tests
and by the rule table printed in dry-run mode.
"""

from __future__ import annotations

from collections.abc import Sequence

from cerebrus.rules.models import Rule, Severity

DOCS_BRANCH = "tiddlywiki-com"
CODE_BRANCH = "master"
EDITIONS_PREFIX = "editions/"
LICENSES_PREFIX = "licenses/"

# Exact path strings; "/readme.md" and "readme.md" are different entries.
PROTECTED_FILES = frozenset({
    "readme.md",
    "/readme.md",
    "bin/readme.md",
    "/bin/readme.md",
    "contributing.md",
    "/contributing.md",
    "license",
    "/license",
})


def is_solo_license_change(changed_files: Sequence[str]) -> bool:
    """A PR touching exactly one file, under licenses/ (a CLA signature)."""
    return len(changed_files) == 1 and changed_files[0].startswith(LICENSES_PREFIX)


def _only_editions(changed_files: Sequence[str]) -> bool:
    return all(f.startswith(EDITIONS_PREFIX) for f in changed_files)


def docs_branch_outside_editions(base_branch: str, changed_files: Sequence[str]) -> bool:
    if base_branch != DOCS_BRANCH or is_solo_license_change(changed_files):
        return False
    return not _only_editions(changed_files)


def code_branch_docs_only(base_branch: str, changed_files: Sequence[str]) -> bool:
    if base_branch != CODE_BRANCH:
        return False
    return _only_editions(changed_files)


def license_outside_solo_cla(base_branch: str, changed_files: Sequence[str]) -> bool:
    if not any(f.startswith(LICENSES_PREFIX) for f in changed_files):
        return False
    return base_branch != DOCS_BRANCH or len(changed_files) > 1


def touches_generated_files(base_branch: str, changed_files: Sequence[str]) -> bool:
    return any(f in PROTECTED_FILES for f in changed_files)


DEFAULT_RULES: list[Rule] = [
    Rule(
        id=1,
        name="tiddlywiki-com: enforce editions only",
        condition=docs_branch_outside_editions,
        message=(
            "> [!CAUTION]\n"
            "> PRs targeting the `tiddlywiki-com` branch may only change files "
            "inside the `editions/` folder.\n"
            "> Code changes must be submitted against the `master` branch."
        ),
        stop_processing=True,
        severity=Severity.ERROR,
    ),
    Rule(
        id=2,
        name="master: check docs only",
        condition=code_branch_docs_only,
        message=(
            "> [!TIP]\n"
            "> This PR only changes documentation inside `editions/`. "
            "Documentation improvements that apply to the current release should "
            "target the `tiddlywiki-com` branch so they go live straight away."
        ),
        severity=Severity.WARNING,
    ),
    Rule(
        id=3,
        name="cla: ensure only license files and branch is tiddlywiki-com",
        condition=license_outside_solo_cla,
        message=(
            "> [!WARNING]\n"
            "> Signing the Contributor License Agreement must be done in a PR that "
            "changes only the CLA file under `licenses/` and targets the "
            "`tiddlywiki-com` branch."
        ),
        stop_processing=True,
        severity=Severity.WARNING,
    ),
    Rule(
        id=4,
        name="auto-generated files check",
        condition=touches_generated_files,
        message=(
            "> [!CAUTION]\n"
            "> This PR edits files that are generated from tiddlers "
            "(`readme.md`, `bin/readme.md`, `contributing.md` or `license`). "
            "Please change the source tiddlers in `editions/` instead."
        ),
        severity=Severity.ERROR,
    ),
]
