"""
Tag version parsing for pinned references.

Only the pessimistic "same major.minor, newer-or-equal patch" rule is
supported; this is not a range solver.
"""

import re
from dataclasses import dataclass
from typing import Optional

VERSION_RE = re.compile(r"^(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?(?P<rest>.*)$")


@dataclass(frozen=True, order=True)
class TagVersion:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_tag(tag: str) -> Optional[TagVersion]:
    """
    Parse a tag such as ``v1.2.8`` or ``release-v1.2`` into a version.

    Everything up to the last ``v`` is dropped. Missing minor/patch parts
    default to 0. Returns None when no leading number is found.
    """
    if not tag:
        return None
    candidate = tag.split("v")[-1]
    match = VERSION_RE.match(candidate)
    if match is None:
        return None
    return TagVersion(
        major=int(match.group("major")),
        minor=int(match.group("minor") or 0),
        patch=int(match.group("patch") or 0),
    )


def pessimistic_greater_than(existing: TagVersion, candidate: TagVersion) -> bool:
    """True when existing satisfies candidate: same major.minor and patch >= candidate's."""
    return (
        existing.major == candidate.major
        and existing.minor == candidate.minor
        and existing.patch >= candidate.patch
    )


def tags_compatible(existing: str, candidate: str) -> bool:
    """
    Decide whether an already-resolved tag can stand in for a requested one.

    Unparseable tags are only compatible with themselves.
    """
    if existing == candidate:
        return True
    existing_version = parse_tag(existing)
    candidate_version = parse_tag(candidate)
    if existing_version is None or candidate_version is None:
        return False
    return pessimistic_greater_than(existing_version, candidate_version)
