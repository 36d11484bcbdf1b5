import difflib
import hashlib
from dataclasses import dataclass

CONTEXT_LINES = 3
DIFF_OLD_LABEL = "original"
DIFF_NEW_LABEL = "modified"


@dataclass(frozen=True)
class ChangeStats:
    added_lines: int
    deleted_lines: int
    changed_chars: int


def _normalize(content):
    return content or ""


def content_hash(content) -> str:
    """Lowercase hex SHA-256 of the content; None hashes like an empty string."""
    return hashlib.sha256(_normalize(content).encode("utf-8")).hexdigest()


def calculate_diff(old_content, new_content) -> str:
    """Unified diff from old to new, or "" when they are equal."""
    old, new = _normalize(old_content), _normalize(new_content)
    if old == new:
        return ""
    lines = difflib.unified_diff(
        old.splitlines(),
        new.splitlines(),
        fromfile=DIFF_OLD_LABEL,
        tofile=DIFF_NEW_LABEL,
        n=CONTEXT_LINES,
        lineterm="",
    )
    return "\n".join(lines)


def change_stats(old_content, new_content) -> ChangeStats:
    old, new = _normalize(old_content), _normalize(new_content)
    added = deleted = 0
    matcher = difflib.SequenceMatcher(None, old.splitlines(), new.splitlines(), autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag in ("replace", "delete"):
            deleted += i2 - i1
        if tag in ("replace", "insert"):
            added += j2 - j1

    # characters inserted, removed or substituted
    changed = 0
    chars = difflib.SequenceMatcher(None, old, new, autojunk=False)
    for tag, i1, i2, j1, j2 in chars.get_opcodes():
        if tag != "equal":
            changed += max(i2 - i1, j2 - j1)

    return ChangeStats(added_lines=added, deleted_lines=deleted, changed_chars=changed)
