"""Line-level diff between two letter texts.

Uses the classic dynamic-programming longest common subsequence over lines.
Time and memory are O(m*n) in the line counts, which is fine for letters
(hundreds of lines) but not for large documents.

Texts are split on ``"\\n"`` without special cases, so an empty text is one
empty line and a trailing newline adds an empty last line. As a result
``diff("", "hello")`` reports one addition and one deletion, and
``diff("a\\n", "a")`` reports the trailing empty line as a deletion.
"""

from dataclasses import dataclass
from enum import StrEnum


class DiffLineKind(StrEnum):
    """Tag of a diff line."""

    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffLine:
    """One line of a diff. Line numbers are 1-based."""

    kind: DiffLineKind
    content: str
    old_line_number: int | None = None
    new_line_number: int | None = None


@dataclass(frozen=True)
class DiffStats:
    """Counts of added and removed lines."""

    additions: int
    deletions: int


@dataclass(frozen=True)
class SideBySideRow:
    """Aligned row for a two-column comparison view."""

    left: DiffLine | None
    right: DiffLine | None


def split_lines(text: str) -> list[str]:
    """Split on newlines; an empty text is a single empty line."""
    return text.split("\n")


def _lcs_table(old: list[str], new: list[str]) -> list[list[int]]:
    m, n = len(old), len(new)
    table = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if old[i - 1] == new[j - 1]:
                table[i][j] = table[i - 1][j - 1] + 1
            else:
                table[i][j] = max(table[i - 1][j], table[i][j - 1])
    return table


def diff(old_text: str, new_text: str) -> list[DiffLine]:
    """Compute the line diff turning ``old_text`` into ``new_text``.

    On a mismatch the backtrack steps through the new text (``added``) when
    ``lcs[i][j-1] >= lcs[i-1][j]``; after reversal this places removals before
    additions when both directions tie. Output is deterministic.
    """
    old = split_lines(old_text)
    new = split_lines(new_text)
    lcs = _lcs_table(old, new)

    stack: list[DiffLine] = []
    i, j = len(old), len(new)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and old[i - 1] == new[j - 1]:
            stack.append(
                DiffLine(
                    kind=DiffLineKind.UNCHANGED,
                    content=old[i - 1],
                    old_line_number=i,
                    new_line_number=j,
                )
            )
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or lcs[i][j - 1] >= lcs[i - 1][j]):
            stack.append(DiffLine(kind=DiffLineKind.ADDED, content=new[j - 1], new_line_number=j))
            j -= 1
        else:
            stack.append(DiffLine(kind=DiffLineKind.REMOVED, content=old[i - 1], old_line_number=i))
            i -= 1
    stack.reverse()
    return stack


def stats(lines: list[DiffLine]) -> DiffStats:
    """Count added and removed lines."""
    additions = sum(1 for line in lines if line.kind == DiffLineKind.ADDED)
    deletions = sum(1 for line in lines if line.kind == DiffLineKind.REMOVED)
    return DiffStats(additions=additions, deletions=deletions)


def similarity(lines: list[DiffLine]) -> int:
    """Share of unchanged lines as a rounded percentage of the longer text.

    Works from an existing diff so the LCS table is not built twice.
    """
    common = sum(1 for line in lines if line.kind == DiffLineKind.UNCHANGED)
    counts = stats(lines)
    longest = max(common + counts.deletions, common + counts.additions)
    if longest == 0:
        return 100
    return round(common / longest * 100)


def side_by_side(lines: list[DiffLine]) -> list[SideBySideRow]:
    """Pair removed/added runs into aligned rows; unchanged lines fill both columns."""
    rows: list[SideBySideRow] = []
    removed: list[DiffLine] = []
    added: list[DiffLine] = []

    def flush() -> None:
        for k in range(max(len(removed), len(added))):
            rows.append(
                SideBySideRow(
                    left=removed[k] if k < len(removed) else None,
                    right=added[k] if k < len(added) else None,
                )
            )
        removed.clear()
        added.clear()

    for line in lines:
        if line.kind == DiffLineKind.REMOVED:
            if added:
                flush()
            removed.append(line)
        elif line.kind == DiffLineKind.ADDED:
            added.append(line)
        else:
            flush()
            rows.append(SideBySideRow(left=line, right=line))
    flush()
    return rows
