"""Edit distance primitives shared by the scorers."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Hashable, List, Sequence, Tuple


class Step(IntEnum):
    """Backtrace pointer stored for every cell of the table."""

    DIAGONAL = 0  # match or substitution
    UP = 1  # deletion from the first sequence
    LEFT = 2  # insertion from the second sequence


@dataclass(frozen=True)
class Alignment:
    """Distance plus the pointer buffer needed to rebuild one optimal path.

    ``pointers`` is a flat buffer of ``(rows + 1) * (cols + 1)`` steps addressed
    as ``i * (cols + 1) + j``.
    """

    distance: int
    rows: int
    cols: int
    pointers: Tuple[Step, ...]

    def step_at(self, i: int, j: int) -> Step:
        return self.pointers[i * (self.cols + 1) + j]

    def path(self) -> List[Tuple[Step, int, int]]:
        """Walk the pointers from the bottom-right corner back to the origin.

        Returns ``(step, i, j)`` triples in left-to-right order, where ``i`` and
        ``j`` are the table coordinates the step *leaves*, so the tokens involved
        are ``a[i - 1]`` and/or ``b[j - 1]``.
        """

        steps: List[Tuple[Step, int, int]] = []
        i, j = self.rows, self.cols
        while i > 0 or j > 0:
            step = self.step_at(i, j)
            steps.append((step, i, j))
            if step is Step.DIAGONAL:
                i -= 1
                j -= 1
            elif step is Step.LEFT:
                j -= 1
            else:
                i -= 1
        steps.reverse()
        return steps


def edit_distance(a: Sequence[Hashable], b: Sequence[Hashable]) -> int:
    """Uniform-cost Levenshtein distance between two token sequences.

    Works on strings (character tokens) and on lists of words or marks alike.
    """

    m, n = len(a), len(b)
    if m == 0:
        return n
    if n == 0:
        return m

    width = n + 1
    dp = [0] * ((m + 1) * width)
    for j in range(width):
        dp[j] = j
    for i in range(1, m + 1):
        row = i * width
        prev = row - width
        dp[row] = i
        token = a[i - 1]
        for j in range(1, width):
            cost = 0 if token == b[j - 1] else 1
            dp[row + j] = min(
                dp[prev + j] + 1,
                dp[row + j - 1] + 1,
                dp[prev + j - 1] + cost,
            )
    return dp[m * width + n]


def align(a: Sequence[Hashable], b: Sequence[Hashable]) -> Alignment:
    """Compute the distance together with backtrace pointers.

    When costs tie the diagonal wins, then the vertical step (deletion), then
    the horizontal step (insertion). Column 0 always points up and row 0
    always points left, so an empty side degenerates to pure deletions or
    insertions.
    """

    m, n = len(a), len(b)
    width = n + 1
    dp = [0] * ((m + 1) * width)
    pointers = [Step.DIAGONAL] * ((m + 1) * width)

    for j in range(1, width):
        dp[j] = j
        pointers[j] = Step.LEFT
    for i in range(1, m + 1):
        dp[i * width] = i
        pointers[i * width] = Step.UP

    for i in range(1, m + 1):
        row = i * width
        prev = row - width
        token = a[i - 1]
        for j in range(1, width):
            cost = 0 if token == b[j - 1] else 1
            sub = dp[prev + j - 1] + cost
            dele = dp[prev + j] + 1
            ins = dp[row + j - 1] + 1
            if sub <= dele and sub <= ins:
                dp[row + j] = sub
                pointers[row + j] = Step.DIAGONAL
            elif dele <= ins:
                dp[row + j] = dele
                pointers[row + j] = Step.UP
            else:
                dp[row + j] = ins
                pointers[row + j] = Step.LEFT

    return Alignment(distance=dp[m * width + n], rows=m, cols=n, pointers=tuple(pointers))
