"""
backtracking.py — N-Queens & Sudoku
====================================
Depth-first search with undo.  Both generators recurse with `yield from`
(depth ≤ n rows / ≤ 81 cells), yielding a BoardStep at every decision
point, which is what makes the recorded step log replayable.

Cancellation is cooperative: `check_cancelled(cancel_token)` runs before
every candidate placement and raises RunCancelled, unwinding the whole
search before anything further is recorded.

Sudoku cells carry an explicit fixed flag (`BoardStep.fixed`): a given
cell is never overwritten, and 0 means empty.
"""

from dataclasses import dataclass
from typing import Generator, List, Optional, Sequence, Set, Tuple

from algorithms.step import BoardStep, check_cancelled


Board = Tuple[Tuple[int, ...], ...]

MAX_QUEENS = 12


@dataclass(frozen=True)
class BacktrackResult:
    solutions: Tuple[Board, ...]
    board:     Board

    @property
    def solved(self) -> bool:
        return bool(self.solutions)


def _freeze(board: List[List[int]]) -> Board:
    return tuple(tuple(row) for row in board)


# ---------------------------------------------------------------------------
# N-Queens
# ---------------------------------------------------------------------------
def n_queens(n: int, cancel_token=None) -> Generator[BoardStep, None, BacktrackResult]:
    """
    Place queens row by row and collect EVERY solution.

    A column is a candidate iff no queen already shares its column or
    either diagonal; sets of used columns / diagonals make that O(1).
    """
    board = [[0] * n for _ in range(n)]
    cols:  Set[int] = set()
    diag1: Set[int] = set()   # row - col
    diag2: Set[int] = set()   # row + col
    state = {"solutions": ()}

    def place(row: int) -> Generator[BoardStep, None, None]:
        if row == n:
            state["solutions"] = state["solutions"] + (_freeze(board),)
            yield BoardStep(_freeze(board), (), None, "solution", state["solutions"])
            return

        for col in range(n):
            check_cancelled(cancel_token)
            if col in cols or (row - col) in diag1 or (row + col) in diag2:
                board[row][col] = 1
                yield BoardStep(_freeze(board), (), (row, col), "reject", state["solutions"], 0.5)
                board[row][col] = 0
                continue

            board[row][col] = 1
            cols.add(col)
            diag1.add(row - col)
            diag2.add(row + col)
            yield BoardStep(_freeze(board), (), (row, col), "place", state["solutions"])

            yield from place(row + 1)

            board[row][col] = 0
            cols.discard(col)
            diag1.discard(row - col)
            diag2.discard(row + col)
            yield BoardStep(_freeze(board), (), (row, col), "remove", state["solutions"], 0.5)

    yield BoardStep(_freeze(board), (), None, "init")
    yield from place(0)
    return BacktrackResult(state["solutions"], _freeze(board))


# ---------------------------------------------------------------------------
# Sudoku
# ---------------------------------------------------------------------------
def sudoku_solver(
    board: Sequence[Sequence[int]],
    fixed: Optional[Sequence[Sequence[bool]]] = None,
    cancel_token=None,
) -> Generator[BoardStep, None, BacktrackResult]:
    """
    Row-major scan for the next empty cell, try 1–9, recurse, and reset
    the cell on failure.  Stops at the FIRST full solution.

    Args:
        board : 9×9 values, 0 = empty.
        fixed : 9×9 flags for given cells; defaults to "every non-zero cell".
    """
    grid = [list(row) for row in board]
    if fixed is None:
        fixed = [[v != 0 for v in row] for row in grid]
    mask = tuple(tuple(bool(f) for f in row) for row in fixed)

    yield BoardStep(_freeze(grid), mask, None, "init")

    clash = find_conflict(grid)
    if clash is not None:
        yield BoardStep(_freeze(grid), mask, clash, "conflict")
        return BacktrackResult((), _freeze(grid))

    empties = [(r, c) for r in range(9) for c in range(9) if grid[r][c] == 0 and not mask[r][c]]
    found = []

    def solve(k: int) -> Generator[BoardStep, None, bool]:
        if k == len(empties):
            found.append(_freeze(grid))
            yield BoardStep(found[0], mask, None, "solution", tuple(found))
            return True

        r, c = empties[k]
        for digit in range(1, 10):
            check_cancelled(cancel_token)
            if not is_valid_placement(grid, r, c, digit):
                continue
            grid[r][c] = digit
            yield BoardStep(_freeze(grid), mask, (r, c), "place")
            if (yield from solve(k + 1)):
                return True
            grid[r][c] = 0
            yield BoardStep(_freeze(grid), mask, (r, c), "remove", (), 0.5)
        return False

    yield from solve(0)
    return BacktrackResult(tuple(found), found[0] if found else _freeze(grid))


def is_valid_placement(grid: List[List[int]], row: int, col: int, digit: int) -> bool:
    """No duplicate of `digit` in the row, the column or the 3×3 box."""
    if digit in grid[row]:
        return False
    if any(grid[r][col] == digit for r in range(9)):
        return False
    br, bc = 3 * (row // 3), 3 * (col // 3)
    return all(grid[r][c] != digit for r in range(br, br + 3) for c in range(bc, bc + 3))


def find_conflict(grid: List[List[int]]) -> Optional[Tuple[int, int]]:
    """First given cell that duplicates another in its row, column or box."""
    for r in range(9):
        for c in range(9):
            v = grid[r][c]
            if v == 0:
                continue
            grid[r][c] = 0
            ok = is_valid_placement(grid, r, c, v)
            grid[r][c] = v
            if not ok:
                return (r, c)
    return None


def is_solved(grid: Sequence[Sequence[int]]) -> bool:
    """Full board with every row, column and box a permutation of 1–9."""
    digits = set(range(1, 10))
    rows  = [set(row) for row in grid]
    cols  = [{grid[r][c] for r in range(9)} for c in range(9)]
    boxes = [
        {grid[r][c] for r in range(br, br + 3) for c in range(bc, bc + 3)}
        for br in (0, 3, 6) for bc in (0, 3, 6)
    ]
    return all(group == digits for group in rows + cols + boxes)


# ---------------------------------------------------------------------------
# Predefined puzzles
# ---------------------------------------------------------------------------
PUZZLES = {
    "easy": [
        [5, 3, 0, 0, 7, 0, 0, 0, 0],
        [6, 0, 0, 1, 9, 5, 0, 0, 0],
        [0, 9, 8, 0, 0, 0, 0, 6, 0],
        [8, 0, 0, 0, 6, 0, 0, 0, 3],
        [4, 0, 0, 8, 0, 3, 0, 0, 1],
        [7, 0, 0, 0, 2, 0, 0, 0, 6],
        [0, 6, 0, 0, 0, 0, 2, 8, 0],
        [0, 0, 0, 4, 1, 9, 0, 0, 5],
        [0, 0, 0, 0, 8, 0, 0, 7, 9],
    ],
    "medium": [
        [0, 0, 0, 2, 6, 0, 7, 0, 1],
        [6, 8, 0, 0, 7, 0, 0, 9, 0],
        [1, 9, 0, 0, 0, 4, 5, 0, 0],
        [8, 2, 0, 1, 0, 0, 0, 4, 0],
        [0, 0, 4, 6, 0, 2, 9, 0, 0],
        [0, 5, 0, 0, 0, 3, 0, 2, 8],
        [0, 0, 9, 3, 0, 0, 0, 7, 4],
        [0, 4, 0, 0, 5, 0, 0, 3, 6],
        [7, 0, 3, 0, 1, 8, 0, 0, 0],
    ],
    "hard": [
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 3, 5, 0, 0, 0],
        [0, 0, 0, 6, 0, 0, 0, 0, 3],
        [0, 7, 0, 0, 9, 0, 2, 0, 0],
        [0, 5, 0, 0, 0, 0, 0, 4, 0],
        [0, 0, 3, 0, 2, 0, 0, 5, 0],
        [9, 0, 0, 0, 0, 4, 0, 0, 0],
        [0, 0, 0, 1, 8, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
    ],
}


def puzzle(difficulty: str = "medium") -> List[List[int]]:
    """A fresh copy of a predefined puzzle."""
    return [list(row) for row in PUZZLES[difficulty]]
