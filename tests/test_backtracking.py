"""Tests for N-Queens and the Sudoku solver."""

import pytest

from algorithms.backtracking import (
    PUZZLES,
    find_conflict,
    is_solved,
    is_valid_placement,
    n_queens,
    puzzle,
    sudoku_solver,
)
from algorithms.errors import RunCancelled
from engine.controls import CancelToken
from conftest import drain


def queens_are_safe(board):
    queens = [(r, c) for r, row in enumerate(board) for c, v in enumerate(row) if v]
    for i, (r1, c1) in enumerate(queens):
        for r2, c2 in queens[i + 1:]:
            if r1 == r2 or c1 == c2 or abs(r1 - r2) == abs(c1 - c2):
                return False
    return True


class TestNQueens:
    """All-solutions N-Queens."""

    @pytest.mark.parametrize("n,count", [(1, 1), (2, 0), (3, 0), (4, 2), (5, 10), (6, 4)])
    def test_solution_counts(self, n, count):
        """Known solution counts for small boards."""
        _, result = drain(n_queens(n))
        assert len(result.solutions) == count

    def test_solutions_are_valid(self):
        """Every recorded solution has n mutually safe queens."""
        _, result = drain(n_queens(5))
        for board in result.solutions:
            assert sum(map(sum, board)) == 5
            assert queens_are_safe(board)

    def test_four_queens_solutions(self):
        """The two 4-queens boards, in discovery order."""
        _, result = drain(n_queens(4))
        cols = [tuple(row.index(1) for row in board) for board in result.solutions]
        assert cols == [(1, 3, 0, 2), (2, 0, 3, 1)]

    def test_board_cleared_at_end(self):
        """Backtracking undoes every placement."""
        _, result = drain(n_queens(4))
        assert sum(map(sum, result.board)) == 0

    def test_actions(self):
        """Snapshots use the place / reject / remove / solution vocabulary."""
        steps, _ = drain(n_queens(4))
        assert steps[0].action == "init"
        assert {s.action for s in steps[1:]} == {"place", "reject", "remove", "solution"}
        assert all(s.delay_factor == 0.5 for s in steps if s.action in ("reject", "remove"))

    def test_solutions_accumulate(self):
        """A snapshot's solution list never shrinks."""
        steps, _ = drain(n_queens(4))
        counts = [len(s.solutions) for s in steps]
        assert counts == sorted(counts)

    def test_cancellation_stops_search(self):
        """Cancelling after the first solution records no further solutions."""
        token = CancelToken()
        gen = n_queens(6, cancel_token=token)
        seen = []
        with pytest.raises(RunCancelled):
            for step in gen:
                seen.append(step)
                if step.action == "solution":
                    token.cancel()
        assert [s.action for s in seen].count("solution") == 1
        assert len(seen[-1].solutions) == 1


class TestSudoku:
    """Sudoku backtracking."""

    def test_solves_easy_puzzle(self):
        """The easy puzzle is solved without touching given cells."""
        board = puzzle("easy")
        _, result = drain(sudoku_solver(board))
        assert result.solved
        assert is_solved(result.board)
        for r in range(9):
            for c in range(9):
                if board[r][c]:
                    assert result.board[r][c] == board[r][c]

    def test_stops_at_first_solution(self):
        """Exactly one solution is reported, on the final snapshot."""
        steps, result = drain(sudoku_solver(puzzle("easy")))
        assert len(result.solutions) == 1
        assert steps[-1].action == "solution"

    def test_fixed_mask_in_snapshots(self):
        """Snapshots carry the fixed-cell mask."""
        steps, _ = drain(sudoku_solver(puzzle("easy")))
        assert steps[0].fixed[0][0] is True
        assert steps[0].fixed[0][2] is False

    def test_unsolvable_terminates(self):
        """A board with no candidate for an empty cell ends unsolved."""
        board = [[0] * 9 for _ in range(9)]
        board[0] = [0, 1, 2, 3, 4, 5, 6, 7, 8]
        board[1][0] = 9
        steps, result = drain(sudoku_solver(board))
        assert not result.solved
        assert result.solutions == ()
        assert [s.action for s in steps] == ["init"]

    def test_conflicting_givens(self):
        """Duplicate givens produce a single conflict snapshot."""
        board = [[0] * 9 for _ in range(9)]
        board[0][0] = board[0][5] = 5
        steps, result = drain(sudoku_solver(board))
        assert steps[-1].action == "conflict"
        assert steps[-1].cursor == (0, 0)
        assert not result.solved

    def test_cancellation(self):
        """A cancelled solve raises RunCancelled before the next candidate."""
        token = CancelToken()
        gen = sudoku_solver(puzzle("medium"), cancel_token=token)
        next(gen)
        token.cancel()
        with pytest.raises(RunCancelled):
            next(gen)

    def test_helpers(self):
        """is_valid_placement and find_conflict check row, column and box."""
        grid = [list(row) for row in PUZZLES["easy"]]
        assert not is_valid_placement(grid, 0, 2, 5)     # row
        assert not is_valid_placement(grid, 0, 2, 9)     # box
        assert is_valid_placement(grid, 0, 2, 4)
        assert find_conflict(grid) is None

    def test_puzzle_returns_copy(self):
        """puzzle() never hands out the shared template."""
        board = puzzle("easy")
        board[0][0] = 0
        assert PUZZLES["easy"][0][0] == 5
