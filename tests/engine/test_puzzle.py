from __future__ import annotations

import pytest

from tumblestone.engine.point import Point
from tumblestone.engine.puzzle import Puzzle
from conftest import SURVIVOR_TSB


SOLUTION = [Point(0, 1), Point(1, 1), Point(2, 2), Point(0, 0), Point(2, 1), Point(2, 0)]


def test_play_rejects_moves_outside_frontier() -> None:
    p = Puzzle.from_tsb(SURVIVOR_TSB)
    with pytest.raises(ValueError):
        p.play(Point(2, 0))
    assert p.history == []


def test_undo_with_empty_history_raises() -> None:
    p = Puzzle.from_tsb(SURVIVOR_TSB)
    with pytest.raises(ValueError):
        p.undo()


def test_play_and_undo_track_triplet_state() -> None:
    p = Puzzle.from_tsb(SURVIVOR_TSB)
    p.play(Point(0, 1))
    assert p.state.count == 1
    assert p.legal_moves() == [Point(1, 1), Point(2, 2)]
    p.undo()
    assert p.state.count == 0
    assert p.move_history() == []
    assert p.board.turn == 0


def test_solve_then_step_to_the_end() -> None:
    p = Puzzle.from_tsb(SURVIVOR_TSB)
    res = p.solve()
    assert res.moves == SOLUTION
    for expected in SOLUTION:
        assert p.next_planned() == expected
        assert p.step() == expected
    assert p.solved()
    assert p.next_planned() is None
    with pytest.raises(ValueError):
        p.step()


def test_plan_is_dropped_when_play_diverges() -> None:
    p = Puzzle.from_tsb(SURVIVOR_TSB)
    p.solve()
    p.play(Point(1, 1))
    assert p.next_planned() is None
    p.undo()
    assert p.next_planned() == Point(0, 1)


def test_solve_from_the_middle_of_a_triplet() -> None:
    p = Puzzle.from_tsb(SURVIVOR_TSB)
    p.play(Point(0, 1))
    res = p.solve()
    assert res.moves == SOLUTION[1:]
    assert p.move_history() == ["0,1"]
    assert p.next_planned() == Point(1, 1)


def test_tsb_round_trip_keeps_remaining_stones() -> None:
    p = Puzzle.from_tsb(SURVIVOR_TSB)
    p.play(Point(0, 1))
    again = Puzzle.from_tsb(p.to_tsb())
    assert again.board.removable_stones() == p.board.removable_stones()


def test_tsb_reloads_after_wild_opens_a_triplet() -> None:
    p = Puzzle.from_tsb("width = 3\nwild = a\n---\n* a a\n")
    p.play(Point(0, 0))
    text = p.to_tsb()
    assert "wild" not in text
    again = Puzzle.from_tsb(text)
    assert again.board.wild_colors == 0
    assert again.board.removable_stones() == 2


def test_unclaimed_wild_color_stays_in_the_mask() -> None:
    p = Puzzle.from_tsb("width = 3\nwild = a\n---\n* b b\n")
    for x in range(3):
        p.play(Point(x, 0))
    assert p.solved()
    assert p.board.wild_glyphs() == "a"
    assert Puzzle.from_tsb(p.to_tsb()).board.wild_colors == 0
