from __future__ import annotations

from tumblestone.engine.board import Board
from tumblestone.engine.point import Point
from tumblestone.engine.stones import OrdinaryStone, WILD
from tumblestone.search.frontier import TripletState, frontier


def test_fresh_frontier_is_lowest_stone_per_column(survivor_board: Board) -> None:
    assert frontier(survivor_board, TripletState.fresh()) == [
        Point(0, 1),
        Point(1, 1),
        Point(2, 2),
    ]


def test_color_filter_keeps_blocking_stones_out() -> None:
    b = Board.from_tsb("width = 3\n---\na b a\nb a b\n")
    state = TripletState(color=b.colors["a"], allow_wild=True, pending_wild=False, count=1)
    # bottom stones of columns 0 and 2 are "b" and hide the "a" above them
    assert frontier(b, state) == [Point(1, 1)]


def test_closed_toggle_blocks_column_until_it_opens() -> None:
    # column 0 bottom-to-top: a, closed toggle, a
    b = Board.from_tsb("width = 1\n---\na\nX\na\n")
    fresh = TripletState.fresh()
    assert frontier(b, fresh) == [Point(0, 2)]

    state = fresh.after(b.stone_at(Point(0, 2)))
    b.remove(Point(0, 2))
    assert frontier(b, state) == [Point(0, 0)]


def test_closed_toggle_with_nothing_below_hides_column() -> None:
    b = Board.from_tsb("width = 2\n---\na b\nX b\n. b\n")
    assert frontier(b, TripletState.fresh()) == [Point(1, 2)]


def test_survivor_does_not_block() -> None:
    b = Board.from_tsb("width = 2\n---\na a\n# a\n")
    assert frontier(b, TripletState.fresh()) == [Point(0, 0), Point(1, 1)]


def test_wild_needs_permission_and_claimable_color() -> None:
    b = Board.from_tsb("width = 3\nwild = a\n---\n* a b\n")
    a, bb = b.colors["a"], b.colors["b"]
    assert frontier(b, TripletState.fresh()) == [Point(0, 0), Point(1, 0), Point(2, 0)]
    assert frontier(b, TripletState(a, True, False, 1)) == [Point(0, 0), Point(1, 0)]
    assert frontier(b, TripletState(a, False, False, 1)) == [Point(1, 0)]
    # "b" cannot be claimed by the wild stone
    assert frontier(b, TripletState(bb, True, False, 1)) == [Point(2, 0)]


def test_stone_after_opening_wild_may_have_any_color() -> None:
    b = Board.from_tsb("width = 3\nwild = a\n---\n* a b\n")
    state = TripletState.fresh().after(WILD)
    assert state.pending_wild and not state.allow_wild
    assert frontier(b, state) == [Point(1, 0), Point(2, 0)]
    # only a color still in the wild mask is claimed
    assert state.removal_args(b.stone_at(Point(1, 0)), b.wild_colors) == (0, True)
    assert state.removal_args(b.stone_at(Point(2, 0)), b.wild_colors) == (0, False)


def test_triplet_state_transitions() -> None:
    red = OrdinaryStone("r", 1)
    s1 = TripletState.fresh().after(red)
    assert (s1.color, s1.allow_wild, s1.pending_wild, s1.count) == (1, True, False, 1)
    s2 = s1.after(WILD)
    assert (s2.color, s2.allow_wild, s2.pending_wild, s2.count) == (1, False, False, 2)
    assert s2.after(red) == TripletState.fresh()
    assert s2.removal_args(red, 1) == (1, False)

    w1 = TripletState.fresh().after(WILD)
    assert w1.removal_args(red, 1) == (0, True)
    assert w1.removal_args(red, 0) == (0, False)
    assert w1.after(red).pending_wild is False
