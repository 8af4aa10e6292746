import pytest

from tetris_engine import Origin
from tetris_piece import PieceSource
from tetris_rng import PieceRandomizer
from tetris_scoring import CLASSIC, STREAK
from tetris_session import Session


@pytest.fixture()
def session() -> Session:
    return Session(source=PieceSource(PieceRandomizer(seed=7)), rules=CLASSIC)


def test_session_starts_with_a_full_queue(session: Session) -> None:
    assert [p.id for p in session.queue.peek_all()] == [1, 2, 3, 4, 5]
    assert session.stack.is_empty()


def test_transfer_moves_queue_front_onto_reserve(session: Session) -> None:
    front = session.queue.peek_all()[0]
    assert session.transfer() == front
    assert session.stack.peek_all() == [front]
    assert len(session.queue) == 4
    assert session.pieces_reserved == 1
    assert session.engine.state.total_plays == 0


def test_transfer_refused_when_reserve_full(session: Session) -> None:
    for _ in range(3):
        session.transfer()
    before = session.queue.peek_all()
    assert session.transfer() is None
    assert session.queue.peek_all() == before
    assert session.pieces_reserved == 3


def test_play_from_stack_reports_origin(session: Session) -> None:
    session.transfer(); session.transfer()
    top = session.stack.peek_all()[0]
    r = session.play_from_stack()
    assert r.piece == top
    assert r.origin is Origin.STACK
    assert session.engine.state.plays_from_stack == 1


def test_empty_containers_never_reach_the_engine(session: Session) -> None:
    assert session.play_from_stack() is None
    for _ in range(5):
        assert session.play_from_queue() is not None
    assert session.play_from_queue() is None
    assert session.engine.state.total_plays == 5
    assert session.tip().startswith("Queue is empty")


def test_refill_tops_up_with_fresh_ids(session: Session) -> None:
    session.play_from_queue(); session.play_from_queue()
    assert session.refill() == 2
    assert [p.id for p in session.queue.peek_all()] == [3, 4, 5, 6, 7]
    assert session.refill() == 0


def test_reset_keeps_the_id_counter(session: Session) -> None:
    session.play_from_queue()
    session.reset()
    assert session.engine.state.total_plays == 0
    assert [p.id for p in session.queue.peek_all()] == [6, 7, 8, 9, 10]


def test_tip_when_reserve_full(session: Session) -> None:
    for _ in range(3):
        session.transfer()
    assert "Reserve is full" in session.tip()


def test_reset_can_switch_scoring_preset(session: Session) -> None:
    session.play_from_queue()
    session.reset(STREAK)
    assert session.rules is STREAK
    assert session.engine.rules is STREAK
    assert set(session.engine.state.kind_counts) == set("IOTSZJL")
    assert len(session.queue) == 5
