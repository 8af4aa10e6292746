import pytest

from tetris_engine import Origin, ProgressionEngine
from tetris_piece import PieceSource
from tetris_rng import PieceRandomizer


@pytest.fixture()
def source() -> PieceSource:
    return PieceSource(PieceRandomizer(seed=1234))


@pytest.fixture()
def engine() -> ProgressionEngine:
    return ProgressionEngine()


@pytest.fixture()
def play(engine, source):
    """Play pieces of the given kinds from the queue, returning the reports."""
    def _play(kinds, origin=Origin.QUEUE):
        return [engine.process(source.make(k), origin) for k in kinds]
    return _play
