"""Session: one piece source, queue, reserve and engine played together"""
from __future__ import annotations
from typing import Optional

from loguru import logger

from tetris_config import CONFIG
from tetris_containers import BoundedQueue, BoundedStack
from tetris_engine import Origin, PlayReport, ProgressionEngine
from tetris_piece import Piece, PieceSource
from tetris_rng import PieceRandomizer
from tetris_scoring import ScoringRules, rules_from_config

FALLBACK_TIPS = (
    "Use the reserve for pieces you want later",
    "Three of a kind in a row starts a combo",
    "Balance plays between queue and reserve",
    "Optimize repairs multipliers that drifted",
)


def source_from_config() -> PieceSource:
    rng = PieceRandomizer(CONFIG["PIECE_SEED"], CONFIG["FIRST_PIECE_AVOID_SZO"], CONFIG["REPEAT_REROLL"])
    return PieceSource(rng)


class Session:
    def __init__(self, source: Optional[PieceSource] = None, rules: Optional[ScoringRules] = None, fill: bool = True):
        self.source = source or source_from_config()
        self.rules = rules or rules_from_config()
        self.queue = BoundedQueue()
        self.stack = BoundedStack()
        self.engine = ProgressionEngine(self.rules)
        self.pieces_reserved = 0
        self._tip_index = 0
        if fill:
            self.refill()

    def play_from_queue(self) -> Optional[PlayReport]:
        piece = self.queue.try_dequeue()
        if piece is None:
            return None
        return self.engine.process(piece, Origin.QUEUE)

    def play_from_stack(self) -> Optional[PlayReport]:
        piece = self.stack.try_pop()
        if piece is None:
            return None
        return self.engine.process(piece, Origin.STACK)

    def transfer(self) -> Optional[Piece]:
        """Move the queue front onto the reserve; the engine is not involved."""
        if self.queue.is_empty() or self.stack.is_full():
            logger.warning("transfer refused: queue {}/{}, reserve {}/{}",
                           len(self.queue), self.queue.capacity, len(self.stack), self.stack.capacity)
            return None
        piece = self.queue.try_dequeue()
        self.stack.try_push(piece)
        self.pieces_reserved += 1
        return piece

    def refill(self) -> int:
        added = 0
        while not self.queue.is_full():
            self.queue.try_enqueue(self.source.next())
            added += 1
        if added:
            logger.debug("queue refilled with {} pieces", added)
        return added

    def optimize(self) -> bool:
        return self.engine.optimize()

    def report(self):
        return self.engine.report()

    def snapshot(self):
        return self.engine.snapshot()

    def tip(self) -> str:
        s = self.engine.state
        if self.queue.is_empty():
            return "Queue is empty: generate new pieces"
        if self.stack.is_full():
            return "Reserve is full: play from the reserve"
        if s.current_combo > 0:
            return f"Combo x{s.current_combo}: keep playing {s.last_kind} pieces"
        if s.total_plays >= 5 and s.reserve_efficiency < 20:
            return "Reserve is barely used: try transferring a piece"
        tip = FALLBACK_TIPS[self._tip_index % len(FALLBACK_TIPS)]
        self._tip_index += 1
        return tip

    def reset(self, rules: Optional[ScoringRules] = None):
        """Start over with empty containers; `rules` swaps the scoring preset."""
        if rules is not None:
            self.rules = rules
            self.engine.rules = rules
        self.queue = BoundedQueue()
        self.stack = BoundedStack()
        self.engine.reset()
        self.pieces_reserved = 0
        self.refill()
