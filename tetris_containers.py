"""Fixed-capacity queue (circular) and reserve stack"""
from typing import List, Optional

from loguru import logger

from tetris_piece import Piece

QUEUE_CAPACITY = 5
STACK_CAPACITY = 3


class BoundedQueue:
    """FIFO over a fixed slot array; a full queue rejects inserts."""

    def __init__(self, capacity: int = QUEUE_CAPACITY):
        self.capacity = capacity
        self.slots: List[Optional[Piece]] = [None] * capacity
        self.front = 0
        self.back = 0
        self.count = 0

    def __len__(self):
        return self.count

    def is_empty(self) -> bool:
        return self.count == 0

    def is_full(self) -> bool:
        return self.count == self.capacity

    def try_enqueue(self, piece: Piece) -> bool:
        if self.is_full():
            logger.warning("queue full, rejected {}", piece)
            return False
        self.slots[self.back] = piece
        self.back = (self.back + 1) % self.capacity
        self.count += 1
        return True

    def try_dequeue(self) -> Optional[Piece]:
        if self.is_empty():
            logger.warning("dequeue on empty queue")
            return None
        piece = self.slots[self.front]
        self.slots[self.front] = None
        self.front = (self.front + 1) % self.capacity
        self.count -= 1
        return piece

    def peek_all(self) -> List[Piece]:
        return [self.slots[(self.front + i) % self.capacity] for i in range(self.count)]


class BoundedStack:
    """LIFO reserve; `top` is -1 when empty."""

    def __init__(self, capacity: int = STACK_CAPACITY):
        self.capacity = capacity
        self.slots: List[Optional[Piece]] = [None] * capacity
        self.top = -1

    @property
    def count(self) -> int:
        return self.top + 1

    def __len__(self):
        return self.count

    def is_empty(self) -> bool:
        return self.top == -1

    def is_full(self) -> bool:
        return self.count == self.capacity

    def try_push(self, piece: Piece) -> bool:
        if self.is_full():
            logger.warning("reserve full, rejected {}", piece)
            return False
        self.top += 1
        self.slots[self.top] = piece
        return True

    def try_pop(self) -> Optional[Piece]:
        if self.is_empty():
            logger.warning("pop on empty reserve")
            return None
        piece = self.slots[self.top]
        self.slots[self.top] = None
        self.top -= 1
        return piece

    def peek_all(self) -> List[Piece]:
        return [self.slots[i] for i in range(self.top, -1, -1)]
