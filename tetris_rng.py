"""LCG piece randomizer"""
import random
from typing import Optional

class PieceRandomizer:
    PIECES = ["I","O","T","S","Z","J","L"]
    def __init__(self, seed: Optional[int]=None, avoid_szo_first: bool=False, repeat_reroll: bool=False):
        if seed is None:
            seed = random.getrandbits(32)
        self.state = seed & 0xFFFFFFFF
        self.prev_index = None
        self.avoid_szo_first = avoid_szo_first
        self.repeat_reroll = repeat_reroll

    def _lcg_next(self):
        self.state = (self.state * 0x41C64E6D + 0x3039) & 0xFFFFFFFF
        return self.state

    def _rand(self):
        return (self._lcg_next() >> 16) & 0x7FFF

    def _rand_choice(self):
        # reject the top of the 15-bit range so every type is equally likely
        n = len(self.PIECES)
        limit = 0x8000 - 0x8000 % n
        r = self._rand()
        while r >= limit:
            r = self._rand()
        return r % n

    def next_kind(self) -> str:
        cand = self._rand_choice()
        if self.prev_index is None and self.avoid_szo_first:
            bad = {self.PIECES.index("S"), self.PIECES.index("Z"), self.PIECES.index("O")}
            while cand in bad:
                cand = self._rand_choice()
        # NES-style: one 50% reroll on an immediate repeat
        if self.repeat_reroll and self.prev_index is not None and cand == self.prev_index:
            if (self._rand() & 1) == 1:
                cand = self._rand_choice()
        self.prev_index = cand
        return self.PIECES[cand]
