"""Rank-indexed terminal markers for a sealed symbol trie."""

import array
from typing import Optional

from bitarray import bitarray
from succinct.poppy import Poppy


class TerminalIndex:
    """Terminal flags for trie nodes, built on a Poppy bit vector.

    Bit v is set when node v ends a pattern.  Payloads are stored densely:
    the k-th set bit (1-based) owns slot k - 1 of the id and length arrays,
    so a terminal node's slot is ``rank(v) - 1``.
    """

    def __init__(self, bits: bitarray, ids: array.array,
                 lengths: array.array) -> None:
        self._ba = bits
        self._bv = Poppy(bits)
        self._ids = ids
        self._lengths = lengths

    @classmethod
    def from_terminals(cls, num_nodes: int,
                       terminals: dict[int, tuple[int, int]]) -> "TerminalIndex":
        """Freeze a ``{node: (pattern_id, length)}`` mapping over *num_nodes* nodes."""
        bits = bitarray()
        ids = array.array('I')
        lengths = array.array('I')
        for node in range(num_nodes):
            payload = terminals.get(node)
            if payload is None:
                bits.append(False)
            else:
                bits.append(True)
                ids.append(payload[0])
                lengths.append(payload[1])
        return cls(bits, ids, lengths)

    def get(self, v: int) -> Optional[tuple[int, int]]:
        """Return ``(pattern_id, length)`` for node *v*, or None if not terminal."""
        if not self._ba[v]:
            return None
        slot = self._bv.rank(v) - 1
        return self._ids[slot], self._lengths[slot]

    def is_terminal(self, v: int) -> bool:
        return bool(self._ba[v])

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"TerminalIndex({len(self)} terminals over {len(self._ba)} nodes)"
