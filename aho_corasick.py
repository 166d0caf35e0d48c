"""Streaming Aho-Corasick automaton over a finished ``SymbolTrie``."""

from typing import Callable, Hashable, Iterable, Iterator, NamedTuple, Optional

from symbol_trie import (
    ROOT,
    EmptyPatternWarning,
    NotFinishedError,
    SealedTrieError,
    SymbolTrie,
)

__all__ = [
    "AhoCorasick",
    "Automaton",
    "EmptyPatternWarning",
    "Match",
    "MatchCollector",
    "MatchReporter",
    "NotFinishedError",
    "SealedTrieError",
    "SymbolTrie",
]

# Called as reporter(pattern_id, start, end) for the half-open range [start, end).
MatchReporter = Callable[[int, int, int], None]


class Match(NamedTuple):
    """One occurrence of pattern *pattern_id* over ``[start, end)``."""

    pattern_id: int
    start: int
    end: int


class MatchCollector:
    """Match reporter that records every occurrence as a ``Match``."""

    def __init__(self) -> None:
        self.matches: list[Match] = []

    def __call__(self, pattern_id: int, start: int, end: int) -> None:
        self.matches.append(Match(pattern_id, start, end))

    def clear(self) -> None:
        self.matches.clear()

    def __iter__(self) -> Iterator[Match]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)

    def __repr__(self) -> str:
        return f"MatchCollector({self.matches!r})"


class Automaton:
    """Single-state matcher bound to a finished trie.

    Holds only the current node and the number of symbols consumed since
    the last ``reset()``; the trie is never modified, so one trie can back
    many automata, including automata running on different threads.

    Every call to ``next`` invokes *reporter* inline once per pattern that
    ends at the consumed symbol: in order of increasing end position, and
    longest first for matches sharing an end.
    """

    def __init__(self, trie: SymbolTrie, reporter: MatchReporter) -> None:
        """Bind to *trie*, which must already be finished.

        Raises:
            NotFinishedError: If ``trie.finish()`` has not been called.
        """
        if not trie.is_finished:
            raise NotFinishedError("trie must be finished before building an automaton")
        self._trie = trie
        self._reporter = reporter
        self._state = ROOT
        self._position = 0

    @property
    def trie(self) -> SymbolTrie:
        return self._trie

    @property
    def state(self) -> int:
        """Index of the current trie node."""
        return self._state

    @property
    def position(self) -> int:
        """Number of symbols consumed since the last reset."""
        return self._position

    def next(self, symbol: Hashable) -> None:
        """Consume one symbol and report every pattern ending at it."""
        trie = self._trie
        node = trie.transition(self._state, symbol)
        self._state = node
        end = self._position + 1
        if node != ROOT:
            report = self._reporter
            for pattern_id, length in trie.outputs(node):
                report(pattern_id, end - length, end)
        self._position = end

    def feed(self, symbols: Iterable[Hashable]) -> None:
        """Consume *symbols* in order, as repeated ``next`` calls."""
        for symbol in symbols:
            self.next(symbol)

    def reset(self) -> None:
        """Return to the root with the position counter at zero."""
        self._state = ROOT
        self._position = 0

    def __repr__(self) -> str:
        return f"Automaton(state={self._state}, position={self._position})"


class AhoCorasick:
    """Trie and automaton in one object.

    Add patterns, call ``finish()``, then stream symbols through ``next``;
    matches go to *reporter*.
    """

    def __init__(self, reporter: MatchReporter,
                 patterns: Iterable[Iterable[Hashable]] = (), *,
                 cache_size: Optional[int] = 4096) -> None:
        self._trie = SymbolTrie(patterns, cache_size=cache_size)
        self._reporter = reporter
        self._automaton: Optional[Automaton] = None

    @property
    def trie(self) -> SymbolTrie:
        return self._trie

    @property
    def position(self) -> int:
        return self._running().position

    def add(self, pattern: Iterable[Hashable]) -> Optional[int]:
        """Insert *pattern*; see ``SymbolTrie.add``."""
        return self._trie.add(pattern)

    def finish(self) -> None:
        """Seal the dictionary and make the automaton ready.  Idempotent."""
        self._trie.finish()
        if self._automaton is None:
            self._automaton = Automaton(self._trie, self._reporter)

    def _running(self) -> Automaton:
        if self._automaton is None:
            raise NotFinishedError("call finish() before matching")
        return self._automaton

    def next(self, symbol: Hashable) -> None:
        self._running().next(symbol)

    def feed(self, symbols: Iterable[Hashable]) -> None:
        self._running().feed(symbols)

    def reset(self) -> None:
        self._running().reset()

    def find_all(self, text: Iterable[Hashable]) -> list[Match]:
        """Scan *text* from a fresh state and return its matches.

        Uses a separate automaton: the streaming state and the reporter are
        left untouched.
        """
        self._running()
        collector = MatchCollector()
        Automaton(self._trie, collector).feed(text)
        return collector.matches

    def __repr__(self) -> str:
        return f"AhoCorasick({self._trie!r})"
