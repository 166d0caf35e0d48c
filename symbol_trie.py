"""Pattern trie with Aho-Corasick suffix and output links."""

import array
import logging
import warnings
from collections import deque
from functools import lru_cache
from typing import Any, Hashable, Iterable, NamedTuple, Optional

from terminal_index import TerminalIndex

logger = logging.getLogger(__name__)

ROOT = 0
_NO_NODE = 0xFFFFFFFF  # link sentinel: no parent / no suffix link / no output link


class SealedTrieError(RuntimeError):
    """Raised when a pattern is added after ``finish()``."""


class NotFinishedError(RuntimeError):
    """Raised when a trie is matched against before ``finish()``."""


class EmptyPatternWarning(UserWarning):
    """Emitted when a zero-length pattern is passed to ``add()``."""


class NodeView(NamedTuple):
    """Read-only snapshot of one trie node.  Absent links are None."""

    index: int
    edge: Any
    parent: Optional[int]
    children: dict
    suffix_link: Optional[int]
    output_link: Optional[int]
    terminal: Optional[tuple[int, int]]


def _link(value: int) -> Optional[int]:
    return None if value == _NO_NODE else value


class SymbolTrie:
    """Insert-only prefix tree over hashable symbols, sealed by ``finish()``.

    Nodes live in an append-only arena and refer to each other by index:

    * ``_edges[v]``    - symbol on the edge into v (None for the root)
    * ``_children[v]`` - ``{symbol: child index}``
    * ``_parents[v]``  - parent index (``_NO_NODE`` for the root)

    ``finish()`` adds the ``_suffix`` and ``_output`` link tables and freezes
    the terminal markers into a ``TerminalIndex``.  After that the trie is
    read-only and may be shared by any number of automata.

    A pattern is any finite iterable of hashable symbols: a ``str`` matches
    character by character, ``bytes`` byte by byte, a tuple of words token
    by token.
    """

    # ------------------------------------------------------------------ #
    #  Construction                                                        #
    # ------------------------------------------------------------------ #

    def __init__(self, patterns: Iterable[Iterable[Hashable]] = (), *,
                 cache_size: Optional[int] = 4096) -> None:
        """Create a trie, optionally adding *patterns* in order.

        Args:
            patterns: Initial patterns.  Ids are assigned in iteration order.
            cache_size: Maximum number of memoised ``(node, symbol)``
                transitions kept once the trie is finished.  ``0`` disables
                the cache, ``None`` leaves it unbounded.
        """
        if cache_size is not None and cache_size < 0:
            raise ValueError(f"cache_size must be >= 0 or None, got {cache_size}")
        self._cache_size = cache_size

        self._edges: list[Any] = [None]
        self._children: list[dict[Any, int]] = [{}]
        self._parents = array.array('I', [_NO_NODE])

        # Build-time terminal markers {node: (pattern_id, length)}; replaced
        # by a TerminalIndex in finish().
        self._terminals: Optional[dict[int, tuple[int, int]]] = {}
        self._index: Optional[TerminalIndex] = None
        self._pattern_nodes: dict[int, int] = {}
        self._num_patterns = 0

        self._suffix: Optional[array.array] = None
        self._output: Optional[array.array] = None
        self._finished = False

        for pattern in patterns:
            self.add(pattern)

    def add(self, pattern: Iterable[Hashable]) -> Optional[int]:
        """Insert *pattern* and return its newly assigned pattern id.

        Re-inserting an existing pattern re-marks the same node with the new
        id; the old id no longer resolves.  An empty pattern is not inserted:
        an ``EmptyPatternWarning`` is emitted and None is returned.

        Raises:
            SealedTrieError: If ``finish()`` has already been called.
            TypeError: If a symbol is unhashable.  The trie is left unchanged.
        """
        if self._finished:
            raise SealedTrieError("cannot add patterns to a finished trie")
        symbols = tuple(pattern)
        if not symbols:
            warnings.warn("empty pattern ignored", EmptyPatternWarning,
                          stacklevel=2)
            return None
        hash(symbols)  # reject unhashable symbols before any node is created

        children = self._children
        node = ROOT
        for symbol in symbols:
            child = children[node].get(symbol)
            if child is None:
                child = len(children)
                children[node][symbol] = child
                children.append({})
                self._edges.append(symbol)
                self._parents.append(node)
            node = child

        pattern_id = self._num_patterns
        self._num_patterns += 1
        previous = self._terminals.get(node)
        if previous is not None:
            del self._pattern_nodes[previous[0]]
        self._terminals[node] = (pattern_id, len(symbols))
        self._pattern_nodes[pattern_id] = node
        return pattern_id

    def finish(self) -> None:
        """Compute suffix/output links and seal the trie.  Idempotent."""
        if self._finished:
            return
        self._build_links()
        self._index = TerminalIndex.from_terminals(len(self._children),
                                                   self._terminals)
        self._terminals = None

        # Install C-level LRU cache as instance attribute (shadows class method)
        if self._cache_size == 0:
            self.transition = self._transition_uncached
        else:
            self.transition = lru_cache(maxsize=self._cache_size)(
                self._transition_uncached)
        self._finished = True
        logger.debug("Trie finished with %d nodes and %d patterns",
                     self.num_nodes, len(self))

    def _build_links(self) -> None:
        """Level-order pass setting the suffix and output link of every node.

        A node's suffix link is derived from its parent's, so parents must be
        resolved first; breadth-first order guarantees that, and also that
        the suffix-link target (always shallower) already has its output
        link.
        """
        n = len(self._children)
        suffix = array.array('I', [_NO_NODE]) * n
        output = array.array('I', [_NO_NODE]) * n
        children = self._children
        edges = self._edges
        parents = self._parents
        terminals = self._terminals

        queue: deque = deque(children[ROOT].values())
        while queue:
            v = queue.popleft()
            queue.extend(children[v].values())

            p = parents[v]
            if p == ROOT:
                link = ROOT
            else:
                a = edges[v]
                x = suffix[p]
                while x != ROOT and a not in children[x]:
                    x = suffix[x]
                link = children[x].get(a, ROOT)
            suffix[v] = link

            if link in terminals:
                output[v] = link
            else:
                output[v] = output[link]

        self._suffix = suffix
        self._output = output

    # ------------------------------------------------------------------ #
    #  Matching                                                            #
    # ------------------------------------------------------------------ #

    def transition(self, node: int, symbol: Hashable) -> int:
        """Return the node reached from *node* on *symbol*.

        Follows the child edge for *symbol*, falling back along suffix links
        until such an edge exists or the root is reached.

        Once the trie is finished this method is shadowed by a per-instance
        ``lru_cache``-wrapped version of ``_transition_uncached``, so this
        body only runs on an unfinished trie.

        Raises:
            NotFinishedError: If ``finish()`` has not been called.
        """
        raise NotFinishedError("call finish() before matching")

    def _transition_uncached(self, node: int, symbol: Hashable) -> int:
        children = self._children
        suffix = self._suffix
        while True:
            child = children[node].get(symbol)
            if child is not None:
                return child
            if node == ROOT:
                return ROOT
            node = suffix[node]

    def outputs(self, node: int) -> list[tuple[int, int]]:
        """Return ``(pattern_id, length)`` for every pattern ending at *node*.

        The node's own pattern comes first, then those reached through the
        output-link chain, so lengths are strictly decreasing.
        """
        if not self._finished:
            raise NotFinishedError("call finish() before matching")
        index = self._index
        output = self._output
        found = []
        own = index.get(node)
        if own is not None:
            found.append(own)
        node = output[node]
        while node != _NO_NODE:
            found.append(index.get(node))
            node = output[node]
        return found

    # ------------------------------------------------------------------ #
    #  Introspection                                                       #
    # ------------------------------------------------------------------ #

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def num_nodes(self) -> int:
        """Number of nodes, root included."""
        return len(self._children)

    @property
    def num_patterns(self) -> int:
        """Number of pattern ids handed out so far (duplicates included)."""
        return self._num_patterns

    def find(self, prefix: Iterable[Hashable]) -> Optional[int]:
        """Return the node index spelling *prefix*, or None if absent."""
        children = self._children
        node = ROOT
        for symbol in prefix:
            node = children[node].get(symbol)
            if node is None:
                return None
        return node

    def terminal(self, v: int) -> Optional[tuple[int, int]]:
        """Return ``(pattern_id, length)`` if node *v* ends a pattern."""
        if not 0 <= v < len(self._children):
            raise IndexError(f"Node {v} out of range [0, {len(self._children)})")
        if self._index is not None:
            return self._index.get(v)
        return self._terminals.get(v)

    def prefix(self, v: int) -> tuple:
        """Return the symbols on the path from the root to node *v*."""
        if not 0 <= v < len(self._children):
            raise IndexError(f"Node {v} out of range [0, {len(self._children)})")
        path = []
        while v != ROOT:
            path.append(self._edges[v])
            v = self._parents[v]
        path.reverse()
        return tuple(path)

    def restore_pattern(self, pattern_id: int) -> tuple:
        """Return the symbols of the pattern with id *pattern_id*.

        Raises:
            KeyError: If the id was never assigned, or was superseded by a
                later insertion of the same pattern.
        """
        return self.prefix(self._pattern_nodes[pattern_id])

    def node(self, v: int) -> NodeView:
        """Return a read-only view of node *v*."""
        terminal = self.terminal(v)
        finished = self._finished
        return NodeView(
            index=v,
            edge=self._edges[v],
            parent=_link(self._parents[v]),
            children=dict(self._children[v]),
            suffix_link=_link(self._suffix[v]) if finished else None,
            output_link=_link(self._output[v]) if finished else None,
            terminal=terminal,
        )

    # ------------------------------------------------------------------ #
    #  Dunder methods                                                      #
    # ------------------------------------------------------------------ #

    def __contains__(self, pattern: Iterable[Hashable]) -> bool:
        """Check if *pattern* was inserted (and not rejected as empty)."""
        try:
            node = self.find(pattern)
        except TypeError:
            return False
        if node is None or node == ROOT:
            return False
        if self._index is not None:
            return self._index.is_terminal(node)
        return node in self._terminals

    def __len__(self) -> int:
        """Return the number of distinct patterns."""
        return len(self._pattern_nodes)

    def __repr__(self) -> str:
        state = "finished" if self._finished else "open"
        return f"SymbolTrie({len(self)} patterns, {self.num_nodes} nodes, {state})"
