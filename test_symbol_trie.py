"""Tests for SymbolTrie and TerminalIndex."""

import logging
import warnings

import pytest

from symbol_trie import (
    ROOT,
    EmptyPatternWarning,
    NotFinishedError,
    SealedTrieError,
    SymbolTrie,
)
from terminal_index import TerminalIndex


@pytest.fixture
def classic_trie():
    """The textbook dictionary {he, she, his, hers}, finished."""
    trie = SymbolTrie(["he", "she", "his", "hers"])
    trie.finish()
    return trie


class TestSymbolTrie:
    """Tests for insertion and basic introspection."""

    def test_build_empty(self):
        """Test a trie with no patterns."""
        trie = SymbolTrie()
        assert len(trie) == 0
        assert trie.num_nodes == 1
        assert trie.num_patterns == 0
        assert not trie.is_finished

    def test_ids_increase_in_insertion_order(self):
        """Test that add() hands out 0, 1, 2, ..."""
        trie = SymbolTrie()
        assert trie.add("He") == 0
        assert trie.add("Hello") == 1
        assert trie.add("HelloWorld") == 2
        assert trie.add("loW") == 3
        assert len(trie) == 4

    def test_constructor_patterns(self):
        """Test that constructor patterns are added in order."""
        trie = SymbolTrie(["ab", "b"])
        assert trie.terminal(trie.find("ab")) == (0, 2)
        assert trie.terminal(trie.find("b")) == (1, 1)

    def test_shared_prefixes_share_nodes(self):
        """Test that common prefixes are stored once."""
        trie = SymbolTrie(["abc", "abd", "ab"])
        # root + a + b + c + d
        assert trie.num_nodes == 5
        assert trie.terminal(trie.find("ab")) == (2, 2)
        assert trie.terminal(trie.find("a")) is None

    def test_duplicate_overwrites_id(self):
        """Test that re-adding a pattern re-marks its node with a new id."""
        trie = SymbolTrie()
        trie.add("abc")
        nodes = trie.num_nodes
        assert trie.add("abc") == 1
        assert trie.num_nodes == nodes
        assert trie.terminal(trie.find("abc")) == (1, 3)
        assert len(trie) == 1
        assert trie.num_patterns == 2
        with pytest.raises(KeyError):
            trie.restore_pattern(0)
        assert trie.restore_pattern(1) == ("a", "b", "c")

    def test_contains(self):
        """Test __contains__ for patterns, prefixes and strangers."""
        trie = SymbolTrie(["foo", "foobar"])
        assert "foo" in trie
        assert "foobar" in trie
        assert "foob" not in trie
        assert "bar" not in trie
        assert "" not in trie
        assert [["unhashable"]] not in trie

    def test_contains_after_finish(self):
        """Test that membership is answered by the terminal index once sealed."""
        trie = SymbolTrie(["foo", "foobar", "bar"])
        trie.finish()
        assert "foo" in trie
        assert "foobar" in trie
        assert "bar" in trie
        assert "foob" not in trie
        assert "ba" not in trie
        assert "" not in trie

    def test_prefix_and_restore(self):
        """Test path reconstruction from node indices and pattern ids."""
        trie = SymbolTrie(["cat", "car"])
        assert trie.prefix(ROOT) == ()
        assert trie.prefix(trie.find("ca")) == ("c", "a")
        assert "".join(trie.restore_pattern(1)) == "car"
        with pytest.raises(KeyError):
            trie.restore_pattern(5)
        with pytest.raises(IndexError):
            trie.prefix(99)

    def test_bytes_and_tokens(self):
        """Test that bytes and token tuples are inserted symbol by symbol."""
        trie = SymbolTrie([b"\x00\xff", ("new", "york")])
        assert trie.find([0, 255]) is not None
        assert trie.find(["new", "york"]) is not None
        assert trie.terminal(trie.find(["new", "york"])) == (1, 2)

    def test_repr(self):
        """Test __repr__ reports size and state."""
        trie = SymbolTrie(["a"])
        assert repr(trie) == "SymbolTrie(1 patterns, 2 nodes, open)"
        trie.finish()
        assert repr(trie) == "SymbolTrie(1 patterns, 2 nodes, finished)"

    def test_negative_cache_size(self):
        """Test that a negative cache size is rejected."""
        with pytest.raises(ValueError):
            SymbolTrie(cache_size=-1)


class TestEmptyPattern:
    """Tests for zero-length patterns."""

    def test_empty_pattern_warns_and_is_ignored(self):
        """Test that an empty pattern is rejected without consuming an id."""
        trie = SymbolTrie()
        with pytest.warns(EmptyPatternWarning):
            assert trie.add("") is None
        assert trie.num_patterns == 0
        assert trie.num_nodes == 1
        assert trie.add("a") == 0

    def test_empty_pattern_as_error(self):
        """Test that the warning can be escalated by the warnings filter."""
        trie = SymbolTrie()
        with pytest.warns(EmptyPatternWarning):
            trie.add(b"")
        with warnings.catch_warnings():
            warnings.simplefilter("error", EmptyPatternWarning)
            with pytest.raises(EmptyPatternWarning):
                trie.add([])


class TestSealing:
    """Tests for the finish() lifecycle."""

    def test_add_after_finish_raises(self):
        """Test that a finished trie rejects new patterns unchanged."""
        trie = SymbolTrie(["ab"])
        trie.finish()
        with pytest.raises(SealedTrieError):
            trie.add("abc")
        assert trie.num_nodes == 3
        assert trie.num_patterns == 1
        assert "abc" not in trie

    def test_finish_idempotent(self):
        """Test that a second finish() is a no-op."""
        trie = SymbolTrie(["ab", "b"])
        trie.finish()
        transition = trie.transition
        links = [trie.node(v) for v in range(trie.num_nodes)]
        trie.finish()
        assert trie.transition is transition
        assert [trie.node(v) for v in range(trie.num_nodes)] == links

    def test_unhashable_symbol_leaves_trie_unchanged(self):
        """Test that a failed add() does not leave partial nodes behind."""
        trie = SymbolTrie(["ab"])
        with pytest.raises(TypeError):
            trie.add(["x", "y", ["z"]])
        assert trie.num_nodes == 3
        assert trie.num_patterns == 1
        assert trie.find(["x"]) is None

    def test_finish_logs_counts(self, caplog):
        """Test the debug record emitted when the trie is sealed."""
        trie = SymbolTrie(["ab", "b"])
        with caplog.at_level(logging.DEBUG, logger="symbol_trie"):
            trie.finish()
        records = [r for r in caplog.records if r.name == "symbol_trie"]
        assert len(records) == 1
        assert records[0].args == (4, 2)
        assert records[0].getMessage() == "Trie finished with 4 nodes and 2 patterns"

    def test_transition_requires_finish(self):
        """Test that matching on an open trie raises."""
        trie = SymbolTrie(["ab"])
        with pytest.raises(NotFinishedError):
            trie.transition(ROOT, "a")
        with pytest.raises(NotFinishedError):
            trie.outputs(ROOT)

    def test_links_absent_before_finish(self):
        """Test that node views expose no links until finish()."""
        trie = SymbolTrie(["ab"])
        view = trie.node(trie.find("ab"))
        assert view.suffix_link is None
        assert view.output_link is None
        assert view.terminal == (0, 2)


class TestLinkBuilder:
    """Tests for suffix and output links."""

    def test_root_has_no_links(self, classic_trie):
        """Test that the root is visited but receives no links."""
        root = classic_trie.node(ROOT)
        assert root.parent is None
        assert root.edge is None
        assert root.suffix_link is None
        assert root.output_link is None
        assert root.terminal is None

    def test_depth_one_links_to_root(self, classic_trie):
        """Test that every child of the root links back to the root."""
        for symbol in "hs":
            view = classic_trie.node(classic_trie.find(symbol))
            assert view.suffix_link == ROOT
            assert view.parent == ROOT
            assert view.edge == symbol

    @pytest.mark.parametrize("prefix,suffix", [
        ("he", ""),
        ("hi", ""),
        ("his", "s"),
        ("sh", "h"),
        ("she", "he"),
        ("her", ""),
        ("hers", "s"),
    ])
    def test_suffix_links(self, classic_trie, prefix, suffix):
        """Test that suffix links point at the longest proper suffix present."""
        view = classic_trie.node(classic_trie.find(prefix))
        assert view.suffix_link == classic_trie.find(suffix)

    def test_output_links(self, classic_trie):
        """Test that output links skip to the nearest terminal suffix."""
        find = classic_trie.find
        assert classic_trie.node(find("she")).output_link == find("he")
        assert classic_trie.node(find("sh")).output_link is None
        assert classic_trie.node(find("hers")).output_link is None
        assert classic_trie.node(find("his")).output_link is None

    def test_output_link_skips_non_terminal_suffix(self):
        """Test that output links propagate past non-terminal suffix nodes."""
        # suffix chain: xabc -> abc (not terminal) -> bc (not terminal) -> c
        trie = SymbolTrie(["xabc", "abcd", "bcd", "c"])
        trie.finish()
        find = trie.find
        assert trie.node(find("xabc")).suffix_link == find("abc")
        assert trie.node(find("xabc")).output_link == find("c")

    def test_output_chain_is_all_terminal_suffixes(self):
        """Test that the output chain lists every terminal suffix, longest first."""
        trie = SymbolTrie(["a", "aa", "aaa", "aaaa"])
        trie.finish()
        assert trie.outputs(trie.find("aaaa")) == [(3, 4), (2, 3), (1, 2), (0, 1)]
        assert trie.outputs(ROOT) == []

    def test_transition_follows_failure_links(self, classic_trie):
        """Test goto/failure transitions on the sealed trie."""
        find = classic_trie.find
        assert classic_trie.transition(find("sh"), "e") == find("she")
        # "she" + "r": no child, fall back to "he" which has "r"
        assert classic_trie.transition(find("she"), "r") == find("her")
        assert classic_trie.transition(find("hi"), "x") == ROOT
        assert classic_trie.transition(ROOT, "q") == ROOT

    def test_uncached_transition(self):
        """Test that cache_size=0 installs the plain transition function."""
        trie = SymbolTrie(["ab"], cache_size=0)
        trie.finish()
        assert trie.transition(trie.find("a"), "b") == trie.find("ab")
        assert not hasattr(trie.transition, "cache_info")


class TestTerminalIndex:
    """Tests for the rank-indexed terminal table."""

    def test_from_terminals(self):
        """Test payload lookup through rank."""
        index = TerminalIndex.from_terminals(6, {1: (7, 2), 4: (3, 5), 5: (0, 1)})
        assert len(index) == 3
        assert index.get(0) is None
        assert index.get(1) == (7, 2)
        assert index.get(2) is None
        assert index.get(4) == (3, 5)
        assert index.get(5) == (0, 1)
        assert index.is_terminal(4)
        assert not index.is_terminal(3)

    def test_empty(self):
        """Test an index with no terminal nodes."""
        index = TerminalIndex.from_terminals(1, {})
        assert len(index) == 0
        assert index.get(0) is None
        assert not index.is_terminal(0)

    def test_finished_trie_uses_index(self, classic_trie):
        """Test that terminal payloads survive finish()."""
        assert classic_trie.terminal(classic_trie.find("hers")) == (3, 4)
        assert classic_trie.terminal(classic_trie.find("her")) is None
        assert len(classic_trie) == 4
