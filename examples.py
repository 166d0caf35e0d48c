"""
Examples of using the Aho-Corasick automaton for various use cases.
"""

from aho_corasick import AhoCorasick, Automaton, MatchCollector, SymbolTrie


def print_match(pattern_id: int, start: int, end: int) -> None:
    """Match reporter that prints each occurrence."""
    print(f"Found word {pattern_id} at index [{start}, {end})")


def example_basic_usage():
    """Stream a string one character at a time."""
    print("=== Basic Usage ===")

    trie = SymbolTrie()
    trie.add("He")          # word 0
    trie.add("Hello")       # word 1
    trie.add("HelloWorld")  # word 2
    trie.add("loW")         # word 3
    trie.finish()

    automaton = Automaton(trie, print_match)

    # The callback is called automatically as each match completes
    for ch in "11234HelloHelloWorld1234":
        automaton.next(ch)
    automaton.reset()
    print()


def example_collect_matches():
    """Collect matches instead of printing them."""
    print("=== Collecting Matches ===")

    ac = AhoCorasick(MatchCollector(), ["he", "she", "his", "hers"])
    ac.finish()

    for match in ac.find_all("ushers"):
        word = "".join(ac.trie.restore_pattern(match.pattern_id))
        print(f"{word!r} at [{match.start}, {match.end})")
    print()


def example_shared_trie():
    """Scan several unrelated streams over one finished trie."""
    print("=== Shared Trie ===")

    trie = SymbolTrie(["error", "warn", "fatal"])
    trie.finish()

    streams = {
        "app.log": "ok ok warn ok error",
        "db.log": "fatal: disk full",
    }
    for name, text in streams.items():
        collector = MatchCollector()
        Automaton(trie, collector).feed(text)
        print(f"{name}: {len(collector)} matches {collector.matches}")
    print()


def example_bytes_and_tokens():
    """Match over bytes and over word tokens."""
    print("=== Bytes and Tokens ===")

    signatures = SymbolTrie([b"\x7fELF", b"PK\x03\x04"])
    signatures.finish()
    collector = MatchCollector()
    Automaton(signatures, collector).feed(b"junk\x7fELF\x02\x01PK\x03\x04")
    print(f"Byte signatures: {collector.matches}")

    phrases = SymbolTrie([("new", "york"), ("york", "city")])
    phrases.finish()
    collector = MatchCollector()
    Automaton(phrases, collector).feed("we flew to new york city".split())
    print(f"Phrases: {collector.matches}")
    print()


if __name__ == "__main__":
    example_basic_usage()
    example_collect_matches()
    example_shared_trie()
    example_bytes_and_tokens()

    print("All examples completed!")
