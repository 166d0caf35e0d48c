"""Profile SymbolTrie construction and automaton scanning."""

import cProfile
import pstats
import random

from aho_corasick import Automaton, MatchCollector, SymbolTrie

TARGET = 200_000
TEXT_LENGTH = 1_000_000


def generate_words(n: int, seed: int = 42) -> list[str]:
    """Generate n unique random lowercase English-like words (4-12 chars)."""
    rng = random.Random(seed)
    # Weighted towards common English letter frequencies
    letters = "aaaaabbccddeeeeeeffgghhiiiijkllmmnnnooooppqrrssssttttuuuvwwxyz"
    words: set[str] = set()
    while len(words) < n:
        length = rng.randint(4, 12)
        word = "".join(rng.choice(letters) for _ in range(length))
        words.add(word)
    result = list(words)
    rng.shuffle(result)
    return result


def build_trie(words: list[str]) -> SymbolTrie:
    """Build and finish a SymbolTrie from a list of words."""
    print(f"Building trie from {len(words):,} unique words...")
    trie = SymbolTrie(words)
    trie.finish()
    print(f"Trie built with {len(trie):,} patterns over {trie.num_nodes:,} nodes")
    return trie


def scan_text(trie: SymbolTrie, text: str) -> int:
    """Stream text through a fresh automaton and return the match count."""
    print(f"Scanning {len(text):,} symbols...")
    collector = MatchCollector()
    Automaton(trie, collector).feed(text)
    print(f"Found {len(collector):,} matches")
    return len(collector)


def print_stats(profiler: cProfile.Profile) -> None:
    stats = pstats.Stats(profiler)
    stats.strip_dirs()

    for key, title in (("cumulative", "cumulative"), ("tottime", "total")):
        print("\n" + "="*80)
        print(f"PROFILING RESULTS (sorted by {title} time)")
        print("="*80 + "\n")
        stats.sort_stats(key)
        stats.print_stats(30)  # Top 30 functions


def profile_build_and_scan():
    """Profile the build and the scan separately."""
    print(f"Generating {TARGET:,} words...")
    words = generate_words(TARGET)
    print(f"Generated {len(words):,} unique words.\n")

    profiler = cProfile.Profile()
    profiler.enable()
    trie = build_trie(words)
    profiler.disable()
    print_stats(profiler)

    rng = random.Random(7)
    text = "".join(rng.choice(words[:1000]) + " " for _ in range(TEXT_LENGTH // 9))

    profiler = cProfile.Profile()
    profiler.enable()
    scan_text(trie, text)
    profiler.disable()
    print_stats(profiler)

    return trie


if __name__ == "__main__":
    profile_build_and_scan()
