"""Build script for the pure-Python Aho-Corasick modules.

The modules live flat at the repository root; the terminal index relies
on bitarray and the Poppy rank directory from the succinct package.
Install the test extra to run the suite and the benchmarks.
"""

from setuptools import setup

setup(
    name="aho-corasick-stream",
    version="0.1.0",
    description="Streaming multi-pattern matching with an Aho-Corasick automaton",
    python_requires=">=3.9",
    py_modules=["aho_corasick", "symbol_trie", "terminal_index"],
    install_requires=[
        "bitarray",
        "succinct",
    ],
    extras_require={
        "test": ["pytest", "pytest-benchmark"],
    },
)
