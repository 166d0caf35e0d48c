"""Run the automaton throughput benchmarks and summarise them.

    python run_benchmarks.py              # terminal output only
    python run_benchmarks.py --report     # also write BENCHMARK_RESULTS.md
    python run_benchmarks.py --report-only
"""

import argparse
import json
import subprocess
import sys
from pathlib import Path

HERE = Path(__file__).parent
RESULTS_JSON = HERE / "benchmark_results.json"
REPORT_MD = HERE / "BENCHMARK_RESULTS.md"

COLUMNS = ("patterns", "nodes", "symbols", "matches")


def benchmark_command(report: bool = False, compare: bool = False,
                      save: bool = True) -> list[str]:
    """Build the pytest command line for ``TestThroughput``."""
    cmd = [
        sys.executable, "-m", "pytest",
        "test_aho_corasick.py::TestThroughput",
        "--benchmark-only",
    ]
    if report:
        cmd.append(f"--benchmark-json={RESULTS_JSON}")
    if compare:
        cmd.append("--benchmark-compare")
    if save:
        cmd.append("--benchmark-autosave")
    return cmd


def render_report(data: dict) -> str:
    """Render pytest-benchmark JSON as a markdown table.

    Sizes come from each benchmark's ``extra_info``; scans also get a
    symbols-per-second column computed from the mean round time.
    """
    machine = data.get("machine_info", {})
    lines = [
        "# Aho-Corasick Benchmark Results",
        "",
        f"**Python**: {machine.get('python_version', 'Unknown')}",
        "",
        "| Benchmark | Mean (ms) | Rounds | Patterns | Nodes | Symbols | Matches | Symbols/s |",
        "|-----------|-----------|--------|----------|-------|---------|---------|-----------|",
    ]
    for bench in data.get("benchmarks", []):
        mean = bench["stats"]["mean"]
        info = bench.get("extra_info", {})
        cells = [f"{info[key]:,}" if key in info else "-" for key in COLUMNS]
        if "symbols" in info and mean > 0:
            rate = f"{info['symbols'] / mean:,.0f}"
        else:
            rate = "-"
        lines.append(
            f"| {bench['name'].replace('test_', '')} | {mean * 1000:.2f} | "
            f"{bench['stats']['rounds']} | " + " | ".join(cells) + f" | {rate} |"
        )
    return "\n".join(lines) + "\n"


def write_report() -> int:
    if not RESULTS_JSON.exists():
        print(f"No results at {RESULTS_JSON}; run with --report first.", file=sys.stderr)
        return 1
    report = render_report(json.loads(RESULTS_JSON.read_text()))
    REPORT_MD.write_text(report)
    print(report)
    print(f"Report saved to: {REPORT_MD}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Run Aho-Corasick benchmarks")
    parser.add_argument("--report", action="store_true",
                        help="Save JSON results and write a markdown report")
    parser.add_argument("--report-only", action="store_true",
                        help="Write the markdown report from existing JSON results")
    parser.add_argument("--compare", action="store_true",
                        help="Compare against the last autosaved run")
    parser.add_argument("--no-save", action="store_true",
                        help="Don't autosave results for later comparison")
    args = parser.parse_args()

    if args.report_only:
        return write_report()

    cmd = benchmark_command(report=args.report, compare=args.compare,
                            save=not args.no_save)
    print("Running benchmarks...")
    print(f"Command: {' '.join(cmd)}\n")
    exit_code = subprocess.run(cmd, cwd=HERE).returncode

    if args.report and exit_code == 0:
        exit_code = write_report()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
