# ------------------------------------------------------------
# Author      : Tyson Limato
# Date        : 2025-7-08
# File Name   : measure_speedup.py
# Description : Runs main.py several times for each process count, averages
#               the reported dot product time and prints the speedup over
#               the 1-process run.
#
# Usage       : python measure_speedup.py --n 3000000 --procs 1 2 4 --runs 10
#               [--csv speedup.csv] [--plot speedup.png]
# ------------------------------------------------------------
import argparse
import os
import re
import shlex
import subprocess
import sys

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

MAIN_SCRIPT = os.path.join(os.path.dirname(os.path.abspath(__file__)), "main.py")
TIMING_PATTERN = re.compile(r"Dot product computation took\s+([0-9.eE+-]+)\s+seconds")


def build_command(procs: int, n: int, scalar: float, launcher: str = "mpiexec -n {procs}",
                  python: str = sys.executable, script: str = MAIN_SCRIPT):
    """Command line that runs one parallel execution with `procs` ranks."""
    cmd = shlex.split(launcher.format(procs=procs)) if launcher else []
    return cmd + [python, script, str(n), str(scalar)]


def parse_elapsed(output: str) -> float:
    """Extract the dot product time from the report printed by rank 0."""
    match = TIMING_PATTERN.search(output)
    if match is None:
        raise ValueError("no 'Dot product computation took' line in output")
    return float(match.group(1))


def run_once(cmd) -> float:
    """
    Execute one run and return its reported time.

    Raises:
    -------
    RuntimeError
        If the run fails or prints no timing line.
    """
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        raise RuntimeError(
            f"'{' '.join(cmd)}' exited with status {result.returncode}: "
            f"{result.stderr.strip()}")
    try:
        return parse_elapsed(result.stdout)
    except ValueError as err:
        raise RuntimeError(f"'{' '.join(cmd)}': {err}") from err


def collect_times(proc_counts, n: int, scalar: float, runs: int = 10,
                  launcher: str = "mpiexec -n {procs}", runner=run_once) -> pd.DataFrame:
    """
    Time `runs` executions for every process count.

    Returns:
    --------
    pd.DataFrame
        One row per run with columns `procs`, `run`, `seconds`.
    """
    rows = []
    for procs in proc_counts:
        cmd = build_command(procs, n, scalar, launcher)
        print(f"Running with {procs} process(es): {' '.join(cmd)}")
        for i in range(1, runs + 1):
            seconds = runner(cmd)
            rows.append({"procs": procs, "run": i, "seconds": seconds})
            print(f"  run {i}: {seconds:f} seconds", flush=True)
    return pd.DataFrame(rows, columns=["procs", "run", "seconds"])


def summarize(times: pd.DataFrame) -> pd.DataFrame:
    """
    Average time per process count, speedup and parallel efficiency.

    The 1-process average is the sequential baseline; without it the
    smallest process count is used.
    """
    summary = (times.groupby("procs")["seconds"]
               .agg(avg_seconds="mean", min_seconds="min", max_seconds="max")
               .reset_index()
               .sort_values("procs"))
    baseline = summary["avg_seconds"].iloc[0]
    summary["speedup"] = baseline / summary["avg_seconds"]
    summary["efficiency"] = summary["speedup"] / (summary["procs"] / summary["procs"].iloc[0])
    return summary.reset_index(drop=True)


def plot_speedup(summary: pd.DataFrame, filename: str = "speedup.png"):
    """
    Bar chart of the average time per process count with the speedup on a
    second axis, saved to `filename`.
    """
    fig, ax1 = plt.subplots(figsize=(8, 5))
    labels = [str(p) for p in summary["procs"]]

    ax1.bar(labels, summary["avg_seconds"], label='Avg time (s)')
    ax1.set_xlabel('Processes')
    ax1.set_ylabel('Dot Product Time (s)')

    ax2 = ax1.twinx()
    ax2.plot(labels, summary["speedup"], label='Speedup',
             linestyle='--', marker='o', color='tab:orange')
    ax2.set_ylabel('Speedup')

    # Combine legends
    lines1, labels1 = ax1.get_legend_handles_labels()
    lines2, labels2 = ax2.get_legend_handles_labels()
    ax1.legend(lines1 + lines2, labels1 + labels2, loc='upper left', fontsize='small')

    plt.title('Parallel Dot Product Time & Speedup')
    fig.tight_layout()
    fig.savefig(filename)
    plt.close(fig)


def build_parser():
    parser = argparse.ArgumentParser(description="Measure the speedup of main.py.")
    parser.add_argument('--n', type=int, default=3_000_000, help="order of the vectors")
    parser.add_argument('--scalar', type=float, default=2.0)
    parser.add_argument('--procs', type=int, nargs='+', default=[1, 4])
    parser.add_argument('--runs', type=int, default=10)
    parser.add_argument('--launcher', type=str, default="mpiexec -n {procs}",
                        help="launcher prefix, {procs} is replaced by the process count")
    parser.add_argument('--csv', type=str, default=None, help="write every run to this CSV")
    parser.add_argument('--plot', type=str, default=None, help="save a plot to this file")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    for procs in args.procs:
        if args.n % procs != 0:
            raise ValueError(f"--n {args.n} is not divisible by {procs} processes")

    times = collect_times(args.procs, args.n, args.scalar, args.runs, args.launcher)
    summary = summarize(times)

    print("")
    print(summary.to_string(index=False, float_format=lambda v: f"{v:.6f}"))
    print("")
    print(f"Speedup with {summary['procs'].iloc[-1]} processes: "
          f"{summary['speedup'].iloc[-1]:.6f}")

    if args.csv:
        times.to_csv(args.csv, index=False)
        print(f"Run times written to {args.csv}")
    if args.plot:
        plot_speedup(summary, args.plot)
        print(f"Plot saved to {args.plot}")
    return summary


def cli():
    main()


if __name__ == "__main__":
    cli()
