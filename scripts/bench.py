#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import glob
import json
import os
import platform
import subprocess
import sys
import time
from typing import Any, Dict, List, Optional

# Ensure src/ is importable when running directly
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from tumblestone import __version__
from tumblestone.engine.board import Board
from tumblestone.search.service import SolveResult, SolveService


DEFAULT_PUZZLES = os.path.join(REPO_ROOT, "assets", "puzzles", "*.tsb")


def _git_info() -> Dict[str, Optional[str]]:
    def run(cmd: List[str]) -> Optional[str]:
        try:
            out = subprocess.check_output(cmd, cwd=REPO_ROOT, stderr=subprocess.DEVNULL)
            return out.decode().strip()
        except (OSError, subprocess.CalledProcessError):
            return None

    return {
        "commit": run(["git", "rev-parse", "HEAD"]),
        "describe": run(["git", "describe", "--dirty", "--tags", "--always"]),
    }


def bench_puzzle(svc: SolveService, path: str, *, iterations: int) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    board = Board.from_tsb(text)

    total_time = 0
    total_nodes = 0
    last: Optional[SolveResult] = None
    for _ in range(max(1, iterations)):
        res = svc.solve(board)
        total_time += max(0, res.time_ms)
        total_nodes += max(0, res.nodes)
        last = res

    assert last is not None
    avg_time = int(total_time / max(1, iterations))
    avg_nodes = int(total_nodes / max(1, iterations))
    return {
        "id": os.path.splitext(os.path.basename(path))[0],
        "width": board.width,
        "height": board.height,
        "stones": board.removable_stones(),
        "solvable": last.solvable,
        "moves": [m.to_str() for m in last.moves or []],
        "time_ms": avg_time,
        "nodes": avg_nodes,
        "nps": int(avg_nodes * 1000 / avg_time) if avg_time > 0 else 0,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Time the solver over a set of TSB boards")
    parser.add_argument("--puzzles", default=DEFAULT_PUZZLES, help="Glob of .tsb files")
    parser.add_argument(
        "--iterations", type=int, default=1, help="Repeat runs per board and average"
    )
    parser.add_argument("--out", type=str, default=None, help="Write JSON results to file path")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    parser.add_argument(
        "--progress", action="store_true", help="Print per-board progress to stderr"
    )
    args = parser.parse_args()

    paths = sorted(glob.glob(args.puzzles))
    if not paths:
        raise SystemExit("No puzzles matched")

    svc = SolveService()
    results: List[Dict[str, Any]] = []
    t0 = time.perf_counter()
    for idx, path in enumerate(paths, start=1):
        if args.progress:
            sys.stderr.write(f"[{idx}/{len(paths)}] {path}: running...\n")
            sys.stderr.flush()
        res = bench_puzzle(svc, path, iterations=max(1, args.iterations))
        results.append(res)
        if args.progress:
            sys.stderr.write(
                f"    solvable={res['solvable']} time={res['time_ms']}ms nodes={res['nodes']}\n"
            )
            sys.stderr.flush()

    dt_ms = int((time.perf_counter() - t0) * 1000)
    payload = {
        "meta": {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "python": sys.version.split()[0],
            "platform": platform.platform(),
            "git": _git_info(),
            "solver": {"version": __version__},
            "config": {"puzzles": args.puzzles, "iterations": max(1, args.iterations)},
        },
        "results": results,
        "summary": {
            "puzzles": len(results),
            "solvable": sum(1 for r in results if r["solvable"]),
            "total_time_ms": dt_ms,
            "total_nodes": sum(r["nodes"] for r in results),
        },
    }

    if args.out:
        out_dir = os.path.dirname(args.out)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2 if args.pretty else None)
        print(args.out)
    else:
        print(json.dumps(payload, indent=2 if args.pretty else None))


if __name__ == "__main__":
    main()
