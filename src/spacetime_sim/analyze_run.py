"""Analyze a recorded simulation run and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row or not row.get("type"):
                continue
            event = {
                "tick": int(row["tick"]),
                "t": float(row["t"]),
                "type": row["type"],
                "body": row.get("body") or "",
            }
            details_raw = row.get("details") or ""
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def relative_drift(values: np.ndarray) -> float:
    if values.size == 0:
        return 0.0
    denom = values[0] if abs(values[0]) > 1e-12 else 1.0
    return float((values[-1] - values[0]) / denom)


def summarize_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {}
    for event in events:
        summary[event["type"]] = summary.get(event["type"], 0) + 1
    return summary


def faults_by_body(events: List[dict]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for event in events:
        if event["type"].startswith("fault:"):
            counts[event["body"]] = counts.get(event["body"], 0) + 1
    return counts


def plot_energy(fig_dir: Path, ts: Dict[str, np.ndarray], rel_drift: float) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["energy"], color="#ffa94d", label="Total")
    ax.plot(ts["t"], ts["kinetic"], color="#4dabf7", alpha=0.6, label="Kinetic")
    ax.plot(ts["t"], ts["potential"], color="#9775fa", alpha=0.6, label="Potential")
    ax.set_xlabel("t [sim s]")
    ax.set_ylabel("Energy [sim units]")
    ax.set_title(f"System energy - relative drift dE/E = {rel_drift:.2e}")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "energy.png", dpi=150)
    plt.close(fig)


def plot_faults(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.step(ts["t"], ts["faults"], where="post", color="#f03e3e")
    ax.set_xlabel("t [sim s]")
    ax.set_ylabel("Cumulative faults")
    ax.set_title("Contained stability faults")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "faults.png", dpi=150)
    plt.close(fig)


def plot_grid_depth(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["max_depth"], color="#94d82d")
    ax.set_xlabel("t [sim s]")
    ax.set_ylabel("Deepest well")
    ax.set_title("Grid deformation depth")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "grid_depth.png", dpi=150)
    plt.close(fig)


def print_summary(
    run_dir: Path,
    meta: dict,
    ts: Dict[str, np.ndarray],
    rel_drift: float,
    event_summary: Dict[str, int],
    fault_bodies: Dict[str, int],
) -> None:
    print(f"Run: {run_dir.name}")
    print(f" Scene: {meta.get('scenario_name', 'unknown')}")
    ticks = ts.get("tick", np.array([]))
    if ticks.size:
        print(f" Ticks sampled: {ticks.size} (last tick {int(ticks[-1])})")
    print(f" Relative energy drift dE/E = {rel_drift:.3e}")
    if event_summary:
        print(" Events: " + ", ".join(f"{etype}: {count}" for etype, count in sorted(event_summary.items())))
    else:
        print(" Events: none")
    if fault_bodies:
        print(" Faults per body: " + ", ".join(f"{body}: {n}" for body, n in sorted(fault_bodies.items())))


def resolve_run_dir(run: str | None, runs_dir: Path) -> Path:
    """Locate a run by path or id, or fall back to the last recorded run."""

    if run is None:
        marker = runs_dir / "last_run.txt"
        if not marker.is_file():
            raise FileNotFoundError(f"no run given and {marker} does not exist")
        run = marker.read_text(encoding="utf-8").strip()
        candidates = [runs_dir / run]
    else:
        candidates = [Path(run), runs_dir / run]
    for candidate in candidates:
        if candidate.is_dir():
            return candidate
    raise FileNotFoundError(f"run directory not found: {candidates[-1]}")


def load_run(run_dir: Path) -> tuple[dict, Dict[str, np.ndarray], List[dict]]:
    missing = [
        name
        for name in (META_FILENAME, TIMESERIES_FILENAME, EVENTS_FILENAME)
        if not (run_dir / name).is_file()
    ]
    if missing:
        raise FileNotFoundError(f"{run_dir} is missing {', '.join(missing)}")
    meta = json.loads((run_dir / META_FILENAME).read_text(encoding="utf-8"))
    return meta, load_timeseries(run_dir / TIMESERIES_FILENAME), load_events(run_dir / EVENTS_FILENAME)


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyze a logged run and write figures.")
    parser.add_argument("run_dir", nargs="?", help="Path or id of a run directory")
    parser.add_argument("--runs-dir", default="data/runs", help="Base directory of recorded runs")
    args = parser.parse_args()

    try:
        run_path = resolve_run_dir(args.run_dir, Path(args.runs_dir))
        meta, ts, events = load_run(run_path)
    except FileNotFoundError as exc:
        parser.error(str(exc))

    if not ts or ts["t"].size == 0:
        parser.error("timeseries.csv is empty - nothing to analyze.")

    rel_drift = relative_drift(ts["energy"])
    fig_dir = ensure_fig_dir(run_path)
    plot_energy(fig_dir, ts, rel_drift)
    plot_faults(fig_dir, ts)
    plot_grid_depth(fig_dir, ts)

    print_summary(run_path, meta, ts, rel_drift, summarize_events(events), faults_by_body(events))


if __name__ == "__main__":
    main()
