"""
Huffman text codec experiments

Runs the codec over synthetic text datasets, with repeated runs, and records
how close the code gets to the entropy of each source and how long each
stage takes

Outputs (in --outdir):
  - metrics.csv     (raw row per run per dataset/size)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --sizes_kb 1,4,16,64
  python experiments.py --outdir results --generators english_like,unicode_mixed --no_plots
"""

from __future__ import annotations

import argparse
import csv
import math
import random
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

import huffman as huff


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def shannon_entropy(frequency_table: Dict[str, int]) -> float:
    """
    Bits per symbol of an ideal code for this frequency table
    """
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    h = 0.0
    for count in frequency_table.values():
        p = count / total
        h -= p * math.log2(p)
    return h

def average_code_length(frequency_table: Dict[str, int], symbol_to_code: Dict[str, str]) -> float:
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    return sum(count * len(symbol_to_code[s]) for s, count in frequency_table.items()) / total


# Synthetic dataset generators

ENGLISH_CHARS = (
    " etaoinshrdlcumwfgypbvkjxq"
    "ETAOINSHRDLCUMWFGYPBVKJXQ"
    ".,\n"
)

UNICODE_CHARS = "aeiouαβγδεжзийкあいうえお漢字한국😀🚀"

def _sample_weighted(rng: random.Random, chars: str, weights: List[float], size: int) -> str:
    return "".join(rng.choices(chars, weights=weights, k=size))

def gen_uniform_ascii(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = "".join(chr(c) for c in range(32, 127))
    return "".join(rng.choice(chars) for _ in range(size))

def gen_zipf_letters(size: int, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    weights = [1.0 / ((i + 1) ** s) for i in range(len(chars))]
    return _sample_weighted(rng, chars, weights, size)

def gen_repetitive(size: int, dominant: str = "A", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = [chr(c) for c in range(33, 127) if chr(c) != dominant]
    out = []
    for _ in range(size):
        if rng.random() < dom_frac:
            out.append(dominant)
        else:
            out.append(rng.choice(others))
    return "".join(out)

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    weights = []
    for ch in ENGLISH_CHARS:
        if ch == " ":
            weights.append(13.0)
        elif ch in ".,\n":
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    return _sample_weighted(rng, ENGLISH_CHARS, weights, size)

def gen_unicode_mixed(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    weights = [1.0 / (i + 1) for i in range(len(UNICODE_CHARS))]
    return _sample_weighted(rng, UNICODE_CHARS, weights, size)

def gen_single_symbol(size: int, seed: int = 0) -> str:
    return "a" * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform_ascii": lambda size, seed: gen_uniform_ascii(size, seed=seed),
    "zipf_letters": lambda size, seed: gen_zipf_letters(size, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant="A", dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant="A", dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "unicode_mixed": lambda size, seed: gen_unicode_mixed(size, seed=seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size, seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, str]:
    """
    Unknown dataset names fall back to uniform_ascii, under a name that says so,
    so one typo does not abort a long run
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform_ascii", gen_uniform_ascii(size, seed=seed)
    return name, fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    dataset_name: str
    size_symbols: int
    run_id: int
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    compressed_bits: int
    bits_per_symbol: float
    entropy_bits: float
    efficiency: float  # entropy / bits_per_symbol, 1.0 is optimal

    prefix_free: int  # 1 or 0
    correctness_ok: int  # 1 or 0


def run_one(text: str) -> MetricRow:
    # Tree + code build
    t0 = now_ns()
    root, ft = huff.build_tree(text)
    symbol_to_code, code_to_symbol = huff.generate_huffman_codes(root)
    t1 = now_ns()
    build_ms = ns_to_ms(t1 - t0)

    # encode
    t2 = now_ns()
    compressed = huff.compress(text, symbol_to_code)
    t3 = now_ns()
    encode_ms = ns_to_ms(t3 - t2)

    # decode
    t4 = now_ns()
    decoded = huff.decompress(compressed, code_to_symbol)
    t5 = now_ns()
    decode_ms = ns_to_ms(t5 - t4)

    bits_per_symbol = average_code_length(ft, symbol_to_code)
    entropy = shannon_entropy(ft)
    efficiency = (entropy / bits_per_symbol) if bits_per_symbol > 0 else 0.0

    return MetricRow(
        dataset_name="",
        size_symbols=len(text),
        run_id=0,
        unique_symbols=len(ft),
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        compressed_bits=len(compressed),
        bits_per_symbol=bits_per_symbol,
        entropy_bits=entropy,
        efficiency=efficiency,
        prefix_free=1 if huff.is_prefix_free(code_to_symbol) else 0,
        correctness_ok=1 if decoded == text else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)

def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by dataset_name, size_symbols and compute mean/stdev
    """
    key_to: Dict[Tuple[str, int], List[MetricRow]] = {}
    for r in rows:
        key_to.setdefault((r.dataset_name, r.size_symbols), []).append(r)

    metrics = ["bits_per_symbol", "entropy_bits", "efficiency", "build_ms", "encode_ms", "decode_ms", "total_ms"]
    summary_fields = ["dataset_name", "size_symbols", "n_runs"]
    for m in metrics:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for (dataset_name, size), items in sorted(key_to.items()):
            row = {"dataset_name": dataset_name, "size_symbols": size, "n_runs": len(items)}
            for m in metrics:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            row["correctness_ok_rate"] = sum(x.correctness_ok for x in items) / len(items)
            w.writerow(row)


# Plotting

def plot_code_length(rows: List[MetricRow], outdir: Path) -> None:
    if not rows:
        return

    datasets = sorted(set(r.dataset_name for r in rows))
    x = list(range(len(datasets)))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    plt.figure()
    plt.plot(x, [mean_for(d, "bits_per_symbol") for d in datasets], marker="o", label="huffman")
    plt.plot(x, [mean_for(d, "entropy_bits") for d in datasets], marker="x", linestyle="--", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Average Code Length vs Entropy by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "code_length_vs_entropy.png", dpi=200)
    plt.close()


def plot_timing(rows: List[MetricRow], outdir: Path) -> None:
    for dist in sorted(set(r.dataset_name for r in rows)):
        dist_rows = [r for r in rows if r.dataset_name == dist]
        sizes = sorted(set(r.size_symbols for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.size_symbols == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for field, label in (("build_ms", "build"), ("encode_ms", "encode"), ("decode_ms", "decode")):
            plt.plot(sizes, [mean_size(s, field) for s in sizes], marker="o", label=label)
        plt.xlabel("Message Size (symbols)")
        plt.ylabel("Time (ms)")
        plt.title(f"Stage Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"timing_{dist}.png", dpi=200)
        plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def run_experiments(generators: List[str], sizes: List[int], runs: int, seed: int) -> List[MetricRow]:
    rows: List[MetricRow] = []
    for gen_name in generators:
        for size in sizes:
            for run_id in range(1, runs + 1):
                dataset_name, text = generate_dataset(gen_name, size, seed + size + run_id)
                row = run_one(text)
                row.dataset_name = dataset_name
                row.run_id = run_id
                rows.append(row)
    return rows

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--sizes_kb", type=str, default="1,4,16,64",
                    help="Comma-separated message sizes in thousands of symbols")
    ap.add_argument("--generators", type=str, default="uniform_ascii,zipf_letters,repetitive90,english_like,unicode_mixed",
                    help="Comma-separated dataset generator names")
    ap.add_argument("--no_plots", action="store_true", help="Only write the CSV files")
    args = ap.parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    sizes = [max(1, int(s)) * 1024 for s in parse_csv_list(args.sizes_kb)]
    rows = run_experiments(parse_csv_list(args.generators), sizes, max(1, args.runs), args.seed)

    # Write raw and summary
    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_code_length(rows, outdir)
        plot_timing(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
