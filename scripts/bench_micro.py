from __future__ import annotations

import argparse
import csv
import json
import sys
import time
from pathlib import Path
from statistics import mean, pstdev


def _fmt_mu_sigma(vals):
    mu = mean(vals)
    sd = pstdev(vals) if len(vals) > 1 else 0.0
    return f"{mu:.4f} ± {sd:.4f}"


def _train_one(batch_size: int, seed: int, samples: int, eta: float) -> dict:
    import numpy as np

    from backpropnet.core.network import Network
    from backpropnet.data.xor import make_xor_dataset, xor_truth_table
    from backpropnet.training.evaluation import within_tolerance
    from backpropnet.training.trainer import SGDTrainer

    rng = np.random.default_rng(seed)
    network = Network([2, 3, 1], rng=rng)
    losses: list[float] = []
    trainer = SGDTrainer(network, callbacks=[lambda step, m: losses.append(m["loss"])])
    start = time.perf_counter()
    result = trainer.sgd(
        make_xor_dataset(samples, rng),
        eta,
        batch_size,
        test_data=xor_truth_table(),
        predicate=within_tolerance(0.1),
    )
    elapsed = time.perf_counter() - start
    return {
        "final_loss": float(mean(losses[-16:])) if losses else 0.0,
        "final_acc": result.score.accuracy,
        "seconds": elapsed,
    }


def main():
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    ap = argparse.ArgumentParser()
    ap.add_argument("--seeds", nargs="+", type=int, default=[123, 124, 125])
    ap.add_argument("--batch-sizes", nargs="+", type=int, default=[1, 3, 10])
    ap.add_argument("--samples", type=int, default=2000)
    ap.add_argument("--eta", type=float, default=3.0)
    ap.add_argument("--out", type=str, default=".artifacts/bench")
    args = ap.parse_args()

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    runs = []
    for batch_size in args.batch_sizes:
        for s in args.seeds:
            r = _train_one(batch_size, seed=s, samples=args.samples, eta=args.eta)
            runs.append({"batch_size": batch_size, "seed": s, **r})
    (out / "results.jsonl").write_text(
        "\n".join(json.dumps(x) for x in runs), encoding="utf-8"
    )

    csv_path = out / "bench_micro.csv"
    md_lines = [
        "### Micro-benchmark: XOR SGD by batch size",
        "",
        f"- Seeds: `{args.seeds}`; Samples: `{args.samples}`; Eta: `{args.eta}`",
        "",
        "| Batch size | Final cost (μ±σ) | Accuracy (μ±σ) | Seconds (μ±σ) | Seeds |",
        "|---:|---:|---:|---:|---:|",
    ]
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["batch_size", "seeds", "final_loss_mu", "final_acc_mu", "seconds_mu"])
        for batch_size in args.batch_sizes:
            group = [r for r in runs if r["batch_size"] == batch_size]
            fl = [r["final_loss"] for r in group]
            fa = [r["final_acc"] for r in group]
            secs = [r["seconds"] for r in group]
            w.writerow(
                [
                    batch_size,
                    len(group),
                    f"{mean(fl):.4f}",
                    f"{mean(fa):.4f}",
                    f"{mean(secs):.4f}",
                ]
            )
            md_lines.append(
                f"| {batch_size} | {_fmt_mu_sigma(fl)} | {_fmt_mu_sigma(fa)} | "
                f"{_fmt_mu_sigma(secs)} | {len(group)} |"
            )

    md_path = out / "bench_micro.md"
    md_path.write_text("\n".join(md_lines), encoding="utf-8")
    print("Wrote:", csv_path, md_path)


if __name__ == "__main__":
    main()
