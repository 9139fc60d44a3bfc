from __future__ import annotations

import argparse
import statistics
import time
from dataclasses import dataclass, replace
from typing import Callable, List

import numpy as np

from clean_onnx import DetectionDecoder, TensorEncoder, yolo11s_config


@dataclass(frozen=True)
class TimingSummary:
    n: int
    mean_ms: float
    p50_ms: float
    p95_ms: float


def _percentile(sorted_values: List[float], q: float) -> float:
    if not sorted_values:
        raise ValueError("No values provided.")
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    # Linear interpolation between closest ranks.
    pos = (q / 100.0) * (len(sorted_values) - 1)
    lo = int(np.floor(pos))
    hi = int(np.ceil(pos))
    if lo == hi:
        return float(sorted_values[lo])
    t = pos - lo
    return float(sorted_values[lo] * (1.0 - t) + sorted_values[hi] * t)


def _time(fn: Callable[[], object], repeats: int) -> TimingSummary:
    ms: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        ms.append((time.perf_counter() - t0) * 1000.0)
    ms.sort()
    return TimingSummary(
        n=len(ms),
        mean_ms=float(statistics.fmean(ms)),
        p50_ms=_percentile(ms, 50.0),
        p95_ms=_percentile(ms, 95.0),
    )


def _format_summary(label: str, s: TimingSummary) -> str:
    return f"{label}: n={s.n} mean={s.mean_ms:.3f}ms p50={s.p50_ms:.3f}ms p95={s.p95_ms:.3f}ms"


def _synthetic_output(slots: int, num_classes: int, hits: int, size: int, rng: np.random.Generator) -> np.ndarray:
    """
    Raw (4 + C, slots) output where `hits` slots score above any sane threshold.
    """

    out = np.zeros((4 + num_classes, slots), dtype=np.float32)
    out[0] = rng.uniform(0, size, slots)
    out[1] = rng.uniform(0, size, slots)
    out[2] = rng.uniform(8, size / 4, slots)
    out[3] = rng.uniform(8, size / 4, slots)
    out[4:] = rng.uniform(0.0, 0.2, (num_classes, slots))
    chosen = rng.choice(slots, size=min(hits, slots), replace=False)
    out[4 + rng.integers(0, num_classes, chosen.size), chosen] = rng.uniform(0.5, 1.0, chosen.size)
    return out


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark tensor encoding and detection decoding on synthetic data.")
    parser.add_argument("--repeats", type=int, default=50, help="Timed iterations per measurement.")
    parser.add_argument("--hits", type=int, default=300, help="Slots scoring above the confidence threshold.")
    parser.add_argument("--width", type=int, default=1920, help="Synthetic source image width.")
    parser.add_argument("--height", type=int, default=1080, help="Synthetic source image height.")
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    if args.repeats < 1:
        raise ValueError("--repeats must be >= 1")

    rng = np.random.default_rng(args.seed)
    model_cfg = yolo11s_config()

    image = rng.integers(0, 256, (args.height, args.width, 3), dtype=np.uint8)
    encoder = TensorEncoder(model_cfg.encoding)
    tensor = np.empty(model_cfg.encoding.tensor_shape, dtype=np.float32)
    print(_format_summary("encode", _time(lambda: encoder.encode(image, tensor), args.repeats)))

    output = _synthetic_output(
        model_cfg.decoding.detection_slots,
        model_cfg.decoding.num_classes,
        args.hits,
        model_cfg.encoding.target_width,
        rng,
    )
    ascending = DetectionDecoder(model_cfg.decoding)
    descending = DetectionDecoder(replace(model_cfg.decoding, keep_highest_confidence=True))
    print(_format_summary("decode (ascending merge)", _time(lambda: ascending.decode(output, args.width, args.height), args.repeats)))
    print(_format_summary("decode (best-first merge)", _time(lambda: descending.decode(output, args.width, args.height), args.repeats)))
    print(f"boxes kept: ascending={len(ascending.decode(output, args.width, args.height))} "
          f"best-first={len(descending.decode(output, args.width, args.height))}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
