from __future__ import annotations

import argparse
from pathlib import Path

from clean_match.datasets import TwoSourceDatasetGenerator, write_reference_dataset


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate two overlapping synthetic person sources")
    parser.add_argument("--size", type=int, default=10000)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--overlap-rate", type=float, default=0.5)
    parser.add_argument("--output-dir", type=Path, default=Path("data/reference"))
    args = parser.parse_args()

    dataset = TwoSourceDatasetGenerator(seed=args.seed).generate(
        size=args.size,
        overlap_rate=args.overlap_rate,
    )
    write_reference_dataset(dataset, args.output_dir)


if __name__ == "__main__":
    main()
