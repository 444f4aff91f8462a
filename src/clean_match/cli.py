from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from clean_match.clustering import RowColumnClustering
from clean_match.config import AppConfig, ClusteringConfig, LinkageConfig, load_config
from clean_match.datasets import TwoSourceDatasetGenerator, write_reference_dataset
from clean_match.errors import CleanMatchError, InputError
from clean_match.evaluation import evaluate_clusters
from clean_match.interfaces import EmbeddingModel
from clean_match.models import CandidatePair, CleanCleanProblem, Cluster, EntityRecord, SimilarityPairs
from clean_match.runners import LocalLinkagePipeline
from clean_match.steps import (
    CrossSourceVectorIndex,
    EmbeddingCandidateGenerator,
    SbertEmbeddingModel,
    SimpleTextEmbeddingModel,
)

LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run-test" and (args.left_csv is None) != (args.right_csv is None):
        parser.error("--left-csv and --right-csv must be given together")

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = _resolve_config(args.config, args.similarity_threshold)
        if args.command == "run-test":
            run_test(
                config=config,
                size=args.size,
                overlap_rate=args.overlap_rate,
                seed=args.seed,
                left_csv=args.left_csv,
                right_csv=args.right_csv,
                output_dir=args.output_dir,
                embedding_backend=args.embedding_backend,
                show_clusters=args.show_clusters,
            )
        else:
            assign(
                config=config.clustering,
                pairs_csv=args.pairs_csv,
                left_size=args.left_size,
                right_size=args.right_size,
            )
    except CleanMatchError as exc:
        LOGGER.error("%s", exc)
        return 1
    return 0


def run_test(
    *,
    config: AppConfig,
    size: int,
    overlap_rate: float,
    seed: int,
    left_csv: Path | None,
    right_csv: Path | None,
    output_dir: Path,
    embedding_backend: str | None,
    show_clusters: int,
) -> dict[str, object]:
    output_dir.mkdir(parents=True, exist_ok=True)

    true_matches: list[tuple[str, str]] | None = None
    if left_csv is None or right_csv is None:
        dataset = TwoSourceDatasetGenerator(seed=seed).generate(size=size, overlap_rate=overlap_rate)
        left, right, true_matches = dataset.left, dataset.right, dataset.true_matches
        write_reference_dataset(dataset, output_dir)
        print(f"Dataset: {output_dir}")
    else:
        left = _read_records_csv(left_csv)
        right = _read_records_csv(right_csv)

    linkage = config.linkage
    if embedding_backend is not None:
        linkage = linkage.model_copy(update={"embedding_backend": embedding_backend})

    generator = EmbeddingCandidateGenerator(
        embedding_model=_build_embedding_model(linkage),
        vector_index=CrossSourceVectorIndex(),
        min_similarity=linkage.candidate_threshold,
    )
    clustering = RowColumnClustering(config=config.clustering)
    clusters = LocalLinkagePipeline(candidate_generator=generator, clustering=clustering).run(left, right)

    clusters_path = output_dir / "clusters.json"
    summary_path = output_dir / "summary.json"
    _write_json(clusters_path, [asdict(cluster) for cluster in clusters])

    summary = _build_summary(
        left_count=len(left),
        right_count=len(right),
        clustering=clustering,
        clusters=clusters,
        clusters_path=clusters_path,
    )
    if true_matches is not None:
        metrics = evaluate_clusters(clusters, true_matches, left_ids=[r.record_id for r in left])
        summary["precision"] = round(metrics.precision, 4)
        summary["recall"] = round(metrics.recall, 4)
        summary["f1"] = round(metrics.f1, 4)
    _write_json(summary_path, summary)

    print(f"Clusters: {clusters_path}")
    print(f"Summary: {summary_path}")
    print("---")
    for key, value in summary.items():
        if key.endswith("_path"):
            continue
        print(f"{key}={value}")
    if show_clusters > 0:
        print("---")
        print("sample_clusters=")
        print(json.dumps(_cluster_sample_payload(clusters, left + right, limit=show_clusters), indent=2))
    return summary


def assign(*, config: ClusteringConfig, pairs_csv: Path, left_size: int, right_size: int) -> list[Cluster]:
    pairs = _read_pairs_csv(pairs_csv)
    clustering = RowColumnClustering(config=config)
    clusters = clustering.get_duplicates(CleanCleanProblem(left_size=left_size, right_size=right_size), pairs)
    print(json.dumps([asdict(cluster) for cluster in clusters], indent=2))
    return clusters


def _resolve_config(path: Path | None, similarity_threshold: float | None) -> AppConfig:
    config = load_config(path)
    if similarity_threshold is None:
        return config
    clustering = config.clustering.with_threshold(similarity_threshold)
    return config.model_copy(update={"clustering": clustering})


def _build_embedding_model(linkage: LinkageConfig) -> EmbeddingModel:
    if linkage.embedding_backend == "sbert":
        return SbertEmbeddingModel(
            text_fields=linkage.text_fields,
            model_name=linkage.sbert_model,
            batch_size=linkage.sbert_batch_size,
        )
    return SimpleTextEmbeddingModel(text_fields=linkage.text_fields, dimensions=linkage.dimensions)


def _build_summary(
    *,
    left_count: int,
    right_count: int,
    clustering: RowColumnClustering,
    clusters: list[Cluster],
    clusters_path: Path,
) -> dict[str, object]:
    report = clustering.report
    return {
        "method": clustering.method_info,
        "left_record_count": left_count,
        "right_record_count": right_count,
        "candidate_pair_count": report.comparisons,
        "similarity_threshold": clustering.config.similarity_threshold,
        "chosen_scan": report.chosen_scan,
        "row_scan_cost": report.row_scan_cost,
        "column_scan_cost": report.column_scan_cost,
        "match_count": len(report.emission.edges),
        "duplicate_conflict_count": len(report.emission.conflicts),
        "cluster_count": len(clusters),
        "clusters_path": str(clusters_path),
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clean-match", description="Clean-clean entity matching CLI")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--similarity-threshold", type=float, default=None)
    parser.add_argument("--log-level", default="INFO")
    subparsers = parser.add_subparsers(dest="command")

    run_test_parser = subparsers.add_parser(
        "run-test",
        help="Generate or load two sources, link them, and output clusters + summary",
    )
    run_test_parser.add_argument("--size", type=int, default=500)
    run_test_parser.add_argument("--overlap-rate", type=float, default=0.5)
    run_test_parser.add_argument("--seed", type=int, default=42)
    run_test_parser.add_argument("--left-csv", type=Path, default=None)
    run_test_parser.add_argument("--right-csv", type=Path, default=None)
    run_test_parser.add_argument("--output-dir", type=Path, default=Path("data/cli_output"))
    run_test_parser.add_argument("--embedding-backend", choices=["hashing", "sbert"], default=None)
    run_test_parser.add_argument("--show-clusters", type=int, default=5)

    assign_parser = subparsers.add_parser(
        "assign",
        help="Cluster a CSV of scored pairs (LEFT_INDEX, RIGHT_INDEX, SIMILARITY)",
    )
    assign_parser.add_argument("pairs_csv", type=Path)
    assign_parser.add_argument("--left-size", type=int, required=True)
    assign_parser.add_argument("--right-size", type=int, required=True)

    return parser


def _write_json(path: Path, payload: object) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)


def _read_records_csv(path: Path) -> list[EntityRecord]:
    records: list[EntityRecord] = []
    try:
        with path.open("r", newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            for row in reader:
                record_id = row.get("RECORD_ID")
                if not record_id:
                    continue
                attrs = {k: v for k, v in row.items() if k != "RECORD_ID"}
                records.append(EntityRecord(record_id=record_id, attributes=attrs))
    except OSError as exc:
        raise InputError(f"Cannot read records file {path}: {exc}") from exc
    return records


def _read_pairs_csv(path: Path) -> SimilarityPairs:
    pairs: list[CandidatePair] = []
    try:
        with path.open("r", newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            for row in reader:
                try:
                    pairs.append(
                        CandidatePair(
                            left_index=int(row["LEFT_INDEX"]),
                            right_index=int(row["RIGHT_INDEX"]),
                            similarity=float(row["SIMILARITY"]),
                        )
                    )
                except KeyError as exc:
                    raise InputError(f"{path}:{reader.line_num}: missing column {exc}") from exc
                except (TypeError, ValueError) as exc:
                    raise InputError(f"{path}:{reader.line_num}: malformed row: {exc}") from exc
    except OSError as exc:
        raise InputError(f"Cannot read pairs file {path}: {exc}") from exc
    return SimilarityPairs(pairs)


def _cluster_sample_payload(
    clusters: list[Cluster],
    records: list[EntityRecord],
    limit: int = 5,
) -> list[dict[str, Any]]:
    by_id = {record.record_id: record for record in records}
    ranked = sorted(clusters, key=lambda cluster: (-cluster.confidence, cluster.cluster_id))
    payload: list[dict[str, Any]] = []

    for cluster in ranked[:limit]:
        payload.append(
            {
                "cluster_id": cluster.cluster_id,
                "confidence": round(cluster.confidence, 4),
                "records": [
                    {"record_id": record_id, **by_id[record_id].attributes}
                    for record_id in cluster.record_ids
                    if record_id in by_id
                ],
            }
        )
    return payload


if __name__ == "__main__":
    sys.exit(main())
