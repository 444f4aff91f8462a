from __future__ import annotations

import csv
import random
from dataclasses import dataclass
from pathlib import Path

from clean_match.models import EntityRecord

REFERENCE_COLUMNS = ["FIRSTNAME", "LASTNAME", "ADDRESS", "TOWN", "POSTCODE", "EMAIL"]

_FIRST_NAMES = [
    "Dominique",
    "Luke",
    "Alex",
    "Sofia",
    "Maya",
    "Daniel",
    "Emma",
    "Chris",
    "Olivia",
    "Noah",
]
_LAST_NAMES = [
    "Smith",
    "Johnson",
    "Brown",
    "Taylor",
    "Wilson",
    "Davies",
    "Martin",
    "Thomas",
]
_STREETS = [
    "Luke Street",
    "Maple Road",
    "King Avenue",
    "River Lane",
    "Elm Street",
    "Station Road",
]
_TOWNS = ["London", "Manchester", "Leeds", "Bristol", "Birmingham", "Dublin"]
_DOMAINS = ["gmail.com", "outlook.com", "yahoo.com", "example.com"]


@dataclass(slots=True)
class ReferenceDataset:
    """Two duplicate-free sources plus the record pairs that truly match."""

    left: list[EntityRecord]
    right: list[EntityRecord]
    true_matches: list[tuple[str, str]]


class TwoSourceDatasetGenerator:
    """Generate two overlapping synthetic sources for tests and benchmarks.

    Every person appears at most once per source. An ``overlap_rate`` share of
    the left source reappears in the right source as a perturbed copy; the
    remainder of the right source is made of people unknown to the left.
    """

    def __init__(self, seed: int = 7) -> None:
        self._rng = random.Random(seed)

    def generate(self, size: int, overlap_rate: float = 0.5) -> ReferenceDataset:
        if size <= 0:
            return ReferenceDataset(left=[], right=[], true_matches=[])

        overlap_count = max(0, min(size, int(size * overlap_rate)))
        profiles = [self._profile(i) for i in range(2 * size - overlap_count)]

        left = [
            EntityRecord(record_id=f"a_{i:06d}", attributes=dict(profiles[i]))
            for i in range(size)
        ]

        right: list[EntityRecord] = []
        true_matches: list[tuple[str, str]] = []
        shared = self._rng.sample(range(size), overlap_count)
        for n, profile_idx in enumerate(shared):
            attrs = dict(profiles[profile_idx])
            self._perturb(attrs)
            record_id = f"b_{n:06d}"
            right.append(EntityRecord(record_id=record_id, attributes=attrs))
            true_matches.append((left[profile_idx].record_id, record_id))
        for profile_idx in range(size, len(profiles)):
            record_id = f"b_{len(right):06d}"
            right.append(EntityRecord(record_id=record_id, attributes=dict(profiles[profile_idx])))

        self._rng.shuffle(left)
        self._rng.shuffle(right)
        return ReferenceDataset(left=left, right=right, true_matches=sorted(true_matches))

    def _profile(self, idx: int) -> dict[str, str]:
        first_name = self._rng.choice(_FIRST_NAMES)
        last_name = self._rng.choice(_LAST_NAMES)
        street = self._rng.choice(_STREETS)
        house_no = str(1 + (idx % 180))
        email_local = f"{first_name}.{last_name}{idx % 97}".lower()

        return {
            "FIRSTNAME": first_name,
            "LASTNAME": last_name,
            "ADDRESS": f"{house_no} {street}",
            "TOWN": self._rng.choice(_TOWNS),
            "POSTCODE": f"{10000 + (idx % 89999)}",
            "EMAIL": f"{email_local}@{self._rng.choice(_DOMAINS)}",
        }

    def _perturb(self, attrs: dict[str, str]) -> None:
        mutation = self._rng.choice(["email", "name", "address", "mixed"])

        if mutation in {"email", "mixed"}:
            attrs["EMAIL"] = self._email_variant(attrs["EMAIL"])
        if mutation in {"name", "mixed"}:
            self._name_variant(attrs)
        if mutation in {"address", "mixed"}:
            attrs["ADDRESS"] = self._address_variant(attrs["ADDRESS"])

    def _email_variant(self, email: str) -> str:
        local, domain = email.split("@", maxsplit=1)
        variant = self._rng.choice(["plus", "dot", "case"])

        if variant == "plus":
            suffix = self._rng.choice(["test", "shop", "vip"])
            return f"{local}+{suffix}@{domain}"
        if variant == "dot" and len(local) > 3 and "." not in local:
            insert_at = max(1, len(local) // 2)
            return f"{local[:insert_at]}.{local[insert_at:]}@{domain}"
        return f"{local.capitalize()}@{domain}"

    def _name_variant(self, attrs: dict[str, str]) -> None:
        first = attrs["FIRSTNAME"]
        if first.lower().startswith("dom"):
            attrs["FIRSTNAME"] = self._rng.choice(["Dom", "Dominique"])
        elif len(first) > 4:
            attrs["FIRSTNAME"] = first[:3]
        else:
            expansion = {"alex": "Alexander", "chris": "Christopher", "noah": "Noa"}
            attrs["FIRSTNAME"] = expansion.get(first.lower(), first)

        last = attrs["LASTNAME"]
        attrs["LASTNAME"] = self._rng.choice([last.upper(), last.lower(), last[:-1] if len(last) > 4 else last])

    def _address_variant(self, address: str) -> str:
        if "Street" in address:
            variant = address.replace("Street", "St")
        elif "Road" in address:
            variant = address.replace("Road", "Rd")
        else:
            variant = address
        if self._rng.random() < 0.6:
            variant = f"{variant}, Top floor"
        return variant


def write_reference_dataset(dataset: ReferenceDataset, output_dir: Path) -> None:
    """Write ``left.csv``, ``right.csv`` and ``true_matches.csv`` into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    _write_records(output_dir / "left.csv", dataset.left)
    _write_records(output_dir / "right.csv", dataset.right)
    with (output_dir / "true_matches.csv").open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["LEFT_RECORD_ID", "RIGHT_RECORD_ID"])
        writer.writerows(dataset.true_matches)


def _write_records(path: Path, records: list[EntityRecord]) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=["RECORD_ID", *REFERENCE_COLUMNS])
        writer.writeheader()
        for record in records:
            writer.writerow({"RECORD_ID": record.record_id, **record.attributes})
