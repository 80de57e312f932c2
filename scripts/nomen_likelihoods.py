#!/usr/bin/env python3
"""Naive-Bayes likelihood ratios for nomenclatural reference features.

Reads pre-aggregated label and feature-value counts (``bayes.json``) and
prints one ``feature:value,likelihood`` line per observed feature value.
"""

from __future__ import annotations

import argparse
import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from nltk.probability import ConditionalFreqDist, FreqDist

FEATURES = ("annot", "title", "vol", "yrPage", "bestRes", "resNum")
IS_NOMEN = "isNomen"
NOT_NOMEN = "notNomen"
LABELS = (IS_NOMEN, NOT_NOMEN)


@dataclass
class CountsDocument:
    label_cases: FreqDist
    feature_cases: dict[str, ConditionalFreqDist]


def _count(record: Any, label: str, where: str) -> float:
    if not isinstance(record, dict) or label not in record:
        raise ValueError(f"{where}.{label} is missing")
    value = record[label]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}.{label} is not a number: {value!r}")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ValueError(f"{where}.{label} is out of range") from exc
    if not math.isfinite(number):
        raise ValueError(f"{where}.{label} is not finite: {value!r}")
    return number


def label_counts(record: Any, where: str) -> FreqDist:
    return FreqDist({label: _count(record, label, where) for label in LABELS})


def parse_counts(payload: Any) -> CountsDocument:
    if not isinstance(payload, dict):
        raise ValueError("counts document is not a JSON object")
    if not isinstance(payload.get("labelCases"), dict):
        raise ValueError("labelCases is missing")
    if not isinstance(payload.get("featureCases"), dict):
        raise ValueError("featureCases is missing")

    totals = label_counts(payload["labelCases"], "labelCases")
    for label in LABELS:
        # label totals are the denominators of every class-conditional frequency
        if totals[label] <= 0:
            raise ValueError(f"labelCases.{label} must be positive")

    feature_cases: dict[str, ConditionalFreqDist] = {}
    for feature in FEATURES:
        values = payload["featureCases"].get(feature)
        if not isinstance(values, dict):
            raise ValueError(f"featureCases.{feature} is missing")
        cfd = ConditionalFreqDist()
        for value, record in values.items():
            cfd[value] = label_counts(record, f"featureCases.{feature}.{value}")
        feature_cases[feature] = cfd
    return CountsDocument(label_cases=totals, feature_cases=feature_cases)


def load_counts(path: Path) -> CountsDocument:
    return parse_counts(json.loads(path.read_text(encoding="utf-8")))


def _divide(num: float, den: float) -> float:
    if den:
        return num / den
    if num == 0 or math.isnan(num):
        return math.nan
    return math.copysign(math.inf, num)


def likelihood(counts: FreqDist, totals: FreqDist) -> float:
    nomen = counts[IS_NOMEN] / totals[IS_NOMEN]
    not_nomen = counts[NOT_NOMEN] / totals[NOT_NOMEN]
    return _divide(nomen, not_nomen)


def likelihoods(doc: CountsDocument) -> list[tuple[str, str, float]]:
    out: list[tuple[str, str, float]] = []
    for feature in FEATURES:
        for value, counts in doc.feature_cases[feature].items():
            out.append((feature, value, likelihood(counts, doc.label_cases)))
    return out


def prior_odds(doc: CountsDocument) -> float:
    return doc.label_cases[IS_NOMEN] / doc.label_cases[NOT_NOMEN]


def format_line(feature: str, value: str, ratio: float) -> str:
    return f"{feature}:{value},{ratio:.3f}"


def report(doc: CountsDocument) -> list[str]:
    return [format_line(feature, value, ratio) for feature, value, ratio in likelihoods(doc)]


def _json_number(value: float) -> float | None:
    # inf and nan have no JSON spelling
    if not math.isfinite(value):
        return None
    return round(value, 6)


def report_json(doc: CountsDocument) -> dict[str, Any]:
    rows = []
    for feature, value, ratio in likelihoods(doc):
        counts = doc.feature_cases[feature][value]
        rows.append(
            {
                "feature": feature,
                "value": value,
                IS_NOMEN: counts[IS_NOMEN],
                NOT_NOMEN: counts[NOT_NOMEN],
                "likelihood": _json_number(ratio),
            }
        )
    return {
        "labelCases": {label: doc.label_cases[label] for label in LABELS},
        "priorOdds": _json_number(prior_odds(doc)),
        "likelihoods": rows,
    }


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--input", type=Path, default=Path("bayes.json"))
    parser.add_argument("--format", choices=["csv", "json"], default="csv")
    args = parser.parse_args()

    try:
        doc = load_counts(args.input)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"cannot load counts from {args.input}: {exc}") from exc

    if args.format == "json":
        print(json.dumps(report_json(doc), indent=2, allow_nan=False))
        return
    for line in report(doc):
        print(line)


if __name__ == "__main__":
    main()
