"""Structural validation for chart payloads.

Every check collects issues instead of stopping at the first one; callers
decide whether to raise (``ensure_valid_*``) or just inspect.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, List, Optional, Sequence

from ..errors import MalformedSeriesError
from .types import ChartKind, Series, SeriesPatch

__all__ = [
    "parse_kind",
    "validate_series",
    "validate_patch",
    "ensure_valid_series",
    "ensure_valid_patch",
]


def parse_kind(kind: ChartKind | str) -> ChartKind:
    if isinstance(kind, ChartKind):
        return kind
    try:
        return ChartKind(str(kind).lower())
    except ValueError:
        raise MalformedSeriesError([f"unknown chart kind '{kind}'"]) from None


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _check_label(label: Any, where: str, issues: List[str]) -> None:
    if not isinstance(label, str) or not label.strip():
        issues.append(f"{where}: label must be a non-empty string")


def _check_color(color: Any, where: str, issues: List[str]) -> None:
    if color is not None and (not isinstance(color, str) or not color.strip()):
        issues.append(f"{where}: color must be a non-empty string when given")


def _check_values(values: Sequence[Any], where: str, issues: List[str]) -> None:
    for j, value in enumerate(values):
        if not _is_number(value):
            issues.append(f"{where}: value {j} is not a finite number ({value!r})")


def validate_series(
    kind: ChartKind,
    series: Sequence[Series],
    labels: Optional[Sequence[str]] = None,
) -> List[str]:
    issues: List[str] = []
    if not series:
        return ["at least one series is required"]
    for i, s in enumerate(series):
        where = f"series {i}"
        _check_label(s.label, where, issues)
        _check_color(s.color, where, issues)
        _check_values(s.values, where, issues)
    if kind.slice_based:
        for i, s in enumerate(series):
            if len(s.values) != 1:
                issues.append(f"series {i}: {kind.value} slices take exactly one value")
            elif _is_number(s.values[0]) and s.values[0] < 0:
                issues.append(f"series {i}: {kind.value} slice values must not be negative")
        if not issues and all(s.values[0] == 0 for s in series):
            issues.append(f"{kind.value} needs at least one non-zero slice")
    else:
        lengths = {len(s.values) for s in series}
        if len(lengths) > 1:
            issues.append(f"series lengths differ: {sorted(lengths)}")
        elif 0 in lengths:
            issues.append("series must carry at least one value")
        if labels is not None:
            for j, label in enumerate(labels):
                if not isinstance(label, str):
                    issues.append(f"category label {j} must be a string")
            if len(lengths) == 1 and len(labels) not in lengths:
                issues.append(
                    f"{len(labels)} category labels for {next(iter(lengths))} values per series"
                )
    return issues


def validate_patch(
    kind: ChartKind,
    current: Sequence[Series],
    labels: Sequence[str],
    patch: SeriesPatch,
) -> List[str]:
    """Check a patch against the live chart it targets.

    Slice-based charts may change their slice count, but only when labels and
    values arrive together with matching lengths. Bar/line charts keep their
    series count; category labels must match the per-series value count.
    """
    issues: List[str] = []
    if patch.values is not None:
        for i, values in enumerate(patch.values):
            _check_values(values, f"patch values {i}", issues)
    if patch.colors is not None:
        for i, color in enumerate(patch.colors):
            _check_color(color, f"patch colors {i}", issues)
            if color is None:
                issues.append(f"patch colors {i}: color must be a non-empty string when given")
    if kind.slice_based:
        if patch.labels is not None:
            for i, label in enumerate(patch.labels):
                _check_label(label, f"patch labels {i}", issues)
        target = len(current)
        if patch.labels is not None and patch.values is not None:
            if len(patch.labels) != len(patch.values):
                issues.append("patch labels and values differ in length")
            target = len(patch.labels)
        else:
            for name, part in (("labels", patch.labels), ("values", patch.values)):
                if part is not None and len(part) != target:
                    issues.append(f"patch {name} has {len(part)} entries for {target} slices")
        if patch.values is not None:
            for i, values in enumerate(patch.values):
                if len(values) != 1:
                    issues.append(f"patch values {i}: slices take exactly one value")
                elif _is_number(values[0]) and values[0] < 0:
                    issues.append(f"patch values {i}: slice values must not be negative")
        if patch.colors is not None and len(patch.colors) > target:
            issues.append(f"patch colors has {len(patch.colors)} entries for {target} slices")
    else:
        if patch.values is not None and len(patch.values) != len(current):
            issues.append(f"patch values has {len(patch.values)} series, chart has {len(current)}")
        if patch.colors is not None and len(patch.colors) > len(current):
            issues.append(f"patch colors has {len(patch.colors)} entries for {len(current)} series")
        widths = {len(v) for v in patch.values} if patch.values is not None else {
            len(s.values) for s in current
        }
        if len(widths) > 1:
            issues.append(f"patch series lengths differ: {sorted(widths)}")
        if patch.labels is not None and len(widths) == 1 and len(patch.labels) not in widths:
            issues.append(f"{len(patch.labels)} category labels for {next(iter(widths))} values")
        if patch.labels is None and patch.values is not None and labels and len(widths) == 1:
            if len(labels) not in widths:
                issues.append(f"patch values no longer match {len(labels)} category labels")
    return issues


def ensure_valid_series(
    kind: ChartKind,
    series: Sequence[Series],
    labels: Optional[Sequence[str]] = None,
    *,
    surface_id: str | None = None,
) -> None:
    issues = validate_series(kind, series, labels)
    if issues:
        raise MalformedSeriesError(issues, surface_id=surface_id)


def ensure_valid_patch(
    kind: ChartKind,
    current: Sequence[Series],
    labels: Sequence[str],
    patch: SeriesPatch,
    *,
    surface_id: str | None = None,
) -> None:
    issues = validate_patch(kind, current, labels, patch)
    if issues:
        raise MalformedSeriesError(issues, surface_id=surface_id)
