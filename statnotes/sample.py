"""Immutable numeric samples with optional group labels and subject IDs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .errors import DimensionMismatchError, InsufficientDataError


def _frozen(values, dtype=None) -> np.ndarray:
    arr = np.array(values, dtype=dtype)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Sample:
    """Ordered numeric observations, optionally grouped and subject-paired.

    Args:
        values: Numeric observations.
        groups: Optional categorical label per observation. When given, the
            labels must partition the sample into at least two non-empty
            groups.
        subjects: Optional subject identifier per observation, used to align
            paired groups.

    Raises:
        DimensionMismatchError: If ``groups`` or ``subjects`` differ in length
            from ``values``.
        ValueError: If ``groups`` contains fewer than two distinct labels.
    """

    values: np.ndarray
    groups: Optional[np.ndarray] = None
    subjects: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        values = _frozen(self.values, dtype=float).reshape(-1)
        object.__setattr__(self, "values", values)

        for name in ("groups", "subjects"):
            labels = getattr(self, name)
            if labels is None:
                continue
            arr = _frozen(labels, dtype=object).reshape(-1)
            if len(arr) != len(values):
                raise DimensionMismatchError(
                    f"{name} has {len(arr)} entries but the sample has "
                    f"{len(values)} values."
                )
            object.__setattr__(self, name, arr)

        if self.groups is not None and len(self.group_labels) < 2:
            raise ValueError(
                "Group labels must partition the sample into at least two groups; "
                f"found {list(self.group_labels)}."
            )

    def __len__(self) -> int:
        return int(len(self.values))

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        value: str,
        group: str | None = None,
        subject: str | None = None,
    ) -> "Sample":
        """Build a sample from named columns of a table."""
        for col in (value, group, subject):
            if col is not None and col not in frame.columns:
                raise KeyError(
                    f"Column '{col}' not found. Available columns: {list(frame.columns)}"
                )
        values = pd.to_numeric(frame[value], errors="coerce").to_numpy(dtype=float)
        groups = frame[group].to_numpy() if group is not None else None
        subjects = frame[subject].to_numpy() if subject is not None else None
        return cls(values=values, groups=groups, subjects=subjects)

    @property
    def finite_values(self) -> np.ndarray:
        return self.values[np.isfinite(self.values)]

    @property
    def group_labels(self) -> Tuple:
        if self.groups is None:
            return ()
        seen = []
        for label in self.groups:
            if label not in seen:
                seen.append(label)
        try:
            return tuple(sorted(seen))
        except TypeError:
            return tuple(seen)

    def split(self) -> dict:
        """Return ``{label: Sample}`` for each group, in label order."""
        if self.groups is None:
            raise ValueError("Sample has no group labels to split on.")
        parts = {}
        for label in self.group_labels:
            mask = np.array([g == label for g in self.groups], dtype=bool)
            subjects = self.subjects[mask] if self.subjects is not None else None
            parts[label] = Sample(values=self.values[mask], subjects=subjects)
        return parts

    def paired_split(self) -> Tuple["Sample", "Sample"]:
        """Split a two-group sample into subject-aligned halves.

        Returns:
            tuple[Sample, Sample]: First and second group (label order), with
            observations reordered so position ``i`` in both halves refers to
            the same subject.

        Raises:
            ValueError: If the sample does not have exactly two groups.
            DimensionMismatchError: If the groups differ in size or do not
                cover the same subjects.
        """
        parts = self.split()
        if len(parts) != 2:
            raise ValueError(
                f"Paired comparison needs exactly two groups, found {len(parts)}."
            )
        first, second = parts.values()
        if len(first) != len(second):
            raise DimensionMismatchError(
                f"Paired groups differ in size: {len(first)} vs {len(second)}."
            )
        if self.subjects is None:
            return first, second
        return first, align_subjects(first, second)


def align_subjects(first: Sample, second: Sample) -> Sample:
    """Reorder ``second`` so position ``i`` holds the subject at ``first[i]``.

    Raises:
        DimensionMismatchError: If either sample lacks subject IDs, an ID
            repeats within a sample, or the two ID sets differ.
    """
    if first.subjects is None or second.subjects is None:
        raise DimensionMismatchError("Both samples need subject identifiers to align.")
    if len(set(first.subjects)) != len(first) or len(set(second.subjects)) != len(
        second
    ):
        raise DimensionMismatchError("Subject identifiers repeat within a group.")
    if set(first.subjects) != set(second.subjects):
        raise DimensionMismatchError("Paired groups do not contain the same subjects.")
    order = {subject: idx for idx, subject in enumerate(first.subjects)}
    aligned = np.empty(len(second), dtype=float)
    for subject, value in zip(second.subjects, second.values):
        aligned[order[subject]] = value
    return Sample(values=aligned, subjects=first.subjects)


def as_values(data, min_n: int = 0, label: str = "sample") -> np.ndarray:
    """Return finite float observations from a ``Sample`` or array-like."""
    raw = data.values if isinstance(data, Sample) else data
    arr = np.asarray(raw, dtype=float).reshape(-1)
    arr = arr[np.isfinite(arr)]
    if len(arr) < min_n:
        raise InsufficientDataError(
            f"{label} has {len(arr)} finite observations; at least {min_n} required."
        )
    return arr
