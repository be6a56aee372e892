"""Per-tick choice of which catalog objects to render."""
from __future__ import annotations

from typing import Mapping, Sequence

from .model import Regime, TrackedObject


def subsample(objects: Sequence[TrackedObject], budget: int) -> list[TrackedObject]:
    """Evenly spaced sample at indices ``floor(k * len / budget)``."""

    count = len(objects)
    budget = max(1, int(budget))
    if count <= budget:
        return list(objects)
    step = count / budget
    return [objects[min(count - 1, int(k * step))] for k in range(budget)]


def select_visible(
    catalog: Sequence[TrackedObject],
    regime_visibility: Mapping[Regime, bool],
    display_budget: int,
    pinned_target: str | None = None,
    *,
    index: Mapping[str, TrackedObject] | None = None,
) -> list[TrackedObject]:
    """Filter by regime, subsample to the display budget and append the pinned target.

    The pinned object is looked up in the full catalog (``index`` when given) and
    appended when the sample does not already contain it, so the result may hold
    ``display_budget + 1`` objects.
    """

    filtered = [obj for obj in catalog if regime_visibility.get(obj.regime, True)]
    selected = subsample(filtered, display_budget)

    if pinned_target is not None:
        if index is not None:
            target = index.get(pinned_target)
        else:
            target = None
            for obj in catalog:
                if obj.name == pinned_target:
                    target = obj
        if target is not None and not any(obj is target for obj in selected):
            selected.append(target)
    return selected


__all__ = ["select_visible", "subsample"]
