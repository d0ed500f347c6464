from __future__ import annotations

from typing import List, Sequence

import numpy as np

from .types import Decision
from ..utils.errors import DecisionError


def compute_softmax(logits: Sequence[float]) -> List[float]:
    """Numerically stable softmax over a 1-D vector of logits."""
    arr = np.asarray(logits, dtype=np.float64)
    if arr.ndim != 1 or arr.size == 0:
        raise DecisionError("Model output is empty.")
    if not np.all(np.isfinite(arr)):
        raise DecisionError("Model output contains non-finite values.")
    exp = np.exp(arr - arr.max())
    return (exp / exp.sum()).tolist()


def compute_decision(probabilities: Sequence[float]) -> Decision:
    arr = np.asarray(probabilities, dtype=np.float64)
    if arr.ndim != 1 or arr.size == 0:
        raise DecisionError("Probability vector is empty.")
    # np.argmax returns the first occurrence, so ties go to the lowest index.
    index = int(np.argmax(arr))
    return Decision(index=index, confidence=float(arr[index]), probabilities=arr.tolist())


def decide(logits: Sequence[float], classes: Sequence[str]) -> Decision:
    if len(logits) != len(classes):
        raise DecisionError(
            f"Model returned {len(logits)} scores but {len(classes)} classes are configured."
        )
    return compute_decision(compute_softmax(logits))
