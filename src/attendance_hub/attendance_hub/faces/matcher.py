"""Face descriptor comparison.

Descriptors are 128-dimensional embeddings computed in the browser. The
server only compares them: similarity is ``1 / (1 + euclidean_distance)``
and the best candidate must reach the configured threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Tuple

import numpy as np

from ..core.constants import FACE_DESCRIPTOR_LENGTH, FACE_MATCH_THRESHOLD
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class FaceMatch:
    user_id: int
    similarity: float


@dataclass(frozen=True)
class MatchOutcome:
    match: Optional[FaceMatch]
    best_similarity: float
    threshold: float


def parse_descriptor(value: Any, field_name: str = "facialDescriptors") -> list[float]:
    """Validate a client-supplied descriptor and return it as a list of floats."""
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name} must be an array of {FACE_DESCRIPTOR_LENGTH} numbers")
    if len(value) != FACE_DESCRIPTOR_LENGTH:
        raise ValidationError(f"{field_name} must contain exactly {FACE_DESCRIPTOR_LENGTH} values")
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must contain only numbers")
    if not np.all(np.isfinite(arr)):
        raise ValidationError(f"{field_name} must contain only finite numbers")
    return arr.tolist()


def is_valid_descriptor(value: Any) -> bool:
    if not isinstance(value, (list, tuple)) or len(value) != FACE_DESCRIPTOR_LENGTH:
        return False
    return all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)))


def similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """0 when the vectors are not both 128-dimensional."""
    if len(a) != len(b) or len(a) != FACE_DESCRIPTOR_LENGTH:
        return 0.0
    return 1.0 / (1.0 + euclidean_distance(a, b))


class FaceMatcher:
    def __init__(self, *, threshold: float = FACE_MATCH_THRESHOLD):
        self.threshold = float(threshold)

    def best_match(self, probe: Sequence[float], candidates: Iterable[Tuple[int, Any]]) -> MatchOutcome:
        """Linear scan over ``(user_id, descriptor)`` pairs.

        Malformed stored descriptors are skipped.
        """
        valid = [(int(uid), desc) for uid, desc in candidates if is_valid_descriptor(desc)]
        if not valid or len(probe) != FACE_DESCRIPTOR_LENGTH:
            return MatchOutcome(match=None, best_similarity=0.0, threshold=self.threshold)

        matrix = np.asarray([desc for _, desc in valid], dtype=np.float64)
        distances = np.linalg.norm(matrix - np.asarray(probe, dtype=np.float64), axis=1)
        scores = 1.0 / (1.0 + distances)

        best_idx = int(np.argmax(scores))
        best_score = float(scores[best_idx])
        if best_score < self.threshold:
            return MatchOutcome(match=None, best_similarity=best_score, threshold=self.threshold)

        return MatchOutcome(
            match=FaceMatch(user_id=valid[best_idx][0], similarity=best_score),
            best_similarity=best_score,
            threshold=self.threshold,
        )
