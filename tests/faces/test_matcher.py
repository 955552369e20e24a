import pytest

from attendance_hub.core.exceptions import ValidationError
from attendance_hub.faces.matcher import FaceMatcher, parse_descriptor, similarity


def vec(value: float, n: int = 128) -> list:
    return [value] * n


def test_similarity_of_identical_vectors_is_one():
    assert similarity(vec(0.1), vec(0.1)) == 1.0


def test_similarity_is_zero_for_wrong_lengths():
    assert similarity(vec(0.1, 10), vec(0.1, 10)) == 0.0
    assert similarity(vec(0.1), vec(0.1, 127)) == 0.0


def test_parse_descriptor_rejects_wrong_length():
    with pytest.raises(ValidationError):
        parse_descriptor(vec(0.1, 64))


def test_parse_descriptor_rejects_non_numbers():
    with pytest.raises(ValidationError):
        parse_descriptor(["x"] * 128)


def test_best_match_picks_closest_candidate():
    matcher = FaceMatcher()
    candidates = [(1, vec(0.5)), (2, vec(0.1)), (3, vec(0.9))]

    outcome = matcher.best_match(vec(0.11), candidates)

    assert outcome.match is not None
    assert outcome.match.user_id == 2
    assert outcome.match.similarity > 0.55


def test_best_match_skips_malformed_descriptors():
    matcher = FaceMatcher()
    candidates = [(1, vec(0.1, 3)), (2, None), (3, vec(0.1))]

    outcome = matcher.best_match(vec(0.1), candidates)

    assert outcome.match.user_id == 3


def test_best_match_below_threshold_reports_best_similarity():
    matcher = FaceMatcher()

    outcome = matcher.best_match(vec(0.0), [(1, vec(1.0))])

    # distance is sqrt(128), similarity roughly 0.081
    assert outcome.match is None
    assert outcome.best_similarity == pytest.approx(1 / (1 + 128 ** 0.5))
    assert outcome.threshold == 0.55
