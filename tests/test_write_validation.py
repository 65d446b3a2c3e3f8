import pytest

from opus_api.api.styles.schemas import AssignmentItem, WeightItem
from opus_api.core import DomainValidationError
from opus_api.playback import validate_assignment_batch, validate_weight_batch


def _weights(*pairs):
    return [WeightItem(class_code=c, weight_pct=p) for c, p in pairs]


def test_assignment_batch_normalizes_codes() -> None:
    rows = validate_assignment_batch(
        "s1",
        [
            AssignmentItem(library_song_id="t1", class_code=" a "),
            AssignmentItem(library_song_id="t2", class_code="rest"),
        ],
    )
    assert [(r.style_id, r.library_song_id, r.class_code) for r in rows] == [
        ("s1", "t1", "A"),
        ("s1", "t2", "REST"),
    ]


def test_assignment_batch_rejected_on_single_invalid_code() -> None:
    items = [AssignmentItem(library_song_id=f"t{i}", class_code="B") for i in range(5)]
    items.insert(2, AssignmentItem(library_song_id="bad", class_code="Z"))

    with pytest.raises(DomainValidationError) as excinfo:
        validate_assignment_batch("s1", items)

    assert excinfo.value.status == 400
    assert excinfo.value.message == "Invalid class_code: Z"


def test_assignment_batch_rejects_duplicate_song() -> None:
    with pytest.raises(DomainValidationError):
        validate_assignment_batch(
            "s1",
            [
                AssignmentItem(library_song_id="t1", class_code="A"),
                AssignmentItem(library_song_id="t1", class_code="B"),
            ],
        )


def test_weight_batch_summing_to_100_is_accepted() -> None:
    rows = validate_weight_batch("s1", _weights(("a", 50), ("B", 30), ("c", 20)))
    assert [(r.class_code, r.weight_pct) for r in rows] == [("A", 50), ("B", 30), ("C", 20)]


@pytest.mark.parametrize("last", [19, 21])
def test_weight_batch_not_summing_to_100_is_rejected(last) -> None:
    with pytest.raises(DomainValidationError) as excinfo:
        validate_weight_batch("s1", _weights(("A", 50), ("B", 30), ("C", last)))
    assert excinfo.value.message == f"Weights must sum to 100. Got {80 + last}."


def test_weight_batch_only_checks_submitted_rows() -> None:
    rows = validate_weight_batch("s1", _weights(("A", 100)))
    assert len(rows) == 1


@pytest.mark.parametrize(
    "pairs",
    [
        (("A", 50), ("X", 50)),
        (("A", 50), ("a", 50)),
    ],
)
def test_weight_batch_rejects_invalid_and_duplicate_codes(pairs) -> None:
    with pytest.raises(DomainValidationError):
        validate_weight_batch("s1", _weights(*pairs))


def test_weight_batch_accepts_rest_and_counts_it_toward_the_sum() -> None:
    rows = validate_weight_batch("s1", _weights(("A", 90), ("rest", 10)))
    assert [(r.class_code, r.weight_pct) for r in rows] == [("A", 90), ("REST", 10)]

    with pytest.raises(DomainValidationError) as excinfo:
        validate_weight_batch("s1", _weights(("A", 100), ("REST", 10)))
    assert excinfo.value.message == "Weights must sum to 100. Got 110."
