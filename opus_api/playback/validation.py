from typing import Any, Iterable, List

from opus_api.core import (
    ClassAssignment,
    ClassWeight,
    DomainValidationError,
    log_warning,
    normalize_class_code,
)

REQUIRED_WEIGHT_SUM = 100


def _reject(message: str) -> DomainValidationError:
    log_warning(f"Rejected batch: {message}")
    return DomainValidationError(message)


def validate_assignment_batch(style_id: str, items: Iterable[Any]) -> List[ClassAssignment]:
    """
    Turn {library_song_id, class_code} items into rows ready for upsert.

    The whole batch is rejected on the first invalid class code, so a batch
    is either written entirely or not at all.
    """
    rows: List[ClassAssignment] = []
    seen: set[str] = set()
    for item in items:
        code = normalize_class_code(item.class_code)
        if code is None:
            raise _reject(f"Invalid class_code: {item.class_code}")
        if item.library_song_id in seen:
            raise _reject(f"Duplicate library_song_id: {item.library_song_id}")
        seen.add(item.library_song_id)
        rows.append(
            ClassAssignment(
                style_id=style_id,
                library_song_id=item.library_song_id,
                class_code=code,
            )
        )
    return rows


def validate_weight_batch(style_id: str, items: Iterable[Any]) -> List[ClassWeight]:
    """
    Turn {class_code, weight_pct} items into rows ready for upsert.

    Every code must normalize and appear once. REST rows are accepted and
    count toward the total, though playback profiles ignore them. The
    submitted weights (not the stored ones) must add up to exactly 100.
    """
    rows: List[ClassWeight] = []
    seen: set[str] = set()
    for item in items:
        code = normalize_class_code(item.class_code)
        if code is None:
            raise _reject(f"Invalid class_code: {item.class_code}")
        if code in seen:
            raise _reject(f"Duplicate class_code: {code}")
        seen.add(code)
        rows.append(ClassWeight(style_id=style_id, class_code=code, weight_pct=item.weight_pct))

    total = sum(r.weight_pct for r in rows)
    if total != REQUIRED_WEIGHT_SUM:
        raise _reject(f"Weights must sum to {REQUIRED_WEIGHT_SUM}. Got {total}.")
    return rows
