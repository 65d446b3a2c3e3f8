from typing import Any, Optional

CLASS_REST = "REST"
WEIGHTED_CLASSES = ("A", "B", "C")
CLASS_CODES = WEIGHTED_CLASSES + (CLASS_REST,)

_TRUE_FLAGS = {"1", "true", "yes", "y"}


def normalize_class_code(raw: Any) -> Optional[str]:
    """
    Map a raw class code to one of A, B, C, REST.

    Input is trimmed and upper-cased, so " b " -> "B" and "Rest" -> "REST".
    Anything else (including None and "") returns None; this never raises.
    """
    code = str(raw or "").strip().upper()
    if code in CLASS_CODES:
        return code
    return None


def normalize_style_id(raw: Any) -> str:
    """Trim a style identifier; absent input becomes ""."""
    return str(raw or "").strip()


def parse_bool_param(raw: Any) -> bool:
    """
    Lenient query flag parsing: 1/true/yes/y (any case) are true, everything
    else is false.
    """
    return str(raw or "").strip().lower() in _TRUE_FLAGS
