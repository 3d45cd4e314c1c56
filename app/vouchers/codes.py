from __future__ import annotations

import re
import secrets

from app.vouchers.constants import CODE_ALPHABET

_CODE_NORMALIZE_PATTERN = re.compile(r"[\s-]+")


def normalize_code(raw_code: str) -> str:
    normalized = raw_code.strip().upper()
    return _CODE_NORMALIZE_PATTERN.sub("", normalized)


def draw_code(length: int) -> str:
    if length <= 0:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def is_well_formed_code(code: str, *, length: int) -> bool:
    return len(code) == length and all(char in CODE_ALPHABET for char in code)
