"""Human readable work item codes, e.g. ABC-0001, ABC-B0001, ABC-T0001."""
import string
from typing import Iterable

CODE_DIGITS = 4


def code_number(code: str) -> int | None:
    """Numeric suffix of a code, None when the tail is not a number."""
    tail = code.rsplit("-", 1)[-1].lstrip(string.ascii_letters)
    return int(tail) if tail.isdigit() else None


def next_code(prefix: str, existing: Iterable[str], marker: str = "") -> str:
    """Next code after the highest numbered sibling.

    Scan-then-increment is not atomic; two concurrent creates can compute the
    same code. The unique (project, code) constraint rejects the loser.
    """
    numbers = [n for n in (code_number(c) for c in existing if c) if n is not None]
    last = max(numbers) if numbers else 0
    return f"{prefix}-{marker}{str(last + 1).zfill(CODE_DIGITS)}"


def project_prefix(code: str) -> str:
    """Project part of a work item code (everything before the first dash)."""
    return code.split("-", 1)[0]
