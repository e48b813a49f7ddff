"""Share decoding – base-N numerals and the JSON share document.

Document format::

    {
      "keys": {"n": 4, "k": 3},
      "1": {"base": "10", "value": "4"},
      "2": {"base": "2",  "value": "111"},
      ...
    }

Every key that is a decimal integer is a share index x; its ``value`` is
written in ``base`` using digits 0-9 then a-z (case-insensitive).  Shares
are ordered by ascending x.  A single bad digit rejects the whole document.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ValidationError

from shamirvote.config import MAX_BASE, MIN_BASE
from shamirvote.models import InvalidDigit, InvalidShareSet, Point, ShareSet


class DocumentKeys(BaseModel):
    n: int
    k: int


class EncodedShare(BaseModel):
    base: Union[str, int]
    value: Union[str, int]


class ShareDocument(BaseModel):
    """Validated view of a share document."""

    keys: DocumentKeys
    shares: Dict[int, EncodedShare]


def digit_value(ch: str) -> int:
    """Map one numeral character to its value (0-35)."""
    if "0" <= ch <= "9":
        return ord(ch) - ord("0")
    lower = ch.lower()
    if "a" <= lower <= "z":
        return ord(lower) - ord("a") + 10
    raise InvalidDigit(f"Invalid digit: {ch!r}")


def decode_value(digits: str, base: int) -> int:
    """Convert *digits* written in *base* to an int."""
    if base < MIN_BASE or base > MAX_BASE:
        raise InvalidDigit(f"Unsupported base {base} (expected {MIN_BASE}..{MAX_BASE})")
    if not digits:
        raise InvalidDigit("Empty share value")
    result = 0
    for ch in digits:
        value = digit_value(ch)
        if value >= base:
            raise InvalidDigit(f"Digit {ch!r} is invalid for base {base}")
        result = result * base + value
    return result


_DECIMAL_CHUNK_DIGITS = 1000
_DECIMAL_CHUNK = 10**_DECIMAL_CHUNK_DIGITS


def encode_decimal(value: int) -> str:
    """Decimal text for *value* of any size.

    ``str(int)`` refuses values past the interpreter's digit limit
    (4300 digits by default), so large values are converted in
    fixed-size chunks.
    """
    if value < 0:
        return "-" + encode_decimal(-value)
    chunks: List[str] = []
    while value >= _DECIMAL_CHUNK:
        value, low = divmod(value, _DECIMAL_CHUNK)
        chunks.append(str(low).zfill(_DECIMAL_CHUNK_DIGITS))
    chunks.append(str(value))
    return "".join(reversed(chunks))


def _parse_base(raw: Union[str, int]) -> int:
    try:
        return int(raw)
    except ValueError:
        raise InvalidDigit(f"Base is not an integer: {raw!r}") from None


def read_document(data: Dict[str, Any]) -> ShareDocument:
    """Split the raw mapping into keys and integer-indexed shares."""
    if not isinstance(data, dict):
        raise InvalidShareSet("Share document must be a JSON object")
    shares: Dict[int, Any] = {}
    for key, entry in data.items():
        if not key.strip().isdecimal():
            continue
        x = int(key)
        if x in shares:
            raise InvalidShareSet(f"Duplicate share index {x}")
        shares[x] = entry
    try:
        return ShareDocument(keys=data.get("keys"), shares=shares)
    except ValidationError as exc:
        raise InvalidShareSet(f"Malformed share document: {exc}") from exc


def parse_share_document(data: Dict[str, Any]) -> ShareSet:
    """Decode a share document into a ``ShareSet``."""
    doc = read_document(data)
    points: List[Point] = []
    for x in sorted(doc.shares):
        share = doc.shares[x]
        points.append((x, decode_value(str(share.value), _parse_base(share.base))))

    if doc.keys.n != len(points):
        raise InvalidShareSet(
            f"Document declares n={doc.keys.n} but holds {len(points)} shares"
        )
    return ShareSet.from_points(points, doc.keys.k)


def load_share_file(path: Union[str, Path]) -> ShareSet:
    """Read and decode a JSON share document from *path*."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidShareSet(f"{path}: not valid JSON ({exc})") from exc
    return parse_share_document(data)
