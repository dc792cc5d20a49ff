import re
from dataclasses import dataclass

from src.core.exceptions import DimensionTooLarge, MissingPath, NoDimensionSpecified

DEFAULT_MAX_DIMENSION = 4000

_LEADING_INT_RE = re.compile(r"\s*([+-]?)([0-9]+)")


@dataclass(frozen=True)
class ResizeRequest:
    original_path: str
    width: int
    height: int


def parse_dimension(raw: str | None, max_dimension: int = DEFAULT_MAX_DIMENSION) -> int:
    """Parse a raw query value into a non-negative integer.

    Mirrors ``parseInt`` leniency: leading whitespace and a sign are allowed and
    trailing characters are ignored, so ``"120px"`` is 120. Anything that does
    not start with ASCII digits, or is negative, counts as 0. A value with more
    significant digits than ``max_dimension`` comes back as ``max_dimension + 1``.
    """
    if raw is None:
        return 0
    match = _LEADING_INT_RE.match(raw)
    if not match:
        return 0
    sign, digits = match.groups()
    digits = digits.lstrip("0")
    if sign == "-" or not digits:
        return 0
    if len(digits) > len(str(max_dimension)):
        return max_dimension + 1
    return int(digits)


def validate_request(
    original_path: str | None,
    width_raw: str | None,
    height_raw: str | None,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
) -> ResizeRequest:
    if not original_path:
        raise MissingPath()

    width = parse_dimension(width_raw, max_dimension)
    height = parse_dimension(height_raw, max_dimension)

    if width == 0 and height == 0:
        raise NoDimensionSpecified()
    if width > max_dimension or height > max_dimension:
        raise DimensionTooLarge(max_dimension)

    return ResizeRequest(original_path=original_path, width=width, height=height)
