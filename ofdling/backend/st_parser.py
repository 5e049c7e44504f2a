"""Decoders for the small grammars OFD embeds in attribute values.

``ST_Pos`` and ``ST_Box`` are whitespace-separated numbers, ``AbstractShape``
holds a sequence of single-letter path opcodes with their operands and
``DeltaX``/``DeltaY`` hold glyph offsets with an optional ``g <count> <value>``
run-length form.
"""

import math
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from ofdling.datamodel.st_types import (
    Box,
    ClosePath,
    CubicCurve,
    EllipticalArc,
    LineTo,
    MoveTo,
    Path,
    PathOperation,
    Pos,
    QuadraticCurve,
    StartAt,
)
from ofdling.exceptions import FloatParseError, InvalidFormatError

_REPEAT_MARKER = "g"

# Upper bound on the number of values one DeltaX/DeltaY attribute may expand to.
MAX_DELTA_COUNT = 1 << 20


def _to_float(token: str) -> float:
    # float() also takes "1_000" and non-ASCII digits; OFD numerals are plain ASCII.
    if "_" in token or not token.isascii():
        raise FloatParseError(token)
    try:
        return float(token)
    except ValueError as exc:
        raise FloatParseError(token) from exc


def _parse_fixed(text: str, count: int, what: str) -> List[float]:
    tokens = text.split()
    if len(tokens) != count:
        raise InvalidFormatError(
            f"{what} expects {count} values, got {len(tokens)}: {text!r}"
        )
    return [_to_float(token) for token in tokens]


def parse_pos(text: str) -> Pos:
    x, y = _parse_fixed(text, 2, "ST_Pos")
    return Pos(x=x, y=y)


def parse_box(text: str) -> Box:
    x, y, w, h = _parse_fixed(text, 4, "ST_Box")
    return Box(x=x, y=y, w=w, h=h)


class _TokenCursor:
    """Left-to-right cursor over whitespace-separated tokens."""

    def __init__(self, text: str):
        self._tokens = text.split()
        self._index = 0

    def exhausted(self) -> bool:
        return self._index >= len(self._tokens)

    def next_token(self) -> str:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def take_floats(self, count: int, context: str) -> List[float]:
        available = len(self._tokens) - self._index
        if available < count:
            raise InvalidFormatError(
                f"{context} expects {count} operands, only {available} left"
            )
        return [_to_float(self.next_token()) for _ in range(count)]


def _pos(values: Sequence[float], offset: int) -> Pos:
    return Pos(x=values[offset], y=values[offset + 1])


# opcode -> (operand count, constructor)
_PATH_OPCODES: Dict[str, Tuple[int, Callable[[Sequence[float]], PathOperation]]] = {
    "S": (2, lambda v: StartAt(point=_pos(v, 0))),
    "M": (2, lambda v: MoveTo(point=_pos(v, 0))),
    "L": (2, lambda v: LineTo(point=_pos(v, 0))),
    "Q": (4, lambda v: QuadraticCurve(control=_pos(v, 0), end=_pos(v, 2))),
    "B": (
        6,
        lambda v: CubicCurve(control1=_pos(v, 0), control2=_pos(v, 2), end=_pos(v, 4)),
    ),
    "A": (
        7,
        lambda v: EllipticalArc(
            rx=v[0],
            ry=v[1],
            angle=v[2],
            large_arc=v[3],
            sweep=v[4],
            end=_pos(v, 5),
        ),
    ),
    "C": (0, lambda v: ClosePath()),
}


def path_operand_count(opcode: str) -> int:
    try:
        return _PATH_OPCODES[opcode][0]
    except KeyError as exc:
        raise InvalidFormatError(f"Unknown path opcode: {opcode!r}") from exc


def parse_path(text: str) -> Path:
    """Decode an ``AbstractShape`` string into its path operations.

    Operations keep their input order and are not checked for geometric
    consistency, so a ``LineTo`` before any ``StartAt``/``MoveTo`` is accepted.
    """
    cursor = _TokenCursor(text)
    operations: List[PathOperation] = []
    while not cursor.exhausted():
        opcode = cursor.next_token()
        count = path_operand_count(opcode)
        build = _PATH_OPCODES[opcode][1]
        operations.append(build(cursor.take_floats(count, f"Opcode {opcode!r}")))
    return operations


def parse_deltas(text: str) -> List[float]:
    """Decode a ``DeltaX``/``DeltaY`` value, expanding ``g`` runs."""
    cursor = _TokenCursor(text)
    deltas: List[float] = []
    while not cursor.exhausted():
        token = cursor.next_token()
        if token != _REPEAT_MARKER:
            deltas.append(_to_float(token))
            continue
        count, delta = cursor.take_floats(2, "Delta run")
        if not math.isfinite(count):
            raise InvalidFormatError(f"Delta run count is not finite: {count}")
        run = max(int(count), 0)
        if len(deltas) + run > MAX_DELTA_COUNT:
            raise InvalidFormatError(
                f"Delta run of {run} values exceeds the limit of {MAX_DELTA_COUNT}"
            )
        deltas.extend([delta] * run)
    return deltas


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_path(operations: Iterable[PathOperation]) -> str:
    """Render path operations back into ``AbstractShape`` text."""
    parts: List[str] = []
    for op in operations:
        parts.append(op.kind)
        if isinstance(op, (StartAt, MoveTo, LineTo)):
            points = [op.point]
            scalars: List[float] = []
        elif isinstance(op, QuadraticCurve):
            points, scalars = [op.control, op.end], []
        elif isinstance(op, CubicCurve):
            points, scalars = [op.control1, op.control2, op.end], []
        elif isinstance(op, EllipticalArc):
            points = [op.end]
            scalars = [op.rx, op.ry, op.angle, op.large_arc, op.sweep]
        else:
            points, scalars = [], []
        parts.extend(_format_number(value) for value in scalars)
        for point in points:
            parts.append(_format_number(point.x))
            parts.append(_format_number(point.y))
    return " ".join(parts)
