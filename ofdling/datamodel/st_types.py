"""Value types for the OFD positional and path-drawing attribute grammars."""

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Pos(BaseModel):
    """A point, written in OFD as ``"x y"``."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def __str__(self) -> str:
        return f"{self.x} {self.y}"


class Box(BaseModel):
    """A rectangle, written in OFD as ``"x y width height"``."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    w: float
    h: float

    def __str__(self) -> str:
        return f"{self.x} {self.y} {self.w} {self.h}"


class _PathOp(BaseModel):
    model_config = ConfigDict(frozen=True)


class StartAt(_PathOp):
    """Sets the current point without drawing."""

    kind: Literal["S"] = Field("S", repr=False)
    point: Pos


class MoveTo(_PathOp):
    """Moves the pen and starts a new subpath."""

    kind: Literal["M"] = Field("M", repr=False)
    point: Pos


class LineTo(_PathOp):
    kind: Literal["L"] = Field("L", repr=False)
    point: Pos


class QuadraticCurve(_PathOp):
    kind: Literal["Q"] = Field("Q", repr=False)
    control: Pos
    end: Pos


class CubicCurve(_PathOp):
    kind: Literal["B"] = Field("B", repr=False)
    control1: Pos
    control2: Pos
    end: Pos


class EllipticalArc(_PathOp):
    """Arc to ``end``.

    ``large_arc`` and ``sweep`` are 0/1 flags, kept as floats as they appear in
    the attribute text.
    """

    kind: Literal["A"] = Field("A", repr=False)
    rx: float
    ry: float
    angle: float
    large_arc: float
    sweep: float
    end: Pos


class ClosePath(_PathOp):
    """Closes the current subpath back to its start."""

    kind: Literal["C"] = Field("C", repr=False)


PathOperation = Annotated[
    Union[
        StartAt,
        MoveTo,
        LineTo,
        QuadraticCurve,
        CubicCurve,
        EllipticalArc,
        ClosePath,
    ],
    Field(discriminator="kind"),
]

Path = List[PathOperation]
