import pytest

from ofdling.backend.st_parser import (
    MAX_DELTA_COUNT,
    format_path,
    parse_box,
    parse_deltas,
    parse_path,
    parse_pos,
    path_operand_count,
)
from ofdling.datamodel.st_types import (
    Box,
    ClosePath,
    CubicCurve,
    EllipticalArc,
    LineTo,
    MoveTo,
    Pos,
    QuadraticCurve,
    StartAt,
)
from ofdling.exceptions import (
    FloatParseError,
    InvalidFormatError,
    MicroLanguageError,
    OfdError,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1 2", Pos(x=1, y=2)),
        ("  -3.5\t4e2 ", Pos(x=-3.5, y=400)),
        ("0.1 0.2", Pos(x=0.1, y=0.2)),
    ],
)
def test_parse_pos(text, expected):
    assert parse_pos(text) == expected


@pytest.mark.parametrize("text", ["1 2", "-0.25 1e-3", "123456.789 0.1"])
def test_parse_pos_reformat_roundtrip(text):
    pos = parse_pos(text)
    assert parse_pos(str(pos)) == pos


@pytest.mark.parametrize("text", ["", "1", "1 2 3", "   "])
def test_parse_pos_token_count(text):
    with pytest.raises(InvalidFormatError):
        parse_pos(text)


def test_parse_pos_bad_numeral():
    with pytest.raises(FloatParseError) as exc_info:
        parse_pos("1 abc")
    assert exc_info.value.token == "abc"


@pytest.mark.parametrize("token", ["\u0661", "\uff12", "\u0661.5"])
def test_parse_pos_rejects_non_ascii_digits(token):
    with pytest.raises(FloatParseError) as exc_info:
        parse_pos(f"0 {token}")
    assert exc_info.value.token == token


def test_parse_box():
    box = parse_box("10 20 30.5 40")
    assert box == Box(x=10, y=20, w=30.5, h=40)
    assert parse_box(str(box)) == box


@pytest.mark.parametrize("text", ["", "1 2 3", "1 2 3 4 5"])
def test_parse_box_token_count(text):
    with pytest.raises(InvalidFormatError):
        parse_box(text)


def test_parse_box_rejects_digit_separators():
    with pytest.raises(FloatParseError) as exc_info:
        parse_box("0 0 1_000 2")
    assert exc_info.value.token == "1_000"


def test_parse_path_basic_sequence():
    assert parse_path("S 0 0 M 10 10 L 20 20 C") == [
        StartAt(point=Pos(x=0, y=0)),
        MoveTo(point=Pos(x=10, y=10)),
        LineTo(point=Pos(x=20, y=20)),
        ClosePath(),
    ]


def test_parse_path_quadratic():
    ops = parse_path("Q 1 2 3 4")
    assert ops == [QuadraticCurve(control=Pos(x=1, y=2), end=Pos(x=3, y=4))]


def test_parse_path_cubic_and_arc():
    ops = parse_path("B 1 2 3 4 5 6 A 10 5 30 1 0 7 8")
    assert ops == [
        CubicCurve(
            control1=Pos(x=1, y=2), control2=Pos(x=3, y=4), end=Pos(x=5, y=6)
        ),
        EllipticalArc(
            rx=10, ry=5, angle=30, large_arc=1, sweep=0, end=Pos(x=7, y=8)
        ),
    ]


def test_parse_path_accepts_draw_before_start():
    assert parse_path("L 1 1") == [LineTo(point=Pos(x=1, y=1))]


def test_parse_path_empty():
    assert parse_path("") == []
    assert parse_path("  \n ") == []


def test_parse_path_missing_operand():
    with pytest.raises(InvalidFormatError):
        parse_path("Q 1 2 3")


def test_parse_path_unknown_opcode():
    with pytest.raises(InvalidFormatError):
        parse_path("Z")


def test_parse_path_operand_is_not_an_opcode():
    # "M" is read as the second operand of "L", not as a new opcode
    with pytest.raises(FloatParseError) as exc_info:
        parse_path("L 1 M 2 2")
    assert exc_info.value.token == "M"


@pytest.mark.parametrize(
    "opcode,count",
    [("S", 2), ("M", 2), ("L", 2), ("Q", 4), ("B", 6), ("A", 7), ("C", 0)],
)
def test_path_operand_counts(opcode, count):
    assert path_operand_count(opcode) == count
    operands = " ".join(["1"] * count)
    assert len(parse_path(f"{opcode} {operands}")) == 1
    if count:
        short = " ".join(["1"] * (count - 1))
        with pytest.raises(InvalidFormatError):
            parse_path(f"{opcode} {short}")


def test_format_path():
    text = "S 0 0 M 10 10 L 20.5 20 Q 1 2 3 4 A 10 5 30 1 0 7 8 C"
    assert format_path(parse_path(text)) == text


def test_parse_deltas_run_length():
    assert parse_deltas("g 3 5 2") == [5.0, 5.0, 5.0, 2.0]


def test_parse_deltas_interleaved():
    assert parse_deltas("1 g 2 0.5 3 g 1 4") == [1.0, 0.5, 0.5, 3.0, 4.0]


def test_parse_deltas_empty():
    assert parse_deltas("") == []


def test_parse_deltas_truncates_count():
    assert parse_deltas("g 2.9 1") == [1.0, 1.0]
    assert parse_deltas("g -2 1 7") == [7.0]
    assert parse_deltas("g 0 1") == []


def test_parse_deltas_incomplete_run():
    with pytest.raises(InvalidFormatError):
        parse_deltas("g 3")


def test_parse_deltas_bad_numeral():
    with pytest.raises(FloatParseError) as exc_info:
        parse_deltas("1 x 2")
    assert exc_info.value.token == "x"


def test_parse_deltas_infinite_count():
    with pytest.raises(InvalidFormatError):
        parse_deltas("g inf 1")


def test_parse_deltas_run_limit():
    assert len(parse_deltas(f"g {MAX_DELTA_COUNT} 1")) == MAX_DELTA_COUNT
    with pytest.raises(InvalidFormatError):
        parse_deltas("g 1e15 1")
    with pytest.raises(InvalidFormatError):
        parse_deltas(f"1 g {MAX_DELTA_COUNT} 1")


def test_micro_language_errors_are_ofd_errors():
    with pytest.raises(MicroLanguageError):
        parse_pos("a b")
    with pytest.raises(OfdError):
        parse_box("1")
    with pytest.raises(ValueError):
        parse_path("X")
