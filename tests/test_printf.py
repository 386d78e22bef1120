"""Tests for printf-style formatting."""

import math

import pytest

from brainrot.printf import format_c


@pytest.mark.parametrize(
    "fmt,args,expected",
    [
        ("%d", (42,), "42"),
        ("%i items", (3,), "3 items"),
        ("%05d", (42,), "00042"),
        ("%-4d|", (7,), "7   |"),
        ("%+d", (7,), "+7"),
        ("%5.2f", (3.14159,), " 3.14"),
        ("%e", (1234.5,), "1.234500e+03"),
        ("%g", (0.0001,), "0.0001"),
        ("%x", (255,), "ff"),
        ("%X", (-1,), "FFFFFFFF"),
        ("%#o", (8,), "010"),
        ("%u", (-1,), "4294967295"),
        ("%lu", (-1,), "18446744073709551615"),
        ("%hu", (-1,), "65535"),
        ("%c", (65,), "A"),
        ("%s and %s", ("this", "that"), "this and that"),
        ("%.2s", ("abc",), "ab"),
        ("100%%", (), "100%"),
        ("%*d", (4, 7), "   7"),
        ("%.*f", (1, 2.25), "2.2"),
        ("%d", (2.9,), "2"),
        ("%f", (3,), "3.000000"),
    ],
)
def test_format_c(fmt, args, expected):
    assert format_c(fmt, args) == expected


def test_missing_arguments_are_left_verbatim():
    assert format_c("a=%d b=%d", (1,)) == "a=1 b=%d"


def test_extra_arguments_are_ignored():
    assert format_c("%d", (1, 2)) == "1"


def test_non_finite_floats():
    assert format_c("%f", (math.nan,)) == "nan"
    assert format_c("%E", (math.inf,)) == "INF"
    assert format_c("%5f|", (-math.inf,)) == " -inf|"


def test_text_without_conversions():
    assert format_c("hello\n", ()) == "hello\n"
