#!/usr/bin/env python3
#
# Test aivdm/bits.py and the armor codec in aivdm/armor.py
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.

import sys

import pytest

from aivdm.armor import sixbit_value, sixbit_char
from aivdm.bits import BitVector, unarmor, coerce

# 1011 0000 1111 1111
sample = BitVector().from_binary("1011000011111111")

# "HI" followed by two @ pad characters, then a 3-bit stub
text = BitVector().from_binary("001000" "001001" "000000" "000000" "101")

extractions = [
    # (description, operation, expected)
    ("ubits nibble",         lambda: sample.ubits(0, 4),    11),
    ("ubits zero nibble",    lambda: sample.ubits(4, 4),    0),
    ("ubits byte",           lambda: sample.ubits(8, 8),    255),
    ("ubits straddling",     lambda: sample.ubits(2, 4),    12),
    ("ubits whole",          lambda: sample.ubits(0, 16),   45311),
    ("ubits past end",       lambda: sample.ubits(10, 8),   None),
    ("ubits zero width",     lambda: sample.ubits(16, 0),   0),
    ("ubits start past end", lambda: sample.ubits(17, 0),   None),
    ("sbits negative",       lambda: sample.sbits(0, 4),    -5),
    ("sbits all ones",       lambda: sample.sbits(8, 8),    -1),
    ("sbits positive",       lambda: sample.sbits(4, 4),    0),
    ("sbits past end",       lambda: sample.sbits(12, 8),   None),
    ("boolean set",          lambda: sample.boolean(0),     True),
    ("boolean clear",        lambda: sample.boolean(4),     False),
    ("boolean past end",     lambda: sample.boolean(16),    None),
    ("raw tail",             lambda: sample.raw(12),        "1111"),
    ("raw at end",           lambda: sample.raw(16),        ""),
    ("raw past end",         lambda: sample.raw(20),        ""),
    ("raw with width",       lambda: sample.raw(2, 4),      "1100"),
    ("raw zero width",       lambda: sample.raw(4, 0),      ""),
    ("length",               lambda: len(sample),           16),
    ("binary rendering",     lambda: str(sample),           "1011000011111111"),
    ("hex dump",             lambda: repr(sample),          "16:b0ff"),
    ("string with padding",  lambda: text.string(0, 24),    "HI"),
    ("string past end",      lambda: text.string(0, 30),    None),
    ("string short group",   lambda: text.string(0, 27),    "HI"),
    ("string partial",       lambda: text.string(6, 6),     "I"),
    ("coerce binary digits", lambda: coerce("101").ubits(0, 3), 5),
    ("coerce bit vector",    lambda: coerce(sample) is sample, True),
]

armor = [
    # (armor character, six-bit value)
    ("0", 0),
    ("9", 9),
    ("W", 39),
    ("`", 40),
    ("a", 41),
    ("w", 63),
    ("X", None),
    ("@", 16),
    ("_", None),
    ("x", None),
    ("!", None),
]

characters = [
    # (six-bit value, display character)
    (0, "@"),
    (1, "A"),
    (26, "Z"),
    (31, "_"),
    (32, " "),
    (48, "0"),
    (63, "?"),
]

unarmoring = [
    # (payload, fill bits, binary digits, characters outside the alphabet)
    ("15M", 0, "000001000101011101", 0),
    ("15M", 2, "0000010001010111", 0),
    ("w",   0, "111111", 0),
    ("1X5", 0, "000001000000000101", 1),
    ("1@5", 0, "000001010000000101", 0),
    ("",    0, "", 0),
]


def run_extractions():
    errors = 0
    for (what, operation, expected) in extractions:
        got = operation()
        if got != expected:
            sys.stderr.write("bits test: %s expected %r got %r\n"
                             % (what, expected, got))
            errors += 1
    return errors


def run_armor():
    errors = 0
    for (ch, value) in armor:
        got = sixbit_value(ch)
        if got != value:
            sys.stderr.write("bits test: armor %r expected %r got %r\n"
                             % (ch, value, got))
            errors += 1
    for (value, ch) in characters:
        got = sixbit_char(value)
        if got != ch:
            sys.stderr.write("bits test: char %d expected %r got %r\n"
                             % (value, ch, got))
            errors += 1
    return errors


def run_unarmoring():
    errors = 0
    for (payload, fill, digits, bad) in unarmoring:
        bits = unarmor(payload, fill)
        if str(bits) != digits or bits.bad_chars != bad:
            sys.stderr.write("bits test: unarmor %r/%d expected %s (%d bad) "
                             "got %s (%d bad)\n"
                             % (payload, fill, digits, bad,
                                str(bits), bits.bad_chars))
            errors += 1
    return errors


def test_extractions():
    assert run_extractions() == 0


def test_armor():
    assert run_armor() == 0


def test_unarmoring():
    assert run_unarmoring() == 0


def test_fill_bits_range():
    with pytest.raises(ValueError):
        unarmor("15M", -6)
    with pytest.raises(ValueError):
        unarmor("15M", 6)


def test_binary_digits_only():
    with pytest.raises(ValueError):
        BitVector().from_binary("0120")


if __name__ == "__main__":
    errors = run_extractions() + run_armor() + run_unarmoring()
    if errors:
        sys.exit(1)
    else:
        print("OK")
        sys.exit(0)

# End
