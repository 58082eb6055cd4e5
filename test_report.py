#!/usr/bin/env python3
#
# Test record rendering in aivdm/report.py
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.

import json

import aivdm
from aivdm.report import dump, dsv, jsonify, histogram

type1 = "!AIVDM,1,1,,B,15M67FC000G?ufbE`FepT@3n00Sa,0*5C"


def test_dump():
    text = dump({"type": 1, "mmsi": 366053209, "speed": None,
                 "no_such_field": 3})
    assert text.split("\n") == [
        "%-25s: %s" % ("Message Type", 1),
        "%-25s: %s" % ("MMSI", 366053209),
        "%-25s: %s" % ("Speed Over Ground", None),
        "%-25s: %s" % ("no_such_field", 3),
        "%%",
        ]


def test_dump_decoded():
    text = dump(aivdm.decode(type1))
    assert text.endswith("\n%%")
    assert "Country Code" in text
    assert "Navigation Status Text" in text


def test_dsv():
    assert dsv({"type": 5, "callsign": "3FOF8", "draught": None,
                "dte": False}) == "5|3FOF8||False"


def test_jsonify():
    record = aivdm.decode(type1)
    text = jsonify(record)
    assert "\n" not in text and ", " not in text
    assert json.loads(text) == record


def test_histogram():
    assert histogram({18: 2, 1: 7, 5: 1}) == "1\t7\n5\t1\n18\t2"
    assert histogram({}) == ""

# End
