#!/usr/bin/env python3
#
# Test sentence decoding and fragment reassembly in aivdm/decoder.py
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.

import sys

import pytest

import aivdm
from aivdm.decoder import Decoder, FragmentBuffer
from aivdm.exceptions import MissingFragment

type1 = "!AIVDM,1,1,,B,15M67FC000G?ufbE`FepT@3n00Sa,0*5C"
type4 = "!AIVDM,1,1,,B,402OviQuMGCqWrRO9>E6fE700@GO,0*4D"
type5a = "!AIVDM,2,1,3,B,55?MbV02>H;s<HtKR20EHE:0@T4@Dn2222222216L961O5Gf0NSQEp6ClRp8,0*1C"
type5b = "!AIVDM,2,2,3,B,88888888880,2*25"
type18 = "!AIVDM,1,1,,B,B52K;h02Kfq@OpBlNhWAwwpUkP06,0*76"
type19 = "!AIVDM,1,1,,B,C5N3SRP5HEJ:V00000000000000,0*1B"
# "@" is armor for 16, a type with no layout
badtype = "!AIVDM,1,1,,B,@03OviPUMGCqWrRO9>E6fE700@GO,0*3E"

expectations = [
    # (description, sentence, expected subset of the record)
    ("type 1 position report", type1,
     {"type": 1, "repeat": 0, "mmsi": 366053209, "status": 3,
      "status_text": "Restricted manoeuverability", "turn": 0,
      "speed": 0.0, "accuracy": False, "lon": -73404971 / 600000.0,
      "lat": 22681271 / 600000.0, "course": 219.3, "heading": 1,
      "second": 59, "maneuver": 0, "raim": False, "radio": 2281,
      "country": "United States of America", "country_code": "US"}),
    ("bare payload", "15M67FC000G?ufbE`FepT@3n00Sa",
     {"type": 1, "mmsi": 366053209, "course": 219.3}),
    ("bytes sentence", type1.encode("ascii"),
     {"type": 1, "mmsi": 366053209}),
    ("type 4 base station report", type4,
     {"type": 4, "mmsi": 2621126, "year": 2007, "month": 5, "day": 14,
      "hour": 19, "minute": 57, "second": 39,
      "timestamp": "2007-05-14T19:57:39Z"}),
    ("type 18 class B position report", type18,
     {"type": 18, "mmsi": 338086848, "country_code": "US"}),
    ("type 19 extended class B report", type19,
     {"type": 19}),
]

failures = [
    # (description, sentence, fragment of the expected message)
    ("no marker, not armor", "", "too short"),
    ("insufficient fields", "!AIVDM,1,1", "insufficient fields"),
    ("bad fragment count", "!AIVDM,x,1,,A,15M67F,0", "fragment count"),
    ("fragment out of range", "!AIVDM,2,3,9,A,15M67F,0", "outside 1..2"),
    ("fragment zero", "!AIVDM,2,0,9,A,15M67F,0", "outside 1..2"),
    ("unsupported type", badtype, "Unsupported message type: 16"),
    ("negative fill bits",
     "!AIVDM,1,1,,B,15M67FC000G?ufbE`FepT@3n00Sa,-6*5C", "fill bits -6"),
    ("too many fill bits",
     "!AIVDM,1,1,,B,15M67FC000G?ufbE`FepT@3n00Sa,6*5C", "fill bits 6"),
]


def close(a, b):
    if isinstance(a, float) and isinstance(b, float):
        return abs(a - b) < 1e-9
    return a == b


def run_expectations():
    errors = 0
    for (what, sentence, expected) in expectations:
        record = aivdm.decode(sentence)
        if record.get("error") or record.get("partial"):
            sys.stderr.write("decoder test: %s: unexpected marker in %r\n"
                             % (what, record))
            errors += 1
            continue
        for (name, value) in expected.items():
            if name not in record or not close(record[name], value):
                sys.stderr.write("decoder test: %s: %s expected %r got %r\n"
                                 % (what, name, value, record.get(name)))
                errors += 1
    return errors


def run_failures():
    errors = 0
    for (what, sentence, complaint) in failures:
        record = aivdm.decode(sentence)
        if not record.get("error") or complaint not in record["message"]:
            sys.stderr.write("decoder test: %s: expected error %r got %r\n"
                             % (what, complaint, record))
            errors += 1
        elif "partial" in record:
            sys.stderr.write("decoder test: %s: error is also partial\n"
                             % what)
            errors += 1
    return errors


def test_expectations():
    assert run_expectations() == 0


def test_failures():
    assert run_failures() == 0


def test_position_in_range():
    record = aivdm.decode(type1)
    assert -180 <= record["lon"] <= 180
    assert -90 <= record["lat"] <= 90
    assert "error" not in record and "partial" not in record


def check_type5(record):
    assert record["type"] == 5
    assert "partial" not in record and "error" not in record
    assert record["mmsi"] == 351759000
    assert record["imo"] == 9330878
    assert record["callsign"] == "3FOF8"
    assert record["shipname"] == "EVER DIADEM"
    assert record["destination"] == "NEW YORK"
    assert record["shiptype"] == 70
    assert record["shiptype_text"] == "Cargo - all ships of this type"
    assert record["length"] == 295
    assert record["width"] == 32
    assert abs(record["draught"] - 12.2) < 1e-9
    assert record["eta"] == "05-15T14:00Z"
    assert record["country"] == "Panama"


def test_two_fragments():
    decoder = Decoder()
    first = decoder.decode(type5a)
    assert first == {"partial": True, "message_id": "3",
                     "received": 1, "expected": 2}
    check_type5(decoder.decode(type5b))
    assert decoder.get_buffer_status() == {}


def test_fragments_out_of_order():
    decoder = Decoder()
    assert decoder.decode(type5b)["partial"]
    check_type5(decoder.decode(type5a))


def test_no_leakage_between_instances():
    first = Decoder()
    second = Decoder()
    first.decode(type5a)
    assert first.get_buffer_status() == {"3": {"received": 1, "expected": 2}}
    assert second.get_buffer_status() == {}
    record = second.decode(type5b)
    assert record["partial"]
    assert record["received"] == 1 and record["expected"] == 2
    # Module-level calls start from scratch every time
    assert aivdm.decode(type5a)["partial"]
    assert aivdm.decode(type5b)["partial"]


def test_repeated_fragment():
    decoder = Decoder()
    decoder.decode(type5a)
    record = decoder.decode(type5a)
    assert record["partial"] and record["received"] == 1


def test_clear_buffer():
    decoder = Decoder()
    decoder.decode(type5a)
    decoder.decode(type5a.replace(",2,1,3,", ",2,1,4,"))
    assert sorted(decoder.get_buffer_status()) == ["3", "4"]
    decoder.clear_buffer("3")
    assert list(decoder.get_buffer_status()) == ["4"]
    decoder.clear_buffer("no such message")
    decoder.clear_buffer()
    assert decoder.get_buffer_status() == {}
    # A cleared message starts over
    assert decoder.decode(type5b)["partial"]


def test_clear_unnamed_buffer():
    decoder = Decoder()
    decoder.decode(type5a)
    decoder.decode(type5a.replace(",2,1,3,", ",2,1,,"))
    assert decoder.get_buffer_status()[None] == {"received": 1,
                                                 "expected": 2}
    decoder.clear_buffer(None)
    assert list(decoder.get_buffer_status()) == ["3"]


def test_decode_multiple():
    records = aivdm.decode_multiple([type1, type18])
    assert [r["type"] for r in records] == [1, 18]
    records = aivdm.decode_multiple([type5a, type5b])
    assert records[0]["partial"]
    check_type5(records[1])
    records = Decoder().decode_multiple([])
    assert records == []


def test_decode_by_type():
    decoder = Decoder()
    record = decoder.decode_by_type(16, "01" + "0" * 62)
    assert record["error"] and "Unsupported" in record["message"]
    assert record["type"] == 16
    assert record["raw"] == "01" + "0" * 62
    record = decoder.decode_by_type(1, "0120")
    assert record["error"]


def test_unsupported_sentence():
    decoder = Decoder()
    record = decoder.decode(badtype)
    assert record["error"] and record["type"] == 16
    assert "partial" not in record
    assert decoder.bad_chars == 0


def test_bad_characters_counted():
    decoder = Decoder()
    # X is between the two armor ranges and decodes as 0
    record = decoder.decode("1X5M")
    assert record["type"] == 1 and "error" not in record
    assert decoder.bad_chars == 1


def test_resolver_hook():
    decoder = Decoder(resolver=lambda mmsi: {"name": "Atlantis",
                                             "code": "AT"})
    record = decoder.decode(type1)
    assert record["country"] == "Atlantis"
    assert record["country_code"] == "AT"
    record = Decoder(resolver=lambda mmsi: None).decode(type1)
    assert "country" not in record
    record = Decoder(resolver=None).decode(type1)
    assert "country" not in record


def test_missing_fragment():
    buffer = FragmentBuffer(3)
    buffer.add(1, "55?Mb", 0)
    buffer.add(3, "888", 2)
    assert buffer.received() == 2 and not buffer.complete()
    assert buffer.fill == 2
    with pytest.raises(MissingFragment):
        buffer.join("7")


if __name__ == "__main__":
    if run_expectations() + run_failures():
        sys.exit(1)
    else:
        print("OK")
        sys.exit(0)

# End
