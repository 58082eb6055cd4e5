# report.py - render decoded AIVDM records for humans and other programs
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.

import json

from .layouts import field_legends


def dump(record):
    "One 'legend: value' line per field, terminated by %%."
    lines = []
    for (name, value) in record.items():
        lines.append("%-25s: %s" % (field_legends.get(name, name), value))
    lines.append("%%")
    return "\n".join(lines)


def dsv(record):
    "Field values separated by |."
    return "|".join(map(lambda x: "" if x is None else str(x),
                        record.values()))


def jsonify(record):
    "The record as a one-line JSON object."
    return json.dumps(record, separators=(",", ":"))


def histogram(frequencies):
    "Message type counts, one 'type<TAB>count' line per type."
    return "\n".join("%d\t%d" % (msgtype, frequencies[msgtype])
                     for msgtype in sorted(frequencies))

# End
