# armor.py - AIVDM six-bit armoring and NMEA envelope parsing
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.
#
# Wire format of one fragment:
#
#   !AIVDM,<count>,<index>,<msgid>,<channel>,<payload>,<fill>*<checksum>
#
# The checksum is stripped and never verified.

from .exceptions import FormatError

# We need to be able to take sentences that arrive as bytes off a socket
# or a file opened in binary mode.  The text is known to be US-ASCII, so
# 'latin-1' preserves every byte without any encoding surprises.
BINARY_ENCODING = 'latin-1'

# Minimum number of comma-separated fields after the leading marker
ENVELOPE_FIELDS = 6


def polystr(o):
    "Convert bytes or str to str with proper encoding."
    if isinstance(o, str):
        return o
    if isinstance(o, bytes):
        return str(o, encoding=BINARY_ENCODING)
    raise ValueError("expected str or bytes, got %s" % type(o).__name__)


def _armor_table():
    table = {}
    for code in range(48, 88):
        table[chr(code)] = code - 48
    for code in range(96, 120):
        table[chr(code)] = code - 56
    return table

# Armor character -> six-bit value.  Anything not in here decodes as 0.
armor = _armor_table()

# Six-bit value -> display character, per ITU-R M.1371 table 47
sixbit_chars = "@ABCDEFGHIJKLMNOPQRSTUVWXYZ[\\]^_ !\"#$%&'()*+,-./0123456789:;<=>?"


def sixbit_value(ch):
    "Six-bit value of an armor character, or None if it isn't one."
    return armor.get(ch)


def sixbit_char(n):
    "Render a six-bit value as text."
    if n < 32:
        return chr(n + 64)
    return chr(n)


class Envelope:
    "One parsed AIVDM/AIVDO sentence."
    def __init__(self, tag, count, index, message_id, channel, payload,
                 fill=0):
        self.tag = tag			# AIVDM or AIVDO, with talker ID
        self.count = count		# Total fragments in this message
        self.index = index		# 1-origin index of this fragment
        self.message_id = message_id	# Sequential message ID or None
        self.channel = channel		# Radio channel, A or B
        self.payload = payload		# Armored payload text
        self.fill = fill		# Fill bits on the last character

    def __repr__(self):
        return "Envelope(%s, %d/%d, id=%r, ch=%s, fill=%d, %s)" % \
            (self.tag, self.index, self.count, self.message_id,
             self.channel, self.fill, self.payload)


def is_envelope(text):
    "Does this line carry the NMEA sentence marker?"
    return text.startswith("!") or text.startswith("$")


def _integer(fieldname, value, line):
    try:
        return int(value)
    except ValueError:
        raise FormatError(line, "Invalid NMEA sentence: bad %s field %r"
                          % (fieldname, value))


def parse_envelope(line):
    "Split an NMEA sentence into an Envelope."
    line = polystr(line).strip()
    if not is_envelope(line):
        raise FormatError(line,
                          "Invalid NMEA sentence: must start with ! or $")
    star = line.rfind("*")
    if star > 0:
        line = line[:star]
    fields = line[1:].split(",")
    if len(fields) < ENVELOPE_FIELDS:
        raise FormatError(line, "Invalid NMEA sentence: insufficient fields")
    count = _integer("fragment count", fields[1], line)
    index = _integer("fragment number", fields[2], line)
    if count < 1:
        raise FormatError(line, "Invalid NMEA sentence: fragment count %d"
                          % count)
    fill = 0
    if len(fields) > ENVELOPE_FIELDS and fields[6]:
        fill = _integer("fill bits", fields[6], line)
        if not 0 <= fill <= 5:
            raise FormatError(line, "Invalid NMEA sentence: fill bits %d "
                              "outside 0..5" % fill)
    return Envelope(tag=fields[0],
                    count=count,
                    index=index,
                    message_id=fields[3] or None,
                    channel=fields[4],
                    payload=fields[5],
                    fill=fill)

# End
