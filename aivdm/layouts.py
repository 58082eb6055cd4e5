# layouts.py - declarative field layouts for AIVDM message types
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.
#
# This decoder works by defining a declarative pseudolanguage in which
# to describe the process of extracting packed bitfields from an AIS
# message, a set of tables which contain instructions in the pseudolanguage,
# and a small amount of code for interpreting it.
#
# Bit offsets are implicit: each instruction starts where the previous
# one ended.  The only exception is lookahead, which peeks at a fixed
# offset so that a dispatch can select a variant whose selector bit is
# located *after* the variant part (message type 22).

import logging

from .bits import coerce
from .exceptions import UnsupportedType
from .legends import (status_legends, epfd_type_legends, ship_type_legends,
                      aid_type_legends, station_type_legends, legend)

# Here are the pseudoinstructions in the pseudolanguage.

class bitfield:
    "Object defining the interpretation of an AIS bitfield."
    # The oob (out-of-band) member is the raw value the protocol reserves
    # for "not available"; a field holding it is reported as None.  A
    # width of None means the field runs to the end of the message; a
    # negative width stops that many bits short of the end.
    def __init__(self, name, width, dtype, oob, legend,
                 formatter=None, conditional=None):
        self.name = name		# Fieldname, for internal use and JSON
        self.width = width		# Bit width, None for variable-length
        self.type = dtype		# signed/unsigned/string/boolean/raw
        self.oob = oob			# Out-of-band value to be shown as n/a
        self.legend = legend		# Human-friendly description of field
        self.formatter = formatter	# Scaling hook or legend table
        self.conditional = conditional	# Evaluation guard for this field

class spare:
    "Describes spare bits, not to be interpreted."
    def __init__(self, width, conditional=None):
        self.width = width
        self.conditional = conditional	# Evaluation guard for this field

class lookahead:
    "Reads bits at a fixed offset without moving the cursor or reporting."
    def __init__(self, name, start, width, conditional=None):
        self.name = name
        self.start = start
        self.width = width
        self.conditional = conditional

class dispatch:
    "Describes how to dispatch to a message type variant on a subfield value."
    def __init__(self, fieldname, subtypes, compute=lambda x: x,
                 width=0, conditional=None):
        self.fieldname = fieldname	# Value of view to dispatch on
        self.subtypes = subtypes	# Possible subtypes to dispatch to
        self.compute = compute		# Pass value through this pre-dispatch
        self.width = width		# Bits skipped when no subtype applies
        self.conditional = conditional	# Evaluation guard for this field

# Message-type-specific information begins here. There are three
# different kinds of things in it: (1) scaling hooks, (2) instruction
# tables, and (3) field group declarations.  The string tables for
# enumerated types live in legends.py.

def latlon_scale(n):
    return n / 600000.0

def short_latlon_scale(n):
    return n / 600.0

def tenths(n):
    return n / 10.0

# Raw "not available" values for positions
LON_NA = 0x6791AC0		# 181 degrees in 1/10000 min
LAT_NA = 0x3412140		# 91 degrees in 1/10000 min
SHORT_LON_NA = 0x1a838		# 181 degrees in 1/10 min
SHORT_LAT_NA = 0xd548		# 91 degrees in 1/10 min

header = (
    bitfield("type",          6, 'unsigned', None, "Message Type"),
    bitfield("repeat",        2, 'unsigned', None, "Repeat Indicator"),
    bitfield("mmsi",         30, 'unsigned', None, "MMSI"),
    )

# Common Navigation Block is the format for AIS types 1, 2, and 3
cnb = (
    bitfield("status",   4, 'unsigned', None,      "Navigation Status",
             formatter=status_legends),
    bitfield("turn",     8, 'signed',   None,      "Rate of Turn"),
    bitfield("speed",   10, 'unsigned', 1023,      "Speed Over Ground",
             formatter=tenths),
    bitfield("accuracy", 1, 'boolean',  None,      "Position Accuracy"),
    bitfield("lon",     28, 'signed',   LON_NA,    "Longitude",
             formatter=latlon_scale),
    bitfield("lat",     27, 'signed',   LAT_NA,    "Latitude",
             formatter=latlon_scale),
    bitfield("course",  12, 'unsigned', 0xe10,     "Course Over Ground",
             formatter=tenths),
    bitfield("heading",  9, 'unsigned', 511,       "True Heading"),
    bitfield("second",   6, 'unsigned', None,      "Time Stamp"),
    bitfield("maneuver", 2, 'unsigned', None,      "Maneuver Indicator"),
    spare(3),
    bitfield("raim",     1, 'boolean',  None,      "RAIM flag"),
    bitfield("radio",   19, 'unsigned', None,      "Radio status"),
)

type4 = (
    bitfield("year",    14,  "unsigned", 0,         "Year"),
    bitfield("month",    4,  "unsigned", 0,         "Month"),
    bitfield("day",      5,  "unsigned", 0,         "Day"),
    bitfield("hour",     5,  "unsigned", 24,        "Hour"),
    bitfield("minute",   6,  "unsigned", 60,        "Minute"),
    bitfield("second",   6,  "unsigned", 60,        "Second"),
    bitfield("accuracy", 1,  "boolean",  None,      "Fix quality"),
    bitfield("lon",     28,  "signed",   LON_NA,    "Longitude",
             formatter=latlon_scale),
    bitfield("lat",     27,  "signed",   LAT_NA,    "Latitude",
             formatter=latlon_scale),
    bitfield("epfd",     4,  "unsigned", None,      "Type of EPFD",
             formatter=epfd_type_legends),
    spare(10),
    bitfield("raim",     1,  "boolean",  None,      "RAIM flag"),
    bitfield("radio",   19,  "unsigned", None,      "SOTDMA state"),
    )

type5 = (
    bitfield("ais_version",   2, 'unsigned', None, "AIS Version"),
    bitfield("imo",          30, 'unsigned', None, "IMO Identification Number"),
    bitfield("callsign",     42, 'string',   None, "Call Sign"),
    bitfield("shipname",    120, 'string',   None, "Vessel Name"),
    bitfield("shiptype",      8, 'unsigned', None, "Ship Type",
             formatter=ship_type_legends),
    bitfield("to_bow",        9, 'unsigned', None, "Dimension to Bow"),
    bitfield("to_stern",      9, 'unsigned', None, "Dimension to Stern"),
    bitfield("to_port",       6, 'unsigned', None, "Dimension to Port"),
    bitfield("to_starboard",  6, 'unsigned', None, "Dimension to Starboard"),
    bitfield("epfd",          4, 'unsigned', None, "Position Fix Type",
             formatter=epfd_type_legends),
    bitfield("eta_month",     4, 'unsigned', None, "ETA month"),
    bitfield("eta_day",       5, 'unsigned', None, "ETA day"),
    bitfield("eta_hour",      5, 'unsigned', None, "ETA hour"),
    bitfield("eta_minute",    6, 'unsigned', None, "ETA minute"),
    bitfield("draught",       8, 'unsigned', None, "Draught",
             formatter=tenths),
    bitfield("destination", 120, 'string',   None, "Destination"),
    bitfield("dte",           1, 'boolean',  None, "DTE"),
    spare(1),
    )

type6 = (
    bitfield("seqno",            2, 'unsigned', None, "Sequence Number"),
    bitfield("dest_mmsi",       30, 'unsigned', None, "Destination MMSI"),
    bitfield("retransmit",       1, 'boolean',  None, "Retransmit flag"),
    spare(1),
    bitfield("dac",             10, 'unsigned', None, "DAC"),
    bitfield("fid",              6, 'unsigned', None, "Functional ID"),
    bitfield("data",          None, 'raw',      None, "Data"),
    )

type7 = (
    spare(2),
    bitfield("mmsi1",           30, 'unsigned', None, "MMSI number 1"),
    bitfield("seqno1",           2, 'unsigned', None, "Sequence number 1"),
    bitfield("mmsi2",           30, 'unsigned', None, "MMSI number 2"),
    bitfield("seqno2",           2, 'unsigned', None, "Sequence number 2"),
    bitfield("mmsi3",           30, 'unsigned', None, "MMSI number 3"),
    bitfield("seqno3",           2, 'unsigned', None, "Sequence number 3"),
    bitfield("mmsi4",           30, 'unsigned', None, "MMSI number 4"),
    bitfield("seqno4",           2, 'unsigned', None, "Sequence number 4"),
    )

type8 = (
    spare(2),
    bitfield("dac",            10,  'unsigned', None,  "DAC"),
    bitfield("fid",            6,   'unsigned', None,  "Functional ID"),
    bitfield("data",           None, 'raw',     None,  "Data"),
    )

type9 = (
    bitfield("alt",         12, 'unsigned', 4095,      "Altitude"),
    bitfield("speed",       10, 'unsigned', 1023,      "SOG"),
    bitfield("accuracy",    1,  'boolean',  None,      "Position Accuracy"),
    bitfield("lon",         28, 'signed',   LON_NA,    "Longitude",
             formatter=latlon_scale),
    bitfield("lat",         27, 'signed',   LAT_NA,    "Latitude",
             formatter=latlon_scale),
    bitfield("course",      12, 'unsigned', 0xe10,     "Course Over Ground",
             formatter=tenths),
    bitfield("second",      6,  'unsigned', None,      "Time Stamp"),
    bitfield("regional",    8,  'unsigned', None,      "Regional reserved"),
    bitfield("dte",         1,  'boolean',  None,      "DTE"),
    spare(3),
    bitfield("assigned",    1,  'boolean',  None,      "Assigned"),
    bitfield("raim",        1,  'boolean',  None,      "RAIM flag"),
    bitfield("radio",       20, 'unsigned', None,      "Radio status"),
    )

type10 = (
    spare(2),
    bitfield("dest_mmsi",       30, 'unsigned', None, "Destination MMSI"),
    spare(2),
   )

type12 = (
    bitfield("seqno",            2, 'unsigned', None, "Sequence Number"),
    bitfield("dest_mmsi",       30, 'unsigned', None, "Destination MMSI"),
    bitfield("retransmit",       1, 'boolean',  None, "Retransmit flag"),
    spare(1),
    bitfield("text",          None, 'string',   None, "Text"),
    )

type14 = (
    spare(2),
    bitfield("text",          None, 'string',   None, "Text"),
    )

type15 = (
    spare(2),
    bitfield("mmsi1",     30, 'unsigned', None, "First interrogated MMSI"),
    bitfield("type1_1",   6,  'unsigned', None, "First message type"),
    bitfield("offset1_1", 12, 'unsigned', None, "First slot offset"),
    spare(2),
    bitfield("type1_2",   6,  'unsigned', None, "Second message type"),
    bitfield("offset1_2", 12, 'unsigned', None, "Second slot offset"),
    spare(2),
    bitfield("mmsi2",     30, 'unsigned', None, "Second interrogated MMSI"),
    bitfield("type2_1",   6,  'unsigned', None, "Message type"),
    bitfield("offset2_1", 12, 'unsigned', None, "Slot offset"),
    spare(2),
    )

type18 = (
    bitfield("reserved",    8,  'unsigned', None,      "Regional reserved"),
    bitfield("speed",       10, 'unsigned', 1023,      "Speed Over Ground",
             formatter=tenths),
    bitfield("accuracy",    1,  'boolean',  None,      "Position Accuracy"),
    bitfield("lon",         28, 'signed',   LON_NA,    "Longitude",
             formatter=latlon_scale),
    bitfield("lat",         27, 'signed',   LAT_NA,    "Latitude",
             formatter=latlon_scale),
    bitfield("course",      12, 'unsigned', 0xE10,     "Course Over Ground",
             formatter=tenths),
    bitfield("heading",     9,  'unsigned', 511,       "True Heading"),
    bitfield("second",      6,  'unsigned', None,      "Time Stamp"),
    bitfield("regional",    2,  'unsigned', None,      "Regional reserved"),
    bitfield("cs",          1,  'boolean',  None,      "CS Unit"),
    bitfield("display",     1,  'boolean',  None,      "Display flag"),
    bitfield("dsc",         1,  'boolean',  None,      "DSC flag"),
    bitfield("band",        1,  'boolean',  None,      "Band flag"),
    bitfield("msg22",       1,  'boolean',  None,      "Message 22 flag"),
    bitfield("assigned",    1,  'boolean',  None,      "Assigned"),
    bitfield("raim",        1,  'boolean',  None,      "RAIM flag"),
    bitfield("radio",       20, 'unsigned', None,      "Radio status"),
    )

type19 = (
    bitfield("reserved",    8,  'unsigned', None,      "Regional reserved"),
    bitfield("speed",       10, 'unsigned', 1023,      "Speed Over Ground",
             formatter=tenths),
    bitfield("accuracy",    1,  'boolean',  None,      "Position Accuracy"),
    bitfield("lon",         28, 'signed',   LON_NA,    "Longitude",
             formatter=latlon_scale),
    bitfield("lat",         27, 'signed',   LAT_NA,    "Latitude",
             formatter=latlon_scale),
    bitfield("course",      12, 'unsigned', 0xE10,     "Course Over Ground",
             formatter=tenths),
    bitfield("heading",     9,  'unsigned', 511,       "True Heading"),
    bitfield("second",      6,  'unsigned', None,      "Time Stamp"),
    bitfield("regional",    4,  'unsigned', None,      "Regional reserved"),
    bitfield("shipname",  120,  'string',   None,      "Vessel Name"),
    bitfield("shiptype",    8,  'unsigned', None,      "Ship Type",
             formatter=ship_type_legends),
    bitfield("to_bow",      9,  'unsigned', None,      "Dimension to Bow"),
    bitfield("to_stern",    9,  'unsigned', None,      "Dimension to Stern"),
    bitfield("to_port",     6,  'unsigned', None,      "Dimension to Port"),
    bitfield("to_starboard", 6, 'unsigned', None,      "Dimension to Starboard"),
    bitfield("epfd",        4,  'unsigned', None,      "Position Fix Type",
             formatter=epfd_type_legends),
    bitfield("raim",        1,  'boolean',  None,      "RAIM flag"),
    bitfield("dte",         1,  'boolean',  None,      "DTE"),
    bitfield("assigned",    1,  'boolean',  None,      "Assigned"),
    spare(4),
    )

type20 = (
    spare(2),
    bitfield("offset1",    12, 'unsigned', None, "Offset number"),
    bitfield("number1",     4, 'unsigned', None, "Reserved slots"),
    bitfield("timeout1",    3, 'unsigned', None, "Time-out"),
    bitfield("increment1", 11, 'unsigned', None, "Increment"),
    bitfield("offset2",    12, 'unsigned', None, "Offset number 2"),
    bitfield("number2",     4, 'unsigned', None, "Reserved slots"),
    bitfield("timeout2",    3, 'unsigned', None, "Time-out"),
    bitfield("increment2", 11, 'unsigned', None, "Increment"),
    bitfield("offset3",    12, 'unsigned', None, "Offset number 3"),
    bitfield("number3",     4, 'unsigned', None, "Reserved slots"),
    bitfield("timeout3",    3, 'unsigned', None, "Time-out"),
    bitfield("increment3", 11, 'unsigned', None, "Increment"),
    bitfield("offset4",    12, 'unsigned', None, "Offset number 4"),
    bitfield("number4",     4, 'unsigned', None, "Reserved slots"),
    bitfield("timeout4",    3, 'unsigned', None, "Time-out"),
    bitfield("increment4", 11, 'unsigned', None, "Increment"),
    )

type21 = (
    bitfield("aid_type",        5, 'unsigned',  None,      "Aid type",
             formatter=aid_type_legends),
    bitfield("name",          120, 'string',    None,      "Name"),
    bitfield("accuracy",        1, 'boolean',   None,      "Position Accuracy"),
    bitfield("lon",            28, 'signed',    LON_NA,    "Longitude",
             formatter=latlon_scale),
    bitfield("lat",            27, 'signed',    LAT_NA,    "Latitude",
             formatter=latlon_scale),
    bitfield("to_bow",          9, 'unsigned',  None,      "Dimension to Bow"),
    bitfield("to_stern",        9, 'unsigned',  None,      "Dimension to Stern"),
    bitfield("to_port",         6, 'unsigned',  None,      "Dimension to Port"),
    bitfield("to_starboard",    6, 'unsigned',  None,      "Dimension to Starboard"),
    bitfield("epfd",            4, 'unsigned',  None,      "Position Fix Type",
             formatter=epfd_type_legends),
    bitfield("second",          6, 'unsigned',  None,      "UTC Second"),
    bitfield("off_position",    1, 'boolean',   None,      "Off-Position Indicator"),
    bitfield("regional",        8, 'unsigned',  None,      "Regional reserved"),
    bitfield("raim",            1, 'boolean',   None,      "RAIM flag"),
    bitfield("virtual_aid",     1, 'boolean',   None,      "Virtual-aid flag"),
    bitfield("assigned",        1, 'boolean',   None,      "Assigned-mode flag"),
    spare(1),
    bitfield("name_extension", None, 'string',  None,      "Name Extension",
             conditional=lambda i, v: v["bitlen"] > 272),
    )

type22_broadcast = (
    bitfield("ne_lon",    18, 'signed',    None,    "NE Longitude",
             formatter=short_latlon_scale),
    bitfield("ne_lat",    17, 'signed',    None,    "NE Latitude",
             formatter=short_latlon_scale),
    bitfield("sw_lon",    18, 'signed',    None,    "SW Longitude",
             formatter=short_latlon_scale),
    bitfield("sw_lat",    17, 'signed',    None,    "SW Latitude",
             formatter=short_latlon_scale),
    )

type22_addressed = (
    bitfield("dest_mmsi1", 30, 'unsigned', None,    "Destination MMSI 1"),
    spare(5),
    bitfield("dest_mmsi2", 30, 'unsigned', None,    "Destination MMSI 2"),
    spare(5),
    )

type22 = (
    spare(2),
    bitfield("channel_a", 12, 'unsigned',  None,    "Channel A"),
    bitfield("channel_b", 12, 'unsigned',  None,    "Channel B"),
    bitfield("txrx",       4, 'unsigned',  None,    "Tx/Rx mode"),
    bitfield("power",      1, 'boolean',   None,    "Power"),
    # The addressed flag follows the part it selects
    lookahead("addressed", 139, 1),
    dispatch("addressed", (type22_broadcast, type22_addressed), width=70),
    bitfield("addressed",  1, 'boolean',   None,    "Addressed"),
    bitfield("band_a",     1, 'boolean',   None,    "Channel A Band"),
    bitfield("band_b",     1, 'boolean',   None,    "Channel B Band"),
    bitfield("zonesize",   3, 'unsigned',  None,    "Zone size"),
    spare(23),
    )

type23 = (
    spare(2),
    bitfield("ne_lon",    18, 'signed',    None,    "NE Longitude",
             formatter=short_latlon_scale),
    bitfield("ne_lat",    17, 'signed',    None,    "NE Latitude",
             formatter=short_latlon_scale),
    bitfield("sw_lon",    18, 'signed',    None,    "SW Longitude",
             formatter=short_latlon_scale),
    bitfield("sw_lat",    17, 'signed',    None,    "SW Latitude",
             formatter=short_latlon_scale),
    bitfield("station_type", 4, 'unsigned', None,   "Station Type",
             formatter=station_type_legends),
    bitfield("shiptype",   8, 'unsigned',  None,    "Ship Type",
             formatter=ship_type_legends),
    spare(22),
    bitfield("txrx",       2, 'unsigned',  None,    "Tx/Rx mode"),
    bitfield("interval",   4, 'unsigned',  None,    "Reporting interval"),
    bitfield("quiet",      4, 'unsigned',  None,    "Quiet time"),
    spare(6),
    )

type24a = (
    bitfield("shipname",    120, 'string',   None, "Vessel Name"),
    )

type24b_dimensions = (
    bitfield("to_bow",        9, 'unsigned', None, "Dimension to Bow"),
    bitfield("to_stern",      9, 'unsigned', None, "Dimension to Stern"),
    bitfield("to_port",       6, 'unsigned', None, "Dimension to Port"),
    bitfield("to_starboard",  6, 'unsigned', None, "Dimension to Starboard"),
    )

type24b_mothership = (
    bitfield("mothership_mmsi", 30, 'unsigned', None, "Mothership MMSI"),
    )

type24b = (
    bitfield("shiptype",      8, 'unsigned', None, "Ship Type",
             formatter=ship_type_legends),
    bitfield("vendorid",     18, 'string',   None, "Vendor ID"),
    bitfield("model",         4, 'unsigned', None, "Unit Model Code"),
    bitfield("serial",       20, 'unsigned', None, "Serial Number"),
    bitfield("callsign",     42, 'string',   None, "Call Sign"),
    # Auxiliary craft (MMSI 98MIDxxxx) carry their mothership's MMSI
    # where others carry dimensions
    dispatch("mmsi", (type24b_dimensions, type24b_mothership),
             compute=lambda m: 1 if str(m)[:2] == '98' else 0, width=30),
    spare(6),
    )

type24 = (
    bitfield('partno', 2, 'unsigned', None, "Part Number"),
    dispatch('partno', {0: type24a, 1: type24b}),
    )

type25 = (
    bitfield("addressed",     1, 'boolean',     None, "Addressing flag"),
    bitfield("structured",    1, 'boolean',     None, "Binary data flag"),
    bitfield("dest_mmsi",    30, 'unsigned',    None, "Destination MMSI",
             conditional=lambda i, v: v["addressed"]),
    bitfield("dac",          10, 'unsigned',    None, "DAC",
             conditional=lambda i, v: v["structured"]),
    bitfield("fid",           6, 'unsigned',    None, "Functional ID",
             conditional=lambda i, v: v["structured"]),
    bitfield("data",       None, 'raw',         None, "Data"),
    )

# The radio status closes the message, after the variable-length data
type26 = (
    bitfield("addressed",     1, 'boolean',     None, "Addressing flag"),
    bitfield("structured",    1, 'boolean',     None, "Binary data flag"),
    bitfield("dest_mmsi",    30, 'unsigned',    None, "Destination MMSI",
             conditional=lambda i, v: v["addressed"]),
    bitfield("dac",          10, 'unsigned',    None, "DAC",
             conditional=lambda i, v: v["structured"]),
    bitfield("fid",           6, 'unsigned',    None, "Functional ID",
             conditional=lambda i, v: v["structured"]),
    bitfield("data",        -20, 'raw',         None, "Data"),
    bitfield("radio",        20, 'unsigned',    None, "Radio status"),
    )

type27 = (
    bitfield("accuracy",      1, 'boolean',  None,         "Position Accuracy"),
    bitfield("raim",          1, 'boolean',  None,         "RAIM flag"),
    bitfield("status",        4, 'unsigned', None,         "Navigation Status",
             formatter=status_legends),
    bitfield("lon",          18, 'signed',   SHORT_LON_NA, "Longitude",
             formatter=short_latlon_scale),
    bitfield("lat",          17, 'signed',   SHORT_LAT_NA, "Latitude",
             formatter=short_latlon_scale),
    bitfield("speed",         6, 'unsigned', 63,           "Speed Over Ground"),
    bitfield("course",        9, 'unsigned', 511,          "Course Over Ground"),
    bitfield("gnss",          1, 'boolean',  None,         "GNSS Position status"),
    spare(1),
    )

# This is the master dispatch on AIS message type
layouts = {
    1:  cnb,
    2:  cnb,
    3:  cnb,
    4:  type4,
    5:  type5,
    6:  type6,
    7:  type7,
    8:  type8,
    9:  type9,
    10: type10,
    11: type4,
    12: type12,
    13: type7,
    14: type14,
    15: type15,
    18: type18,
    19: type19,
    20: type20,
    21: type21,
    22: type22,
    23: type23,
    24: type24,
    25: type25,
    26: type26,
    27: type27,
    }

# Length ranges.  We use this for integrity checking.
# When a range is a tuple, it's (minimum, maximum).
lengths = {
    1:  168,
    2:  168,
    3:  168,
    4:  168,
    5:  424,
    6:  (88, 1008),
    7:  (72, 168),
    8:  (56, 1008),
    9:  168,
    10: 72,
    11: 168,
    12: (72, 1008),
    13: (72, 168),
    14: (40, 1008),
    15: (88, 160),
    18: 168,
    19: 312,
    20: (72, 160),
    21: (272, 360),
    22: 168,
    23: 160,
    24: (160, 168),
    25: (40, 168),
    26: (60, 1064),
    27: 96,
    }

# Composite fields computed from two others
composites = (
    ("length", "to_bow", "to_stern", "Overall Length"),
    ("width", "to_port", "to_starboard", "Overall Width"),
    )

field_groups = (
    # This one occurs in message types 4 and 11
    (["year", "month", "day", "hour", "minute", "second"],
     "timestamp", "Timestamp",
     lambda y, m, d, h, n, s: "%04d-%02d-%02dT%02d:%02d:%02dZ" % (y, m, d, h, n, s)),
    # This one is in message 5
    (["eta_month", "eta_day", "eta_hour", "eta_minute"],
     "eta", "Estimated Time of Arrival",
     lambda m, d, h, n: "%02d-%02dT%02d:%02dZ" % (m, d, h, n)),
)

# Message-type-specific information ends here.
#
# Next, the execution machinery for the pseudolanguage. There isn't much of
# this: the whole point of the design is to embody most of the information
# about the AIS format in the pseudoinstruction tables.

def aivdm_unpack(data, offset, values, instructions):
    "Unpack fields from data according to instructions."
    cooked = []
    for inst in instructions:
        if inst.conditional is not None and not inst.conditional(inst, values):
            continue
        elif isinstance(inst, spare):
            offset += inst.width
        elif isinstance(inst, lookahead):
            values[inst.name] = data.ubits(inst.start, inst.width)
        elif isinstance(inst, dispatch):
            subtype = None
            if values.get(inst.fieldname) is not None:
                i = inst.compute(values[inst.fieldname])
                if isinstance(inst.subtypes, dict):
                    subtype = inst.subtypes.get(i)
                elif 0 <= i < len(inst.subtypes):
                    subtype = inst.subtypes[i]
            if subtype is None:
                offset += inst.width
                continue
            # This is the recursion that lets us handle variant types
            variant, offset = aivdm_unpack(data, offset, values, subtype)
            cooked += variant
        elif isinstance(inst, bitfield):
            width = inst.width
            if width is None:
                width = max(len(data) - offset, 0)
            elif width < 0:
                # Everything but a fixed-width trailer
                width = max(len(data) - offset + width, 0)
            if inst.type == 'unsigned':
                value = data.ubits(offset, width)
            elif inst.type == 'signed':
                value = data.sbits(offset, width)
            elif inst.type == 'string':
                value = data.string(offset, width)
            elif inst.type == 'boolean':
                value = data.boolean(offset)
            elif inst.type == 'raw':
                value = data.raw(offset, width)
            else:
                raise ValueError("unknown field type %r" % inst.type)
            if value is not None and value == inst.oob:
                value = None
            values[inst.name] = value
            offset += width
            # The unpacked representation carries forward the
            # meta-information from the field type definition, for use
            # by report-generating code.
            cooked.append((inst, value))
    return cooked, offset


def postprocess(record):
    "Add composite fields and field groups to a cooked record."
    for (name, first, second, _legend) in composites:
        if first in record and second in record:
            if record[first] is None or record[second] is None:
                record[name] = None
            else:
                record[name] = record[first] + record[second]
    for (template, label, _legend, formatter) in field_groups:
        parts = [record.get(name) for name in template]
        if None not in parts:
            record[label] = formatter(*parts)
    return record


def check_length(msgtype, bitlen):
    "Is the payload length plausible for its type?"
    expected = lengths.get(msgtype)
    if expected is None:
        return True
    if isinstance(expected, int):
        expected = (expected, expected)
    return expected[0] <= bitlen <= expected[1]


def unpack_message(msgtype, bits, resolver=None):
    "Decode a complete, fill-trimmed payload according to its type layout."
    bits = coerce(bits)
    if msgtype not in layouts:
        raise UnsupportedType(msgtype, str(bits))
    logging.debug("aivdm: type %d, %d bits" % (msgtype, len(bits)))
    if not check_length(msgtype, len(bits)):
        logging.warning("aivdm: type %d expected %s bits but saw %d"
                        % (msgtype, lengths[msgtype], len(bits)))
    values = {'bitlen': len(bits)}
    cooked, _ = aivdm_unpack(bits, 0, values, header + layouts[msgtype])
    record = {}
    for (inst, value) in cooked:
        if isinstance(inst.formatter, tuple):
            record[inst.name] = value
            record[inst.name + "_text"] = legend(inst.formatter, value)
        elif inst.formatter is not None and value is not None:
            record[inst.name] = inst.formatter(value)
        else:
            record[inst.name] = value
    postprocess(record)
    if resolver is not None and record.get("mmsi") is not None:
        country = resolver(record["mmsi"])
        if country:
            record["country"] = country["name"]
            record["country_code"] = country["code"]
    return record


def _collect_legends(table, into):
    for inst in table:
        if isinstance(inst, bitfield):
            into.setdefault(inst.name, inst.legend)
            if isinstance(inst.formatter, tuple):
                into.setdefault(inst.name + "_text", inst.legend + " Text")
        elif isinstance(inst, dispatch):
            subtypes = inst.subtypes
            if isinstance(subtypes, dict):
                subtypes = subtypes.values()
            for subtype in subtypes:
                _collect_legends(subtype, into)
    return into

# Fieldname -> human-friendly description, for report generation
field_legends = _collect_legends(header, {})
for _table in layouts.values():
    _collect_legends(_table, field_legends)
for (_name, _first, _second, _legend) in composites:
    field_legends[_name] = _legend
for (_template, _label, _legend, _formatter) in field_groups:
    field_legends[_label] = _legend
field_legends.update({"country": "Country", "country_code": "Country Code"})

# End
