# Make core decoder functions available without prefix.
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.

from .armor import Envelope, parse_envelope, sixbit_char, sixbit_value
from .bits import BitVector, unarmor
from .decoder import Decoder, FragmentBuffer, decode, decode_multiple
from .exceptions import (AISUnpackingException, FormatError,
                         UnsupportedType, MissingFragment)
from .mid import resolve_country

# setup.py reads the version from here
__version__ = '1.0'
