# bits.py - bit vector holding an unarmored AIVDM payload
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.
#
# Reads that run off the end of the vector come back as None rather
# than raising; the layout interpreter reports those fields as absent.

import logging
from array import array

from .armor import sixbit_value, sixbit_char

BITS_PER_BYTE = 8


class BitVector:
    "Fast bit-vector class based on Python built-in array type."
    def __init__(self, data=None, length=None):
        self.bits = array('B')
        self.bitlen = 0
        self.bad_chars = 0	# Characters outside the armor alphabet
        if data is not None:
            self.bits.extend(data)
            if length is None:
                self.bitlen = len(data) * 8
            else:
                self.bitlen = length

    def _grow(self, nbits):
        need = (self.bitlen + nbits + BITS_PER_BYTE - 1) // BITS_PER_BYTE
        if need > len(self.bits):
            self.bits.extend([0] * (need - len(self.bits)))

    def _append(self, value, width):
        for i in range(width - 1, -1, -1):
            if (value >> i) & 0x01:
                self.bits[self.bitlen // 8] |= (1 << (7 - self.bitlen % 8))
            self.bitlen += 1

    def from_sixbit(self, data, pad=0):
        "Initialize bit vector from AIVDM-style six-bit armoring."
        if not 0 <= pad <= 5:
            raise ValueError("fill bits %d outside 0..5" % pad)
        self._grow(len(data) * 6)
        for ch in data:
            value = sixbit_value(ch)
            if value is None:
                logging.debug("aivdm: %r is not an armor character" % ch)
                self.bad_chars += 1
                value = 0
            self._append(value, 6)
        self.bitlen = max(self.bitlen - pad, 0)
        return self

    def from_binary(self, text):
        "Initialize bit vector from a string of binary digits."
        self._grow(len(text))
        for ch in text:
            if ch not in "01":
                raise ValueError("%r is not a binary digit" % ch)
            self._append(int(ch), 1)
        return self

    def ubits(self, start, width):
        "Extract a (zero-origin) bitfield from the buffer as an unsigned int."
        if start < 0 or width < 0 or start + width > self.bitlen:
            return None
        if width == 0:
            return 0
        fld = 0
        for i in range(start // BITS_PER_BYTE,
                       (start + width + BITS_PER_BYTE - 1) // BITS_PER_BYTE):
            fld <<= BITS_PER_BYTE
            fld |= self.bits[i]
        end = (start + width) % BITS_PER_BYTE
        if end != 0:
            fld >>= (BITS_PER_BYTE - end)
        fld &= ~(-1 << width)
        return fld

    def sbits(self, start, width):
        "Extract a (zero-origin) bitfield from the buffer as a signed int."
        fld = self.ubits(start, width)
        if fld is None or width == 0:
            return fld
        if fld & (1 << (width - 1)):
            fld -= 1 << width
        return fld

    def string(self, start, width):
        "Extract six-bit text, with @ padding turned into blanks."
        if start < 0 or start + width > self.bitlen:
            return None
        value = ''
        for i in range(0, width, 6):
            n = self.ubits(start + i, 6)
            # A short trailing group at the very end of the payload
            if n is None:
                break
            value += sixbit_char(n)
        return value.replace("@", " ").strip()

    def boolean(self, start):
        "Extract a single bit as a truth value."
        fld = self.ubits(start, 1)
        if fld is None:
            return None
        return fld == 1

    def raw(self, start, width=None):
        "Bits from start, to the end unless width is given, as binary digits."
        if width is None:
            return str(self)[start:]
        return str(self)[start:start + width]

    def __len__(self):
        return self.bitlen

    def __str__(self):
        return "".join("1" if self.bits[i // 8] & (1 << (7 - i % 8)) else "0"
                       for i in range(self.bitlen))

    def __repr__(self):
        "Used for dumping binary data."
        return str(self.bitlen) + ":" + "".join(
            "%02x" % d for d in self.bits[:(self.bitlen + 7) // 8])


def unarmor(payload, pad=0):
    "Turn an armored payload into a BitVector, trimming fill bits."
    return BitVector().from_sixbit(payload, pad)


def coerce(bits):
    "Accept a BitVector or a string of binary digits."
    if isinstance(bits, BitVector):
        return bits
    return BitVector().from_binary(bits)

# End
