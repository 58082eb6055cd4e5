# decoder.py - turn AIVDM/AIVDO sentences into decoded records
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.
#
# A Decoder owns the reassembly state for multi-sentence messages, so
# fragments of one message must all go through the same instance.  An
# instance is not thread-safe; give each thread its own or lock around it.
"""Decode AIS messages from NMEA sentences or bare armored payloads.

Every call returns a dict.  Callers should check the markers before
trusting field values:

    {"error": True, "message": ..., "raw": ...}      rejected input
    {"partial": True, "message_id": ..., ...}        waiting for fragments
    {"type": 1, "mmsi": ..., ...}                    decoded message
"""

import logging

from .armor import polystr, is_envelope, parse_envelope
from .bits import unarmor
from .exceptions import (AISUnpackingException, FormatError,
                         UnsupportedType, MissingFragment)
from .layouts import unpack_message
from .mid import resolve_country

# Default for clear_buffer().  None is a real key: messages sent without an ID.
ALL = object()


class FragmentBuffer:
    "Fragments of one multi-sentence message received so far."
    def __init__(self, count, fill=0):
        self.count = count		# Declared number of fragments
        self.fill = fill		# Fill bits on the final fragment
        self.fragments = {}		# Fragment index -> armored payload

    def add(self, index, payload, fill):
        # A repeated index overwrites the earlier copy
        self.fragments[index] = payload
        if index == self.count:
            self.fill = fill

    def received(self):
        return len(self.fragments)

    def complete(self):
        return self.received() == self.count

    def join(self, message_id):
        "Concatenate payloads in fragment order."
        payload = ''
        for i in range(1, self.count + 1):
            if i not in self.fragments:
                raise MissingFragment(message_id, self.received(),
                                      self.count)
            payload += self.fragments[i]
        return payload


class Decoder:
    "AIVDM decoder with its own multi-sentence reassembly buffer."
    def __init__(self, resolver=resolve_country):
        self.resolver = resolver	# MMSI -> country hook, or None
        self.fragments = {}		# Message ID -> FragmentBuffer
        self.bad_chars = 0		# Armor characters decoded as zero

    def decode(self, sentence):
        "Decode one sentence or bare payload into a record."
        try:
            text = polystr(sentence).strip()
            if is_envelope(text):
                envelope = parse_envelope(text)
                if envelope.count > 1:
                    return self.reassemble(envelope)
                return self.unpack(envelope.payload, envelope.fill)
            return self.unpack(text, 0)
        except MissingFragment as e:
            logging.warning("aivdm: %s for message %s (%d of %d)"
                            % (e, e.message_id, e.received, e.expected))
            return {"error": True,
                    "message": str(e),
                    "message_id": e.message_id,
                    "received": e.received,
                    "expected": e.expected,
                    "raw": sentence}
        except UnsupportedType as e:
            logging.info("aivdm: %s" % e)
            return {"type": e.msgtype,
                    "error": True,
                    "message": str(e),
                    "raw": e.bits}
        except (AISUnpackingException, ValueError, TypeError,
                KeyError, IndexError) as e:
            logging.warning("aivdm: %s on %r" % (e, sentence))
            return {"error": True,
                    "message": str(e),
                    "raw": sentence}

    def decode_multiple(self, sentences):
        "Decode a sequence of sentences in order, sharing reassembly state."
        return [self.decode(sentence) for sentence in sentences]

    def decode_by_type(self, msgtype, bits):
        "Decode an already unarmored payload with the layout for msgtype."
        try:
            return unpack_message(msgtype, bits, self.resolver)
        except UnsupportedType as e:
            return {"type": msgtype,
                    "error": True,
                    "message": str(e),
                    "raw": e.bits}
        except (AISUnpackingException, ValueError, TypeError) as e:
            return {"type": msgtype,
                    "error": True,
                    "message": str(e),
                    "raw": str(bits)}

    def unpack(self, payload, fill):
        "Unarmor a complete payload and hand it to its type layout."
        bits = unarmor(payload, fill)
        self.bad_chars += bits.bad_chars
        msgtype = bits.ubits(0, 6)
        if msgtype is None:
            raise FormatError(payload, "Payload too short to carry a type")
        return unpack_message(msgtype, bits, self.resolver)

    def reassemble(self, envelope):
        "Buffer one fragment; decode the message once all have arrived."
        message_id = envelope.message_id
        buffer = self.fragments.get(message_id)
        count = envelope.count if buffer is None else buffer.count
        if not 1 <= envelope.index <= count:
            raise FormatError(envelope.index,
                              "Fragment number %d outside 1..%d"
                              % (envelope.index, count))
        if buffer is None:
            logging.debug("aivdm: new %d-fragment message %s"
                          % (count, message_id))
            buffer = FragmentBuffer(count, envelope.fill)
            self.fragments[message_id] = buffer
        buffer.add(envelope.index, envelope.payload, envelope.fill)
        if not buffer.complete():
            return {"partial": True,
                    "message_id": message_id,
                    "received": buffer.received(),
                    "expected": buffer.count}
        payload = buffer.join(message_id)
        del self.fragments[message_id]
        logging.debug("aivdm: message %s complete" % message_id)
        return self.unpack(payload, buffer.fill)

    def clear_buffer(self, message_id=ALL):
        "Drop pending fragments for one message ID, or for all of them."
        if message_id is ALL:
            self.fragments.clear()
        else:
            self.fragments.pop(message_id, None)

    def get_buffer_status(self):
        "Fragments received vs. expected for each pending message."
        return dict((message_id, {"received": buffer.received(),
                                  "expected": buffer.count})
                    for (message_id, buffer) in self.fragments.items())


def decode(sentence):
    "Decode a single sentence with a fresh Decoder."
    return Decoder().decode(sentence)


def decode_multiple(sentences):
    "Decode a sequence of sentences with one shared Decoder."
    return Decoder().decode_multiple(sentences)

# End
