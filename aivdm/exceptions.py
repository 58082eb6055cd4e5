# exceptions.py - errors raised while unpacking AIVDM sentences
#
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.
#
# None of these escape a Decoder; they are turned into error records
# at the decode() boundary.


class AISUnpackingException(Exception):
    "Base class for everything the decoder can reject."
    def __init__(self, fieldname, value, message=None):
        Exception.__init__(self, message or fieldname)
        self.fieldname = fieldname
        self.value = value
        self.message = message

    def __str__(self):
        if self.message:
            return self.message
        return "validation on fieldname %s failed (value %s)" \
            % (self.fieldname, self.value)

    def __repr__(self):
        return "%s(%r, %r)" % (self.__class__.__name__,
                               self.fieldname, self.value)


class FormatError(AISUnpackingException):
    "Envelope is missing its marker or has too few fields."
    def __init__(self, value, message):
        AISUnpackingException.__init__(self, "envelope", value, message)


class UnsupportedType(AISUnpackingException):
    "Message type has no layout."
    def __init__(self, msgtype, bits):
        AISUnpackingException.__init__(
            self, "msgtype", msgtype,
            "Unsupported message type: %s" % msgtype)
        self.msgtype = msgtype
        self.bits = bits


class MissingFragment(AISUnpackingException):
    "Fragment count matched but a slot was empty when joining."
    def __init__(self, message_id, received, expected):
        AISUnpackingException.__init__(self, "fragment", message_id,
                                       "Missing fragment")
        self.message_id = message_id
        self.received = received
        self.expected = expected

# End
