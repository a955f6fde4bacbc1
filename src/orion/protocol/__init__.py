"""
Orion Protocol Layer
====================

This package defines the messages a client sends to an Orion service and
how they are represented on the wire. It does not depend on any transport
implementation.

Every outbound message is a single JSON object with exactly two keys, in
this order::

    {"method":"insertMany","value":[{"id":1,"test":"test","cool":1}]}

Command Model (command.py)
    One class per known method, keyed by method name, plus an Opaque
    fallback for methods this library does not know about.
    encode() / decode() map commands to and from the JSON text.

Convenience constructors (factory.py)
    insert(), insert_many(), update(), remove(), get(), search()

Field Vocabulary (fields.py)
    Canonical names for the envelope keys and the method names.

Inbound messages are not modeled here: they are opaque text, handed to the
caller verbatim.
"""

from . import fields
from . import command
from . import factory

from .command import (
    Command,
    DecodeError,
    EncodeError,
    Get,
    Insert,
    InsertMany,
    Opaque,
    Remove,
    Search,
    Update,
    decode,
    encode,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
