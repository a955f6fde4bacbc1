""" A class representation of an Orion command, including subclasses for
    each operation the service understands.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .. import json
from .fields import GET, INSERT, INSERT_MANY, METHOD, REMOVE, SEARCH, UPDATE, VALUE


class EncodeError(TypeError):
    """A command value could not be serialized."""


class DecodeError(ValueError):
    """A frame does not contain a well-formed command."""


# Typed command classes, keyed by method name. Populated as the subclasses
# below are defined.
methods: Dict[str, type] = dict()


class Command:
    """ The :class:`Command` is a thin encapsulation of a client request:
        the *method* names the operation, the *value* carries the
        operation-specific payload. Subclasses fix the method name and give
        the value a known shape; :class:`Opaque` carries any other method
        unchanged, so that commands unknown to this library can still be
        sent and received.

        A command has no identity beyond its contents. It is not tracked
        after it is sent, and it is never correlated with a reply.
    """

    method: Optional[str] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.method is not None:
            methods[cls.method] = cls

    def __init__(self, value: Any = None):
        self.value = value

    @classmethod
    def accepts(cls, value: Any) -> bool:
        """ Return True if *value* has the shape this command carries.
        """
        return True

    @classmethod
    def from_value(cls, value: Any) -> 'Command':
        """ Reconstruct a command from a decoded wire *value*. The value is
            kept as is, never converted; a value of the wrong shape raises
            :class:`TypeError`.
        """

        if not cls.accepts(value):
            raise TypeError('%s does not take a value of %r' % (cls.method, value))

        instance = cls.__new__(cls)
        Command.__init__(instance, value)
        return instance

    def to_dict(self) -> Dict[str, Any]:
        return {METHOD: self.method, VALUE: self.value}

    def __eq__(self, other):
        if not isinstance(other, Command):
            return NotImplemented
        return self.method == other.method and self.value == other.value

    def __repr__(self):
        return '%s(method=%r, value=%r)' % (type(self).__name__, self.method, self.value)


def _is_record(value) -> bool:
    return isinstance(value, Mapping)


class Insert(Command):
    """Add a single record to the collection."""

    method = INSERT

    def __init__(self, record: Mapping[str, Any]):
        Command.__init__(self, dict(record))

    @classmethod
    def accepts(cls, value):
        return _is_record(value)

    @property
    def record(self) -> Dict[str, Any]:
        return self.value


class InsertMany(Command):
    """Add an ordered sequence of records to the collection."""

    method = INSERT_MANY

    def __init__(self, records: Iterable[Mapping[str, Any]]):
        Command.__init__(self, [dict(record) for record in records])

    @classmethod
    def accepts(cls, value):
        if not isinstance(value, list):
            return False
        return all(_is_record(record) for record in value)

    @property
    def records(self) -> List[Dict[str, Any]]:
        return self.value


class Update(Command):
    """ Apply *changes* to every record matching *query*. On the wire the
        value is the two-element list ``[query, changes]``.
    """

    method = UPDATE

    def __init__(self, query: Mapping[str, Any], changes: Mapping[str, Any]):
        Command.__init__(self, [dict(query), dict(changes)])

    @classmethod
    def accepts(cls, value):
        if not isinstance(value, list) or len(value) != 2:
            return False
        return _is_record(value[0]) and _is_record(value[1])

    @property
    def query(self) -> Dict[str, Any]:
        return self.value[0]

    @property
    def changes(self) -> Dict[str, Any]:
        return self.value[1]


class Remove(Command):
    """Delete every record matching *query*."""

    method = REMOVE

    def __init__(self, query: Mapping[str, Any]):
        Command.__init__(self, dict(query))

    @classmethod
    def accepts(cls, value):
        return _is_record(value)

    @property
    def query(self) -> Dict[str, Any]:
        return self.value


class Get(Command):
    """ Fetch the entire collection. If *flat* is True the service returns
        a single array; otherwise one array per shard.
    """

    method = GET

    def __init__(self, flat: bool = True):
        Command.__init__(self, bool(flat))

    @classmethod
    def accepts(cls, value):
        return isinstance(value, bool)

    @property
    def flat(self) -> bool:
        return self.value


class Search(Command):
    """Find every record whose fields equal those in *query*."""

    method = SEARCH

    def __init__(self, query: Mapping[str, Any]):
        Command.__init__(self, dict(query))

    @classmethod
    def accepts(cls, value):
        return _is_record(value)

    @property
    def query(self) -> Dict[str, Any]:
        return self.value


class Opaque(Command):
    """ Any method this library does not model. The value is passed through
        untouched in both directions.
    """

    def __init__(self, method: str, value: Any = None):
        Command.__init__(self, value)
        self.method = method


def command(method: str, value: Any = None) -> Command:
    """ Return the typed :class:`Command` for *method*, or an :class:`Opaque`
        command if the method is unknown or the value does not have the shape
        the typed command expects. The value is never altered.
    """

    try:
        typed = methods[method]
    except KeyError:
        return Opaque(method, value)

    if typed.accepts(value):
        return typed.from_value(value)
    else:
        return Opaque(method, value)


def _check_finite(value):
    """ JSON has no representation for NaN or infinity. Some encoders refuse
        them, others quietly write null; refuse them here regardless.
    """

    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodeError('out of range float value %r is not JSON compliant' % (value))
    elif isinstance(value, Mapping):
        for item in value.values():
            _check_finite(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_finite(item)


def encode(cmd: Command) -> str:
    """ Serialize *cmd* to the compact JSON text sent as one frame. Raises
        :class:`EncodeError` if the value cannot be represented as JSON.
    """

    if cmd.method is None:
        raise EncodeError('commands must have a method to be put on the wire')

    _check_finite(cmd.value)

    try:
        encoded = json.dumps(cmd.to_dict())
    except json.errors as e:
        raise EncodeError(str(e)) from e

    return encoded.decode('utf-8')


def decode(frame) -> Command:
    """ Interpret a received *frame* (text or bytes) as a :class:`Command`.
        This is the inverse of :func:`encode`.
    """

    try:
        decoded = json.loads(frame)
    except json.errors as e:
        raise DecodeError('frame is not valid JSON: ' + str(e)) from e

    if not isinstance(decoded, dict):
        raise DecodeError('frame is not a JSON object')

    try:
        method = decoded[METHOD]
    except KeyError:
        raise DecodeError("frame has no '%s' field" % (METHOD))

    if not isinstance(method, str):
        raise DecodeError("the '%s' field must be a string" % (METHOD))

    return command(method, decoded.get(VALUE))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
