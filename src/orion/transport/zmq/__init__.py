"""ZeroMQ transport."""

from .connection import Connection, schemes
