""" Representation of the address of an Orion collection. An endpoint is a
    URL of the form::

        scheme://host:port/namespace@shard/collection

    The URL is only split into its parts here; whether it is acceptable is
    up to the transport that dials it.
"""

from __future__ import annotations

import re
import urllib.parse
from dataclasses import dataclass
from typing import Optional


_route_pattern = re.compile(r'^/([^@/]+)@([^/]+)/(.+)$')


@dataclass(frozen=True)
class Endpoint:
    """ The address of the target service. Instances are immutable; build a
        new one rather than modifying an existing endpoint.
    """

    url: str
    scheme: str = ''
    host: Optional[str] = None
    port: Optional[int] = None
    path: str = ''

    @classmethod
    def parse(cls, url) -> 'Endpoint':
        """ Split *url* into an :class:`Endpoint`. An :class:`Endpoint`
            instance is returned unchanged.
        """

        if isinstance(url, Endpoint):
            return url

        url = str(url)
        split = urllib.parse.urlsplit(url)

        # A malformed port is left for the transport to complain about.
        try:
            port = split.port
        except ValueError:
            port = None

        return cls(url, split.scheme.lower(), split.hostname, port, split.path)


    @classmethod
    def build(cls, host, port, namespace, shard, collection, scheme='ws') -> 'Endpoint':
        """ Compose an endpoint from its parts, for example::

                Endpoint.build('localhost', 5665, 'test_db', 12345, 'users')
        """

        path = '/%s@%s/%s' % (namespace, shard, collection)
        url = '%s://%s:%d%s' % (scheme, host, int(port), path)
        return cls.parse(url)


    def _route(self):
        match = _route_pattern.match(self.path)
        if match is None:
            return (None, None, None)
        return match.groups()

    @property
    def namespace(self) -> Optional[str]:
        return self._route()[0]

    @property
    def shard(self) -> Optional[str]:
        return self._route()[1]

    @property
    def collection(self) -> Optional[str]:
        return self._route()[2]

    @property
    def address(self) -> str:
        """ The URL with the routing path removed: scheme, host and port.
        """

        split = urllib.parse.urlsplit(self.url)
        return urllib.parse.urlunsplit((split.scheme, split.netloc, '', '', ''))


    def __str__(self):
        return self.url


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
