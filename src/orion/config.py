""" Environment-driven defaults for the Orion client. Each setting is read
    from the environment the first time it is requested; explicit arguments
    to :func:`url`, :func:`open_timeout` and :func:`ready_timeout` replace
    the cached value, in the same way that a caller can override the
    location of configuration files via an explicit argument.
"""

import math
import os


DEFAULT_URL = 'ws://localhost:5665/test_db@12345/users'
DEFAULT_OPEN_TIMEOUT = 10.0
DEFAULT_READY_TIMEOUT = 5.0

_cache = dict()


def _setting(name, default, convert, override=None):

    if override is not None:
        override = convert(override)
        _cache[name] = override
        return override

    try:
        return _cache[name]
    except KeyError:
        pass

    try:
        value = os.environ[name]
    except KeyError:
        value = default
    else:
        try:
            value = convert(value)
        except ValueError:
            raise ValueError("invalid value for %s: %r" % (name, value))

    _cache[name] = value
    return value



def seconds(value):
    """ Convert *value* to a timeout in seconds. Raises ValueError unless it
        is a finite, non-negative number.
    """

    value = float(value)
    if not math.isfinite(value):
        raise ValueError('timeouts must be a finite number of seconds')
    if value < 0:
        raise ValueError('timeouts cannot be negative')
    return value



def url(default=None):
    """ Return the endpoint URL used when the caller does not supply one.
        This defaults to the local test collection, but can be overridden
        with the ``ORION_URL`` environment variable.
    """

    return _setting('ORION_URL', DEFAULT_URL, str, default)



def open_timeout(default=None):
    """ Return the number of seconds a dial attempt may take before it is
        abandoned. Set via ``ORION_OPEN_TIMEOUT``.
    """

    return _setting('ORION_OPEN_TIMEOUT', DEFAULT_OPEN_TIMEOUT, seconds, default)



def ready_timeout(default=None):
    """ Return the number of seconds to wait for a background receiver to
        signal that it is draining the connection. Set via
        ``ORION_READY_TIMEOUT``.
    """

    return _setting('ORION_READY_TIMEOUT', DEFAULT_READY_TIMEOUT, seconds, default)



def reset():
    """ Forget any cached settings; the environment will be consulted anew.
    """

    _cache.clear()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
