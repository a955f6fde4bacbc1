""" Python client for the Orion document store. A client opens one
    persistent connection to a collection, sends commands such as
    ``insertMany`` or ``search``, and hands every message the service sends
    back to a sink on a background thread.
"""

# Utility components.

from . import json
from . import config

# Submodules used by multiple other components.

from . import endpoint
from . import protocol
from . import transport
from . import sink

# Primary public-facing interfaces.

from .channel import Channel
from .endpoint import Endpoint
from .transport import ConnectError

from . import client
connect = client.connect
run = client.run

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
