""" A sink is anything that accepts one line of text: received messages and
    failure reports are written to it. Any callable taking a single string
    argument will do; the helpers here cover the usual destinations.
"""

import logging
import sys


def console(line):
    """ Write *line* to standard output. This is the default sink.
    """

    sys.stdout.write(line + '\n')
    sys.stdout.flush()



def logger(name='orion', level=logging.INFO):
    """ Return a sink that writes each line to the named logger at the
        requested *level*.
    """

    log = logging.getLogger(name)

    def sink(line):
        log.log(level, '%s', line)

    return sink


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
