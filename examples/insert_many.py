""" Connect to a local Orion service, insert two records into the users
    collection, and print everything the service sends back until it
    closes the connection. Interrupt with Ctrl-C.
"""

import sys

import orion


def main():

    url = 'ws://localhost:5665/test_db@12345/users'

    records = list()
    records.append({'id': 1, 'test': 'test', 'cool': 1})
    records.append({'id': 2, 'test': 'test2', 'cool': 2})

    command = orion.protocol.factory.insert_many(records)

    try:
        channel = orion.connect(url)
    except orion.ConnectError as e:
        print('Connection error:', e)
        sys.exit(1)

    channel.send(command)

    try:
        while channel.wait(1) == False:
            pass
    except KeyboardInterrupt:
        channel.close()


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
