import json
import orion


def test_json_encode_and_decode():
    encode_and_decode(json.dumps, json.loads, dump_is_bytes=False)


def test_orion_encode_and_decode():
    encode_and_decode(orion.json.dumps, orion.json.loads)


def test_compact_and_ordered():

    encoded = orion.json.dumps({'method': 'search', 'value': {'b': 2, 'a': 1}})
    assert encoded == b'{"method":"search","value":{"b":2,"a":1}}'


def test_unencodable():

    try:
        orion.json.dumps({'value': object()})
    except orion.json.errors:
        pass
    else:
        raise AssertionError('object() should not be encodable as JSON')


def encode_and_decode(dumps, loads, dump_is_bytes=True):

    input_dictionary = dict()
    input_dictionary['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    input_dictionary['dict'] = {1: 'one', 'two': 2}
    input_dictionary['none'] = None
    input_dictionary['true'] = True
    input_dictionary['false'] = False

    encoded = dumps(input_dictionary)

    if dump_is_bytes:
        assert isinstance(encoded, bytes)
    else:
        assert isinstance(encoded, str)

    decoded = loads(encoded)
    assert isinstance(decoded, dict)

    # JSON will not use bare integers as dictionary keys, they get translated
    # to strings upon encoding. The decoding step has no way to know that the
    # original input was an integer. So, the decoded JSON should not match the
    # original input dictionary.

    assert decoded != input_dictionary

    # If we fix that one item in the nested dictionary it should match.

    del decoded['dict']['1']
    decoded['dict'][1] = 'one'
    assert decoded == input_dictionary


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
