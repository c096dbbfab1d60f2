"""Example probes for the standard library json module."""

import json


def check_dumps():
    assert json.dumps({"a": 1}) == '{"a": 1}', "dumps did not produce compact JSON"


def check_loads():
    assert json.loads('{"a": [1, 2]}') == {"a": [1, 2]}, "loads did not round-trip a list"
    return "nested values"


async def check_decoder():
    decoder = json.JSONDecoder()
    value, end = decoder.raw_decode('[1, 2] trailing')
    assert value == [1, 2] and end == 6, "raw_decode stopped at the wrong offset"


def check_encode():
    # json has no top-level encode(); resolution fails before this runs
    raise AssertionError("unreachable")
