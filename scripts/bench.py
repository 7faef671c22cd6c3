"""Rough encode/decode timings for a nested reply.

    python scripts/bench.py [iterations]
"""
import sys
import timeit

from pyresp import Decoder, Value


def prepare_values():
    a = [
        Value.null(),
        Value.null_array(),
        Value.string("OK" * 32),
        Value.error("Err" * 21),
        Value.integer(1234567890),
        Value.bulk("Bulk String " * 6),
        Value.array([Value.null(), Value.integer(123), Value.bulk("Bulk String Bulk String")]),
    ]
    b = a + [Value.array(a), Value.null()]
    return Value.array(b + [Value.array(b), Value.null()])


def decode_once(data):
    decoder = Decoder()
    decoder.feed(data)
    return decoder.read()


def main():
    number = int(sys.argv[1]) if len(sys.argv) > 1 else 10000
    value = prepare_values()
    data = value.encode()
    for name, fn in (("encode_values", value.encode), ("decode_values", lambda: decode_once(data))):
        total = timeit.timeit(fn, number=number)
        print(f"{name}: {total / number * 1e9:,.0f} ns/iter")


if __name__ == "__main__":
    main()
