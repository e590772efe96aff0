#!/usr/bin/env python3
"""Example: Quickstart for jaded

Minimal working example: decode a serialized java.lang.Integer, read a
typed value from it, and render the stream as YAML.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install jaded
"""
from __future__ import annotations

import jaded
from jaded.convert import INT
from jaded.model import ValueSerializer

# new Integer(42) as written by ObjectOutputStream.writeObject
INTEGER_STREAM = bytes.fromhex(
    "aced0005"
    "737200116a6176612e6c616e672e496e746567657212e2a0a4f781873802000149000576616c7565"
    "787200106a6176612e6c616e672e4e756d62657286ac951d0b94e08b020000"
    "7870"
    "0000002a"
)


def main() -> None:
    print(f"jaded version: {jaded.__version__}")

    # Step 1: Decode the first object in the stream
    data = jaded.loads(INTEGER_STREAM).object_data()
    print(f"Decoded object: class={data.class_name}, fields={data.field_count}")

    # Step 2: Pull a typed value out of a field
    print(f"value field: {data.get_field_as('value', INT)}")

    # Step 3: Convert the whole stream in one call
    print(f"read_as(INT): {jaded.read_as(INTEGER_STREAM, INT)}")

    # Step 4: Dump the decoded value tree
    print("\nAs JSON:")
    print(ValueSerializer().to_json(data))

    # Step 5: Render arbitrary blobs
    print("\nRendered as YAML:")
    print(jaded.render(INTEGER_STREAM, fmt="yaml"))
    blob = b"caf\xc3\xa9 \xff"
    print(f"Non-Java blob: {jaded.render(blob)}")


if __name__ == "__main__":
    main()
