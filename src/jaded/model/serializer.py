"""Structured-text rendering of decoded values.

Converts ``Value`` trees and stream ``Content`` to and from plain dicts,
which map directly onto JSON and YAML.

Usage
-----
::

    from jaded.model.serializer import ValueSerializer

    serializer = ValueSerializer()
    content = parser.read()
    print(serializer.to_json(content))
    assert serializer.from_json(serializer.to_json(content)) == content
"""
from __future__ import annotations

import json
from typing import Union

import yaml

from jaded.model.values import (
    NULL,
    Array,
    BlockData,
    Content,
    JavaClass,
    JavaEnum,
    JavaString,
    Loop,
    Null,
    ObjectContent,
    ObjectData,
    Primitive,
    PrimitiveArray,
    Value,
)
from jaded.stream.markers import PrimitiveKind

Serializable = Union[Content, Value]


class ValueSerializer:
    """Converts between decoded values and plain Python dicts.

    Every dict carries a ``"kind"`` discriminator so that ``from_dict`` can
    rebuild the exact variant.  Block data is written as a hex string.
    """

    # ------------------------------------------------------------------
    # Serialization (value → dict)
    # ------------------------------------------------------------------

    def to_dict(self, item: Serializable) -> dict[str, object]:
        """Serialize a ``Content`` or ``Value`` to a JSON-compatible dict."""
        if isinstance(item, Content):
            return self._content_to_dict(item)
        return self._value_to_dict(item)

    def _content_to_dict(self, content: Content) -> dict[str, object]:
        if isinstance(content, ObjectContent):
            return {"kind": "ObjectContent", "value": self._value_to_dict(content.value)}
        if isinstance(content, BlockData):
            return {"kind": "BlockData", "data": content.data.hex()}
        raise TypeError(f"Unknown content type: {type(content)}")

    def _primitive_to_dict(self, primitive: Primitive) -> dict[str, object]:
        return {
            "kind": "Primitive",
            "type": primitive.kind.name.lower(),
            "value": primitive.value,
        }

    def _value_to_dict(self, value: Value) -> dict[str, object]:
        if isinstance(value, Null):
            return {"kind": "Null"}
        if isinstance(value, Primitive):
            return self._primitive_to_dict(value)
        if isinstance(value, JavaString):
            return {"kind": "String", "value": value.value}
        if isinstance(value, JavaEnum):
            return {"kind": "Enum", "class_name": value.class_name, "constant": value.constant}
        if isinstance(value, JavaClass):
            return {"kind": "Class", "name": value.name}
        if isinstance(value, Loop):
            return {"kind": "Loop", "steps": value.steps}
        if isinstance(value, Array):
            return {"kind": "Array", "items": [self._value_to_dict(v) for v in value.items]}
        if isinstance(value, PrimitiveArray):
            return {
                "kind": "PrimitiveArray",
                "items": [self._primitive_to_dict(p) for p in value.items],
            }
        if isinstance(value, ObjectData):
            return {
                "kind": "Object",
                "class_name": value.class_name,
                "fields": {name: self._value_to_dict(v) for name, v in value.fields.items()},
                "annotations": [
                    [self._content_to_dict(c) for c in level] for level in value.annotations
                ],
            }
        raise TypeError(f"Unknown value type: {type(value)}")

    # ------------------------------------------------------------------
    # Deserialization (dict → value)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, object]) -> Serializable:
        """Deserialize a ``Content`` or ``Value`` from a plain dict."""
        if data.get("kind") in ("ObjectContent", "BlockData"):
            return self._content_from_dict(data)
        return self._value_from_dict(data)

    def _content_from_dict(self, d: dict[str, object]) -> Content:
        kind = d.get("kind")
        if kind == "ObjectContent":
            return ObjectContent(self._value_from_dict(d["value"]))  # type: ignore[arg-type]
        if kind == "BlockData":
            return BlockData(bytes.fromhex(str(d["data"])))
        raise ValueError(f"Unknown content kind: {kind!r}")

    def _primitive_from_dict(self, d: dict[str, object]) -> Primitive:
        kind = PrimitiveKind[str(d["type"]).upper()]
        raw = d["value"]
        if kind in (PrimitiveKind.FLOAT, PrimitiveKind.DOUBLE):
            raw = float(raw)  # type: ignore[arg-type]
        return Primitive(kind, raw)  # type: ignore[arg-type]

    def _value_from_dict(self, d: dict[str, object]) -> Value:
        kind = d.get("kind")
        if kind == "Null":
            return NULL
        if kind == "Primitive":
            return self._primitive_from_dict(d)
        if kind == "String":
            return JavaString(str(d["value"]))
        if kind == "Enum":
            return JavaEnum(str(d["class_name"]), str(d["constant"]))
        if kind == "Class":
            return JavaClass(str(d["name"]))
        if kind == "Loop":
            return Loop(int(d["steps"]))  # type: ignore[arg-type]
        if kind == "Array":
            items = d.get("items", [])
            return Array(tuple(self._value_from_dict(v) for v in items))  # type: ignore[union-attr]
        if kind == "PrimitiveArray":
            items = d.get("items", [])
            return PrimitiveArray(tuple(self._primitive_from_dict(p) for p in items))  # type: ignore[union-attr]
        if kind == "Object":
            fields = d.get("fields", {})
            annotations = d.get("annotations", [])
            return ObjectData(
                class_name=str(d["class_name"]),
                fields={name: self._value_from_dict(v) for name, v in fields.items()},  # type: ignore[union-attr]
                annotations=tuple(
                    tuple(self._content_from_dict(c) for c in level)
                    for level in annotations  # type: ignore[union-attr]
                ),
            )
        raise ValueError(f"Unknown value kind: {kind!r}")

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, item: Serializable, indent: int = 2) -> str:
        """Serialize a ``Content`` or ``Value`` to a JSON string."""
        return json.dumps(self.to_dict(item), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> Serializable:
        data: dict[str, object] = json.loads(text)
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, item: Serializable) -> str:
        """Serialize a ``Content`` or ``Value`` to a YAML string."""
        return yaml.dump(self.to_dict(item), default_flow_style=False, allow_unicode=True)

    def from_yaml(self, text: str) -> Serializable:
        data: dict[str, object] = yaml.safe_load(text)
        return self.from_dict(data)
