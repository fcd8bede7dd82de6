"""Reference Borsh encoder emitting one chunk per primitive write.

Stands in for the external encode routine: every logical write goes to the
sink as its own ``bytes`` chunk, in write order. Layout follows Borsh:

- integers and floats are little-endian at their declared width
- ``bool`` is one byte
- strings, ``Vec``, ``HashSet`` and ``HashMap`` write a ``u32`` length prefix
  (sets and maps are written in sorted order)
- ``Option``, ``Result`` and enums write a one-byte tag before the payload

Python values map onto declarations as: struct -> mapping of field values,
tuple / tuple struct / array / vec -> sequence, unit struct -> ``None``,
option -> value or ``None``, result -> ``{"Ok": v}`` or ``{"Err": e}``,
enum -> variant name or ``{variant_name: payload}``.
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from schematree.domain.classifier import Classification, classify
from schematree.domain.definitions import DefinitionMap
from schematree.domain.errors import EncodeError
from schematree.domain.types import Shape

logger = logging.getLogger(__name__)

type ChunkSink = Callable[[bytes], None]

_FLOAT_FORMATS = {4: "<f", 8: "<d"}


def _u32(value: int) -> bytes:
    return value.to_bytes(4, "little")


class BorshEncoder:
    """Encode Python values against a definition map, chunk by chunk."""

    def __init__(self, definitions: DefinitionMap) -> None:
        self._definitions = definitions

    def encode(self, value: Any, declaration: str, sink: ChunkSink) -> None:
        """Write *value* as *declaration*, calling *sink* once per write.

        Raises:
            EncodeError: if *value* does not fit *declaration*.
        """
        found = classify(declaration, self._definitions, warn=False)
        self._write(found, declaration, value, sink)

    def to_chunks(self, value: Any, declaration: str) -> list[bytes]:
        """Encode *value* and collect the emitted chunks."""
        chunks: list[bytes] = []
        self.encode(value, declaration, chunks.append)
        return chunks

    def bind(self, value: Any, declaration: str) -> Callable[[ChunkSink], None]:
        """Return an ``encode(sink)`` callable for a single value."""

        def run(sink: ChunkSink) -> None:
            self.encode(value, declaration, sink)

        return run

    # ── Private helpers ───────────────────────────────────────────────

    def _write(
        self, found: Classification, declaration: str, value: Any, sink: ChunkSink
    ) -> None:
        shape = found.shape
        if shape is Shape.BOOL:
            if not isinstance(value, bool):
                raise EncodeError(f"{declaration}: expected bool, got {type(value).__name__}")
            sink(b"\x01" if value else b"\x00")
        elif shape is Shape.INT:
            self._write_int(found, declaration, value, sink)
        elif shape is Shape.FLOAT:
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise EncodeError(f"{declaration}: expected float, got {type(value).__name__}")
            sink(struct.pack(_FLOAT_FORMATS[found.length or 8], value))
        elif shape is Shape.STRING:
            if not isinstance(value, str):
                raise EncodeError(f"{declaration}: expected str, got {type(value).__name__}")
            payload = value.encode("utf-8")
            sink(_u32(len(payload)))
            sink(payload)
        elif shape is Shape.STRUCT:
            self._write_struct(found, declaration, value, sink)
        elif shape in (Shape.VARIANT, Shape.TUPLE):
            members = found.members or ()
            items = self._sequence(declaration, value, allow_none=not members)
            if len(items) != len(members):
                raise EncodeError(f"{declaration}: expected {len(members)} items, got {len(items)}")
            for member, item in zip(members, items, strict=True):
                self.encode(item, member.declaration, sink)
        elif shape is Shape.ARRAY:
            items = self._sequence(declaration, value)
            if len(items) != found.length:
                raise EncodeError(f"{declaration}: expected {found.length} items, got {len(items)}")
            self._write_items(found, items, sink)
        elif shape in (Shape.VEC, Shape.HASHSET):
            items = self._sequence(declaration, value)
            if shape is Shape.HASHSET:
                items = sorted(items)
            sink(_u32(len(items)))
            self._write_items(found, items, sink)
        elif shape is Shape.HASHMAP:
            if not isinstance(value, Mapping):
                raise EncodeError(f"{declaration}: expected mapping, got {type(value).__name__}")
            items = sorted(value.items())
            sink(_u32(len(items)))
            self._write_items(found, items, sink)
        elif shape is Shape.OPTION:
            if value is None:
                sink(b"\x00")
            else:
                sink(b"\x01")
                self._write_items(found, [value], sink)
        elif shape is Shape.RESULT:
            self._write_result(found, declaration, value, sink)
        elif shape is Shape.ENUM:
            self._write_enum(found, declaration, value, sink)
        else:
            raise EncodeError(f"Cannot encode unresolved declaration {declaration!r}")

    def _write_int(
        self, found: Classification, declaration: str, value: Any, sink: ChunkSink
    ) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise EncodeError(f"{declaration}: expected int, got {type(value).__name__}")
        try:
            sink(value.to_bytes(found.length or 1, "little", signed=bool(found.signed)))
        except OverflowError as exc:
            raise EncodeError(f"{declaration}: {value} out of range") from exc

    def _write_struct(
        self, found: Classification, declaration: str, value: Any, sink: ChunkSink
    ) -> None:
        if not isinstance(value, Mapping):
            raise EncodeError(f"{declaration}: expected mapping, got {type(value).__name__}")
        for member in found.members or ():
            if member.name not in value:
                raise EncodeError(f"{declaration}: missing field {member.name!r}")
            self.encode(value[member.name], member.declaration, sink)

    def _write_items(self, found: Classification, items: Sequence[Any], sink: ChunkSink) -> None:
        element = (found.members or ())[0].declaration
        for item in items:
            self.encode(item, element, sink)

    def _write_result(
        self, found: Classification, declaration: str, value: Any, sink: ChunkSink
    ) -> None:
        if not isinstance(value, Mapping) or len(value) != 1 or not ({"Ok", "Err"} & set(value)):
            raise EncodeError(f'{declaration}: expected {{"Ok": ...}} or {{"Err": ...}}')
        ok, err = found.members or ()
        if "Ok" in value:
            sink(b"\x00")
            self.encode(value["Ok"], ok.declaration, sink)
        else:
            sink(b"\x01")
            self.encode(value["Err"], err.declaration, sink)

    def _write_enum(
        self, found: Classification, declaration: str, value: Any, sink: ChunkSink
    ) -> None:
        if isinstance(value, str):
            variant, payload = value, None
        elif isinstance(value, Mapping) and len(value) == 1:
            variant, payload = next(iter(value.items()))
        else:
            raise EncodeError(f"{declaration}: expected a variant name or {{variant: payload}}")
        members = found.members or ()
        for tag, member in enumerate(members):
            if member.name == variant:
                sink(bytes([tag]))
                self.encode(payload, member.declaration, sink)
                return
        raise EncodeError(f"{declaration}: unknown variant {variant!r}")

    @staticmethod
    def _sequence(declaration: str, value: Any, *, allow_none: bool = False) -> list[Any]:
        if value is None and allow_none:
            return []
        if isinstance(value, (str, bytes, Mapping)):
            raise EncodeError(f"{declaration}: expected a sequence, got {type(value).__name__}")
        if not isinstance(value, (Sequence, set, frozenset)):
            raise EncodeError(f"{declaration}: expected a sequence, got {type(value).__name__}")
        return list(value)
