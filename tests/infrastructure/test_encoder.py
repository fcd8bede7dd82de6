"""Tests for the reference Borsh encoder."""

from __future__ import annotations

import struct

import pytest

from schematree.domain.errors import EncodeError
from schematree.infrastructure.encoder import BorshEncoder
from tests.documents import PERSON_DOC, PROFILE_DOC, definitions_of


@pytest.fixture
def person() -> BorshEncoder:
    return BorshEncoder(definitions_of(PERSON_DOC))


class TestScalars:
    def test_bool(self) -> None:
        enc = BorshEncoder({})
        assert enc.to_chunks(True, "bool") == [b"\x01"]
        assert enc.to_chunks(False, "bool") == [b"\x00"]

    def test_integers_little_endian(self) -> None:
        enc = BorshEncoder({})
        assert enc.to_chunks(258, "u16") == [b"\x02\x01"]
        assert enc.to_chunks(-1, "i32") == [b"\xff\xff\xff\xff"]
        assert enc.to_chunks(1, "u128") == [b"\x01" + b"\x00" * 15]

    def test_floats(self) -> None:
        enc = BorshEncoder({})
        assert enc.to_chunks(1.5, "f32") == [struct.pack("<f", 1.5)]
        assert enc.to_chunks(1.5, "f64") == [struct.pack("<d", 1.5)]

    def test_string_writes_prefix_then_payload(self) -> None:
        assert BorshEncoder({}).to_chunks("hé", "string") == [b"\x03\x00\x00\x00", b"h\xc3\xa9"]

    def test_out_of_range(self) -> None:
        with pytest.raises(EncodeError, match="out of range"):
            BorshEncoder({}).to_chunks(256, "u8")

    def test_type_mismatch(self) -> None:
        enc = BorshEncoder({})
        with pytest.raises(EncodeError, match="expected bool"):
            enc.to_chunks(1, "bool")
        with pytest.raises(EncodeError, match="expected int"):
            enc.to_chunks(True, "u8")


class TestComposites:
    def test_struct_in_field_order(self) -> None:
        enc = BorshEncoder(definitions_of(PROFILE_DOC))
        chunks = enc.to_chunks({"y": 2, "x": 1}, "Point")
        assert chunks == [b"\x01\x00\x00\x00", b"\x02\x00\x00\x00"]

    def test_missing_field(self) -> None:
        enc = BorshEncoder(definitions_of(PROFILE_DOC))
        with pytest.raises(EncodeError, match="missing field 'y'"):
            enc.to_chunks({"x": 1}, "Point")

    def test_vec_writes_length(self, person: BorshEncoder) -> None:
        chunks = person.to_chunks([1, 2], "Vec<u128>")
        assert chunks[0] == b"\x02\x00\x00\x00"
        assert len(chunks) == 3

    def test_option(self, person: BorshEncoder) -> None:
        assert person.to_chunks(None, "Option<u32>") == [b"\x00"]
        assert person.to_chunks(7, "Option<u32>") == [b"\x01", b"\x07\x00\x00\x00"]

    def test_enum_unit_and_tuple_variants(self, person: BorshEncoder) -> None:
        assert person.to_chunks("A", "Something") == [b"\x00"]
        assert person.to_chunks({"B": [5, "x"]}, "Something") == [
            b"\x01",
            b"\x05\x00",
            b"\x01\x00\x00\x00",
            b"x",
        ]

    def test_unknown_variant(self, person: BorshEncoder) -> None:
        with pytest.raises(EncodeError, match="unknown variant 'C'"):
            person.to_chunks("C", "Something")

    def test_result(self) -> None:
        enc = BorshEncoder(
            definitions_of(
                {
                    "definitions": {
                        "Result<u8, string>": {
                            "kind": "enum",
                            "variants": [["Ok", "u8"], ["Err", "string"]],
                        }
                    }
                }
            )
        )
        assert enc.to_chunks({"Ok": 9}, "Result<u8, string>") == [b"\x00", b"\x09"]
        assert enc.to_chunks({"Err": "no"}, "Result<u8, string>")[0] == b"\x01"
        with pytest.raises(EncodeError):
            enc.to_chunks(9, "Result<u8, string>")

    def test_array_length_checked(self) -> None:
        enc = BorshEncoder(
            definitions_of(
                {"definitions": {"Array<u8, 2>": {"kind": "array", "elements": "u8", "length": 2}}}
            )
        )
        assert enc.to_chunks([1, 2], "Array<u8, 2>") == [b"\x01", b"\x02"]
        with pytest.raises(EncodeError, match="expected 2 items"):
            enc.to_chunks([1], "Array<u8, 2>")

    def test_hashmap_sorted_entries(self) -> None:
        enc = BorshEncoder(
            definitions_of(
                {
                    "definitions": {
                        "HashMap<u8, bool>": {"kind": "sequence", "elements": "Tuple<u8, bool>"},
                        "Tuple<u8, bool>": {"kind": "tuple", "elements": ["u8", "bool"]},
                    }
                }
            )
        )
        chunks = enc.to_chunks({2: False, 1: True}, "HashMap<u8, bool>")
        assert chunks == [b"\x02\x00\x00\x00", b"\x01", b"\x01", b"\x02", b"\x00"]

    def test_unresolved_declaration(self) -> None:
        with pytest.raises(EncodeError, match="unresolved"):
            BorshEncoder({}).to_chunks(1, "Mystery")


class TestBind:
    def test_bind_defers_encoding(self) -> None:
        run = BorshEncoder({}).bind(True, "bool")
        chunks: list[bytes] = []
        run(chunks.append)
        assert chunks == [b"\x01"]
