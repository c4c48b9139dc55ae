"""Tests for the structure codec contract and registration."""

import logging
import struct as _struct
from dataclasses import dataclass
from typing import ClassVar

import pytest
from pytest import approx

from wirestruct.errors import (
    SerializationError,
    SizeMismatchError,
    TruncatedInputError,
    UnresolvedStructureError,
)
from wirestruct.registry import REGISTRY, StructRegistry
from wirestruct.struct import Structure, codec, register_structure
from wirestruct.tests.structures import FlaggedPoint, Point3, Polyline, Telemetry, Vector2


def describe_pack():
    def packs_fields_in_schema_order(expect):
        packed = Vector2(x=1, y=-2).pack()

        expect(packed) == bytes.fromhex("01000000feffffff")
        expect(len(packed)) == Vector2.SIZE

    def appends_to_existing_buffer(expect):
        buffer = bytearray(b"\xaa")

        Vector2(x=3, y=4).pack_into(buffer)
        Vector2(x=5, y=6).pack_into(buffer)

        expect(len(buffer)) == 1 + 2 * Vector2.SIZE
        expect(bytes(buffer[:1])) == b"\xaa"

    def packs_nested_structures(expect):
        packed = FlaggedPoint(p=Point3(1.0, 2.0, 3.0), flag=-1).pack()

        expect(len(packed)) == 13
        expect(packed[12:]) == b"\xff"

    def rejects_codec_writing_wrong_size(expect):
        @dataclass
        class Overflow(Structure, register=False):
            TYPE: ClassVar[str] = "Overflow"
            SIZE: ClassVar[int] = 2
            SCHEMA: ClassVar[str] = "uint16 value;"

            value: int

            def _pack_into(self, buffer: bytearray) -> None:
                buffer.extend(_struct.pack("<I", self.value))

        buffer = bytearray(b"\x01")
        with pytest.raises(SerializationError) as exinfo:
            Overflow(value=7).pack_into(buffer)

        expect(str(exinfo.value)).includes("packed 4 bytes, expected 2")
        expect(buffer) == bytearray(b"\x01")


def describe_unpack():
    def round_trips_values(expect):
        values = [
            Vector2(x=-2147483648, y=2147483647),
            Point3(0.5, -1.25, 1024.0),
            FlaggedPoint(p=Point3(1.0, 2.0, 3.0), flag=127),
            Telemetry(
                ok=True,
                name="arm",
                mode=2,
                seq=65535,
                readings=[3.141592653589793, -0.1],
                origin=Point3(0.25, 0.5, 0.75),
            ),
            Polyline(points=[Point3(1.0, 1.0, 1.0), Point3(2.0, 2.0, 2.0)], closed=1),
        ]
        for value in values:
            recovered, consumed = type(value).unpack(value.pack())
            expect(recovered) == value
            expect(consumed) == type(value).SIZE

    def unpacks_at_offset(expect):
        data = b"\x00\x00" + Vector2(x=9, y=10).pack()

        recovered, consumed = Vector2.unpack(data, 2)

        expect(recovered) == Vector2(x=9, y=10)
        expect(consumed) == 8

    def unpacks_from_memoryview(expect):
        data = memoryview(Point3(1.5, 2.5, 3.5).pack())

        recovered, _ = Point3.unpack(data)

        expect(recovered.y) == approx(2.5)

    def rejects_truncated_input(expect):
        data = Vector2(x=1, y=2).pack()[:7]

        with pytest.raises(TruncatedInputError) as exinfo:
            Vector2.unpack(data)

        expect(str(exinfo.value)).includes("needs 8 bytes")

    def rejects_offset_past_end(expect):
        with pytest.raises(TruncatedInputError):
            Vector2.unpack(Vector2(x=1, y=2).pack(), 4)

        with pytest.raises(TruncatedInputError):
            Vector2.unpack(Vector2(x=1, y=2).pack(), -1)


def describe_registration():
    def registers_on_class_definition(expect):
        desc = REGISTRY.lookup("Point3")

        expect(desc is Point3.DESCRIPTION) == True
        expect(desc.size) == 12
        expect(desc.schema()) == "float32 x;float32 y;float32 z;"

    def supplies_composed_schemas_lazily(expect):
        expect(FlaggedPoint.DESCRIPTION.schema()) == "Point3 p;int8 flag;"

    def formats_fields_for_enclosing_schemas(expect):
        expect(Point3.format_field("origin")) == "Point3 origin"

    def builds_descriptor_from_its_facts(expect):
        desc = codec.describe(Vector2)

        expect(desc.type_name) == "Vector2"
        expect(desc.size) == 8
        expect(desc.schema()) == Vector2.SCHEMA

    def keeps_first_descriptor_for_duplicate_name(expect):
        class Impostor(Structure):
            TYPE: ClassVar[str] = "Vector2"
            SIZE: ClassVar[int] = 4
            SCHEMA: ClassVar[str] = "int32 x;"

        expect(Impostor.DESCRIPTION is Vector2.DESCRIPTION) == True
        expect(REGISTRY.lookup("Vector2").size) == 8

    def warns_when_duplicate_name_has_other_size(expect, caplog):
        with caplog.at_level(logging.WARNING, logger="wirestruct.registry"):

            class Widened(Structure):
                TYPE: ClassVar[str] = "Vector2"
                SIZE: ClassVar[int] = 16
                SCHEMA: ClassVar[str] = "int32 a;int32 b;int32 c;int32 d;"

        expect(Widened.DESCRIPTION is Vector2.DESCRIPTION) == True
        expect(caplog.text).includes("Ignoring registration of Vector2 with size 16")
        expect(caplog.text).includes("already registered with size 8")

    def stays_quiet_for_same_size_duplicate(expect, caplog):
        with caplog.at_level(logging.WARNING, logger="wirestruct.registry"):

            class Twin(Structure):
                TYPE: ClassVar[str] = "Point3"
                SIZE: ClassVar[int] = 12
                SCHEMA: ClassVar[str] = "float32 x;float32 y;float32 z;"

        expect(Twin.DESCRIPTION is Point3.DESCRIPTION) == True
        expect(caplog.records) == []

    def rejects_schema_disagreeing_with_size(expect):
        with pytest.raises(SizeMismatchError):

            class Oversized(Structure):
                TYPE: ClassVar[str] = "Oversized"
                SIZE: ClassVar[int] = 3
                SCHEMA: ClassVar[str] = "int32 x;"

        expect(REGISTRY.contains("Oversized")) == False

    def rejects_unknown_sub_structures(expect):
        with pytest.raises(UnresolvedStructureError):

            class Orphan(Structure):
                TYPE: ClassVar[str] = "Orphan"
                SIZE: ClassVar[int] = 4
                SCHEMA: ClassVar[str] = "Unknown u;"

        expect(REGISTRY.contains("Orphan")) == False

    def skips_classes_without_type(expect):
        before = len(REGISTRY)

        class Abstract(Structure):
            pass

        expect(len(REGISTRY)) == before

    def registers_explicitly_into_private_registry(expect):
        class Deferred(Structure, register=False):
            TYPE: ClassVar[str] = "Deferred"
            SIZE: ClassVar[int] = 2
            SCHEMA: ClassVar[str] = "uint8 a;uint8 b;"

        registry = StructRegistry()
        expect(REGISTRY.contains("Deferred")) == False

        live = register_structure(Deferred, registry)

        expect(registry.lookup("Deferred") is live) == True
        expect(Deferred.DESCRIPTION is live) == True
        expect(REGISTRY.contains("Deferred")) == False
