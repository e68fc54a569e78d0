import logging
import string
from dataclasses import dataclass
from typing import Dict, List

from model.errors import MalformedRecordError
from model.model_section import SectionHeader
from model.model_spec import FieldSpecification, FieldKind

# Size of one section table entry, fixed by the PE/COFF format
ENTRY_SIZE = 40

NAME_PADDING = "\x00" + string.whitespace


@dataclass(frozen=True)
class RawRecord:
    name: str
    fields: Dict[str, int]


def checkSpecification(spec: FieldSpecification, entrySize: int = ENTRY_SIZE):
    """Every field has to lie inside one record"""
    for field in spec:
        if field.end() > entrySize:
            raise MalformedRecordError("Field {} (offset {} length {}) exceeds entry size {}".format(
                field.key, field.offset, field.length, entrySize))


def readUnsigned(data: bytes, offset: int, length: int) -> int:
    """Unsigned little endian integer of 1 to 8 bytes"""
    return int.from_bytes(data[offset:offset+length], byteorder='little', signed=False)


def readName(data: bytes, offset: int, length: int) -> str:
    raw = data[offset:offset+length]
    try:
        name = raw.decode("UTF-8")
    except UnicodeDecodeError:
        # some binaries have invalid UTF8 in section name
        return ' '.join('0x{:02x}'.format(x) for x in raw.rstrip(b"\x00"))
    return name.rstrip(NAME_PADDING)


def decodeRecord(tableBytes: bytes, entryIndex: int, spec: FieldSpecification, entrySize: int = ENTRY_SIZE) -> RawRecord:
    start = entryIndex * entrySize
    end = start + entrySize
    if entryIndex < 0 or len(tableBytes) < end:
        raise MalformedRecordError("Entry {} needs {} bytes, table has {}".format(
            entryIndex, end, len(tableBytes)))
    checkSpecification(spec, entrySize)

    record = tableBytes[start:end]
    name = ''
    fields = {}
    for field in spec:
        if field.kind is FieldKind.STRING:
            name = readName(record, field.offset, field.length)
        else:
            fields[field.key] = readUnsigned(record, field.offset, field.length)

    return RawRecord(name, fields)


def decodeSectionHeaders(tableBytes: bytes, entryCount: int, spec: FieldSpecification, entrySize: int = ENTRY_SIZE) -> List[SectionHeader]:
    checkSpecification(spec, entrySize)
    covered = spec.coverage()
    if covered != entrySize:
        logging.warning("Specification covers {} of {} record bytes".format(covered, entrySize))
    if len(tableBytes) < entryCount * entrySize:
        raise MalformedRecordError("Table of {} entries needs {} bytes, has {}".format(
            entryCount, entryCount * entrySize, len(tableBytes)))

    headers = []
    for i in range(entryCount):
        raw = decodeRecord(tableBytes, i, spec, entrySize)
        header = SectionHeader(i + 1, raw.name, raw.fields, i * entrySize)
        logging.debug("Decoded {}".format(header))
        headers.append(header)
    return headers
