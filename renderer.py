from typing import List

from sectiontable import SectionTable
from model.model_flags import FlagDictionary, loadFlagDictionary
from model.model_section import (SectionHeader, KEY_POINTER_TO_RAW_DATA, KEY_SIZE_OF_RAW_DATA,
                                 KEY_VIRTUAL_ADDRESS, KEY_VIRTUAL_SIZE)
from model.model_spec import FieldSpecification, FieldKind

NL = "\n"


def render(table: SectionTable, flagDictionary: FlagDictionary = None) -> str:
    """Text report of all entries, fields in specification order"""
    headers = table.getSectionHeaders()  # raises if not decoded
    if flagDictionary is None:
        flagDictionary = loadFlagDictionary()

    s = ''
    s += "-----------------" + NL + "Section Table" + NL + "-----------------" + NL + NL
    for header in headers:
        s += "entry number {}:".format(header.number) + NL + "..............." + NL + NL
        s += renderHeader(header, table.specification, flagDictionary) + NL
    return s


def renderHeader(header: SectionHeader, specification: FieldSpecification, flagDictionary: FlagDictionary) -> str:
    s = ''
    for field in specification:
        if field.kind is FieldKind.STRING:
            s += "{}: {}".format(field.label, header.name) + NL
        elif field.kind is FieldKind.FLAGS:
            s += "{}:".format(field.label) + NL
            s += renderFlags(header.getField(field.key), flagDictionary)
        else:
            value = header.getField(field.key)
            s += "{}: {} (0x{:x})".format(field.label, value, value) + NL
    return s


def renderFlags(value: int, flagDictionary: FlagDictionary) -> str:
    lines: List[str] = ["\t* {}".format(flag) for flag in flagDictionary.resolve(value)]
    unknown = flagDictionary.unknownBits(value)
    if unknown:
        lines.append("\t* unknown flag bits: 0x{:08x}".format(unknown))
    if not lines:
        lines.append("\t* none")
    return NL.join(lines) + NL


def renderSummary(table: SectionTable) -> str:
    """One line per section"""
    s = ''
    for header in table.getSectionHeaders():
        s += "{:>3}  {:<8}  raw: 0x{:08x}  rawsize: 0x{:08x}  va: 0x{:08x}  vsize: 0x{:08x}".format(
            header.number,
            header.name,
            header.fields.get(KEY_POINTER_TO_RAW_DATA, 0),
            header.fields.get(KEY_SIZE_OF_RAW_DATA, 0),
            header.fields.get(KEY_VIRTUAL_ADDRESS, 0),
            header.fields.get(KEY_VIRTUAL_SIZE, 0),
        ) + NL
    return s
