import logging
from typing import Tuple
import pefile

from decoder import ENTRY_SIZE
from sectiontable import SectionTable, MAX_NUMBER_OF_SECTIONS
from model.model_spec import FieldSpecification

PE_SIGNATURE_SIZE = 4


def getSectionTableLocation(pepe: pefile.PE) -> Tuple[int, int]:
    """Returns (file offset, number of entries) of the section table"""
    offset = (pepe.DOS_HEADER.e_lfanew
              + PE_SIGNATURE_SIZE
              + pepe.FILE_HEADER.sizeof()
              + pepe.FILE_HEADER.SizeOfOptionalHeader)
    return offset, pepe.FILE_HEADER.NumberOfSections


def loadSectionTable(data: bytes, specification: FieldSpecification = None,
                     maxEntries: int = MAX_NUMBER_OF_SECTIONS) -> SectionTable:
    """Locates the section table in PE data. The table is not decoded yet."""
    pepe = pefile.PE(data=data, fast_load=True)
    offset, numberOfEntries = getSectionTableLocation(pepe)
    pepe.close()
    logging.info("FilePe: Section table at 0x{:x} with {} entries".format(offset, numberOfEntries))

    tableBytes = data[offset:offset + numberOfEntries * ENTRY_SIZE]
    return SectionTable(tableBytes, numberOfEntries, offset, specification, maxEntries=maxEntries)


def loadSectionTableFromFile(filepath: str, specification: FieldSpecification = None,
                             maxEntries: int = MAX_NUMBER_OF_SECTIONS) -> SectionTable:
    with open(filepath, "rb") as f:
        data = f.read()
    return loadSectionTable(data, specification, maxEntries)
