from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Union
from intervaltree import Interval, IntervalTree

from decoder import ENTRY_SIZE, decodeSectionHeaders
from model.errors import (NotDecodedError, InvalidSectionNumber, SectionNotFound,
                          MalformedRecordError)
from model.model_section import SectionHeader
from model.model_spec import FieldSpecification, loadFieldSpecification

# NumberOfSections is a 16 bit field
MAX_NUMBER_OF_SECTIONS = 0xFFFF


class TableState(Enum):
    CONSTRUCTED = 1
    DECODING = 2
    DECODED = 3
    FAILED = 4


class SectionTable():
    """Section table of a PE.

    Construction only checks the buffer against the number of entries.
    decode() does the work, all header queries need a decoded table.
    Once decoded the table does not change and can be shared between threads,
    decode() itself must not run concurrently on the same instance.
    """
    def __init__(self,
                 tableBytes: bytes,
                 numberOfEntries: int,
                 offset: int,
                 specification: FieldSpecification = None,
                 specLoader: Callable[[], FieldSpecification] = loadFieldSpecification,
                 maxEntries: int = MAX_NUMBER_OF_SECTIONS):
        if isinstance(numberOfEntries, bool) or not isinstance(numberOfEntries, int) or numberOfEntries < 0:
            raise MalformedRecordError("Invalid number of entries: {!r}".format(numberOfEntries))
        if numberOfEntries > maxEntries:
            raise MalformedRecordError("Number of entries {} exceeds limit {}".format(numberOfEntries, maxEntries))
        if offset < 0:
            raise MalformedRecordError("Invalid table offset: {}".format(offset))
        required = numberOfEntries * ENTRY_SIZE
        if len(tableBytes) < required:
            raise MalformedRecordError("Section table needs {} bytes for {} entries, got {}".format(
                required, numberOfEntries, len(tableBytes)))

        self.tableBytes: bytes = bytes(tableBytes[:required])
        self.numberOfEntries: int = numberOfEntries
        self.offset: int = offset  # of the first entry in the file
        self.specification: FieldSpecification = specification
        self.specLoader = specLoader
        self.state: TableState = TableState.CONSTRUCTED

        self._headers: tuple = ()
        self._failure: Exception = None
        self._byPhys: IntervalTree = IntervalTree()
        self._byVirt: IntervalTree = IntervalTree()


    def decode(self) -> SectionTable:
        if self.state is TableState.DECODED:
            return self
        if self.state is TableState.FAILED:
            raise self._failure
        if self.state is TableState.DECODING:
            raise NotDecodedError("Section table is already being decoded")

        logging.info("SectionTable: Decode {} entries at offset 0x{:x}".format(self.numberOfEntries, self.offset))
        self.state = TableState.DECODING
        try:
            if self.specification is None:
                self.specification = self.specLoader()
            headers = decodeSectionHeaders(self.tableBytes, self.numberOfEntries, self.specification)
        except Exception as e:
            logging.error("SectionTable: Decoding failed: {}".format(e))
            self.state = TableState.FAILED
            self._failure = e
            raise

        for header in headers:
            fileRange = header.getFileRange()
            if fileRange is not None:
                self._byPhys.add(Interval(fileRange[0], fileRange[1], header))
            virtRange = header.getVirtualRange()
            if virtRange is not None:
                self._byVirt.add(Interval(virtRange[0], virtRange[1], header))

        self._headers = tuple(headers)
        self.state = TableState.DECODED
        return self


    def isDecoded(self) -> bool:
        return self.state is TableState.DECODED


    def _checkDecoded(self):
        if self.state is TableState.FAILED:
            raise NotDecodedError("Section table decoding failed: {}".format(self._failure))
        if self.state is not TableState.DECODED:
            raise NotDecodedError("Section table is not decoded yet")


    def getSectionHeaders(self) -> List[SectionHeader]:
        """All headers in table order. The list is a copy."""
        self._checkDecoded()
        return list(self._headers)


    def getSectionHeader(self, key: Union[int, str]) -> SectionHeader:
        """Header by 1-based number or by name (first match)"""
        if isinstance(key, int):
            return self.getSectionHeaderByNumber(key)
        if isinstance(key, str):
            header = self.getSectionHeaderByName(key)
            if header is None:
                raise SectionNotFound("invalid section name, no section header found: {}".format(key))
            return header
        raise TypeError("Section key must be int or str, not {}".format(type(key).__name__))


    def getSectionHeaderByNumber(self, number: int) -> SectionHeader:
        if isinstance(number, bool) or not isinstance(number, int):
            raise TypeError("Section number must be int, not {}".format(type(number).__name__))
        self._checkDecoded()
        if number < 1 or number > self.numberOfEntries:
            raise InvalidSectionNumber("invalid section number {}, table has {} sections".format(
                number, self.numberOfEntries))
        return self._headers[number - 1]


    def getSectionHeaderByName(self, name: str) -> Optional[SectionHeader]:
        """First header in table order with this name, or None"""
        self._checkDecoded()
        return next((header for header in self._headers if header.name == name), None)


    def getSectionHeadersByName(self, name: str) -> List[SectionHeader]:
        self._checkDecoded()
        return [header for header in self._headers if header.name == name]


    def getSectionHeaderByPhysAddr(self, address: int) -> Optional[SectionHeader]:
        self._checkDecoded()
        res = sorted((r.data for r in self._byPhys.at(address)), key=lambda h: h.number)
        return res[0] if res else None


    def getSectionHeaderByVirtAddr(self, address: int) -> Optional[SectionHeader]:
        self._checkDecoded()
        res = sorted((r.data for r in self._byVirt.at(address)), key=lambda h: h.number)
        return res[0] if res else None


    def getSectionHeadersForPhysRange(self, start: int, end: int) -> List[SectionHeader]:
        self._checkDecoded()
        res = self._byPhys.overlap(start, end)
        return sorted((r.data for r in res), key=lambda h: h.number)


    def getNumberOfSections(self) -> int:
        return self.numberOfEntries


    def getSize(self) -> int:
        return ENTRY_SIZE * self.numberOfEntries


    def getOffset(self) -> int:
        return self.offset


    def __len__(self):
        return self.numberOfEntries


    def __iter__(self):
        return iter(self.getSectionHeaders())
