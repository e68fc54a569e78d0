from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from model.errors import FieldNotFoundError

# Keys of the bundled section table specification
KEY_VIRTUAL_SIZE = 'virtualSize'
KEY_VIRTUAL_ADDRESS = 'virtualAddress'
KEY_SIZE_OF_RAW_DATA = 'sizeOfRawData'
KEY_POINTER_TO_RAW_DATA = 'pointerToRawData'
KEY_CHARACTERISTICS = 'characteristics'


class SectionHeader():
    """One decoded entry of the section table. Read only."""
    def __init__(self, number: int, name: str, fields: Dict[str, int], offset: int):
        self._number: int = number     # 1-based, order in the table
        self._name: str = name
        self._fields: Mapping[str, int] = MappingProxyType(dict(fields))
        self._offset: int = offset     # relative to the table start


    @property
    def number(self) -> int:
        return self._number

    @property
    def name(self) -> str:
        return self._name

    @property
    def fields(self) -> Mapping[str, int]:
        return self._fields

    @property
    def offset(self) -> int:
        return self._offset


    def getField(self, key: str) -> int:
        if key not in self._fields:
            raise FieldNotFoundError("Section {} has no field {}".format(self._number, key))
        return self._fields[key]


    def getCharacteristics(self) -> int:
        return self.getField(KEY_CHARACTERISTICS)


    def getFileRange(self) -> Optional[Tuple[int, int]]:
        """[start, end) of the section data in the file"""
        start = self._fields.get(KEY_POINTER_TO_RAW_DATA)
        size = self._fields.get(KEY_SIZE_OF_RAW_DATA)
        if start is None or not size:
            return None
        return start, start + size


    def getVirtualRange(self) -> Optional[Tuple[int, int]]:
        """[start, end) of the section relative to the image base"""
        start = self._fields.get(KEY_VIRTUAL_ADDRESS)
        size = self._fields.get(KEY_VIRTUAL_SIZE)
        if start is None or size is None:
            return None
        if size == 0:
            # some linkers leave VirtualSize empty
            size = self._fields.get(KEY_SIZE_OF_RAW_DATA, 0)
        if size == 0:
            return None
        return start, start + size


    def __eq__(self, other):
        if not isinstance(other, SectionHeader):
            return NotImplemented
        return (self._number, self._name, dict(self._fields), self._offset) == \
            (other._number, other._name, dict(other._fields), other._offset)

    __hash__ = None


    def __repr__(self):
        return "SectionHeader({}, {!r}, offset={})".format(self._number, self._name, self._offset)


    def __str__(self):
        return "Section {} {}\t  addr: {}   size: {}".format(
            self._number,
            self._name,
            hex(self._fields.get(KEY_POINTER_TO_RAW_DATA, 0)),
            self._fields.get(KEY_SIZE_OF_RAW_DATA, 0))
