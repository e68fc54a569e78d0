from __future__ import annotations

import os
from typing import List, Dict, Optional

from model.errors import SpecLoadError
from model.model_spec import SPEC_DIR, readYamlResource

SECTION_CHARACTERISTICS = os.path.join(SPEC_DIR, "sectioncharacteristics.yaml")


class Flag():
    def __init__(self, value: int, name: str, description: str = ''):
        self.value: int = value
        self.name: str = name
        self.description: str = description

    def __eq__(self, other):
        if not isinstance(other, Flag):
            return NotImplemented
        return self.value == other.value and self.name == other.name

    def __str__(self):
        if self.description:
            return "{}: {}".format(self.name, self.description)
        return self.name


class FlagEnumeration():
    """A multi-bit field inside the bitmask, e.g. the section alignment"""
    def __init__(self, name: str, mask: int, values: Dict[int, Flag]):
        self.name: str = name
        self.mask: int = mask
        self.values: Dict[int, Flag] = values

    def lookup(self, value: int) -> Optional[Flag]:
        return self.values.get(value & self.mask, None)


class FlagDictionary():
    """Maps bitmask values to flag names. Display only."""
    def __init__(self, flags: List[Flag], enumerations: List[FlagEnumeration] = None):
        self.flags: List[Flag] = sorted(flags, key=lambda f: f.value)
        self.enumerations: List[FlagEnumeration] = enumerations or []


    def resolve(self, value: int) -> List[Flag]:
        result = [flag for flag in self.flags if flag.value != 0 and value & flag.value == flag.value]
        for enumeration in self.enumerations:
            flag = enumeration.lookup(value)
            if flag is not None:
                result.append(flag)
        return result


    def resolveNames(self, value: int) -> List[str]:
        return [flag.name for flag in self.resolve(value)]


    def unknownBits(self, value: int) -> int:
        known = 0
        for flag in self.flags:
            known |= flag.value
        for enumeration in self.enumerations:
            if enumeration.lookup(value) is not None:
                known |= enumeration.mask
        return value & ~known


    @staticmethod
    def fromDict(data) -> FlagDictionary:
        if not isinstance(data, dict) or not isinstance(data.get('flags'), dict):
            raise SpecLoadError("Flag dictionary needs a 'flags' mapping")

        flags = [_readFlag(value, entry) for value, entry in data['flags'].items()]

        enumerations = []
        for entry in data.get('enumerations') or []:
            if not isinstance(entry, dict) or not isinstance(entry.get('mask'), int) \
                    or not isinstance(entry.get('values'), dict):
                raise SpecLoadError("Invalid flag enumeration: {!r}".format(entry))
            values = {value: _readFlag(value, e) for value, e in entry['values'].items()}
            enumerations.append(FlagEnumeration(str(entry.get('name', '')), entry['mask'], values))

        return FlagDictionary(flags, enumerations)


def _readFlag(value, entry) -> Flag:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise SpecLoadError("Invalid flag value: {!r}".format(value))
    if isinstance(entry, str):
        return Flag(value, entry)
    if not isinstance(entry, dict) or not isinstance(entry.get('name'), str):
        raise SpecLoadError("Flag 0x{:08x} has no name".format(value))
    return Flag(value, entry['name'], entry.get('description', '') or '')


def loadFlagDictionary(path: str = SECTION_CHARACTERISTICS) -> FlagDictionary:
    return FlagDictionary.fromDict(readYamlResource(path))
