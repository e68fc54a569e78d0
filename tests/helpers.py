import struct

RECORD_FORMAT = '<8sIIIIIIHHI'  # IMAGE_SECTION_HEADER, 40 bytes

IMAGE_SCN_CNT_CODE = 0x00000020
IMAGE_SCN_MEM_EXECUTE = 0x20000000
IMAGE_SCN_MEM_READ = 0x40000000


def makeRecord(name=b'.text', virtualSize=0, virtualAddress=0, sizeOfRawData=0, pointerToRawData=0,
               pointerToRelocations=0, pointerToLinenumbers=0, numberOfRelocations=0,
               numberOfLinenumbers=0, characteristics=0) -> bytes:
    return struct.pack(RECORD_FORMAT, name, virtualSize, virtualAddress, sizeOfRawData, pointerToRawData,
                       pointerToRelocations, pointerToLinenumbers, numberOfRelocations,
                       numberOfLinenumbers, characteristics)


def makeTableBytes() -> bytes:
    """.text, .data, .rsrc and a second .data"""
    return b''.join([
        makeRecord(b'.text', 0x1000, 0x1000, 0x800, 0x400, characteristics=0x60000020),
        makeRecord(b'.data', 0x200, 0x2000, 0x200, 0xc00, characteristics=0xc0000040),
        makeRecord(b'.rsrc', 0, 0x3000, 0x100, 0xe00, characteristics=0x40000040),
        makeRecord(b'.data', 0x80, 0x4000, 0x80, 0xf00, characteristics=0xc0000040),
    ])


def makePe(records) -> bytes:
    """Minimal PE32 image with the given section table entries"""
    e_lfanew = 0x40
    dosHeader = b'MZ' + b'\x00' * (0x3c - 2) + struct.pack('<I', e_lfanew)
    fileHeader = struct.pack('<HHIIIHH', 0x14c, len(records), 0, 0, 0, 224, 0x0102)
    optionalHeader = struct.pack('<HBB' + 'I' * 9 + 'H' * 6 + 'I' * 4 + 'HH' + 'I' * 6,
                                 0x10b, 14, 0,
                                 0x800, 0x200, 0, 0x1000, 0x1000, 0x2000, 0x400000, 0x1000, 0x200,
                                 6, 0, 0, 0, 6, 0,
                                 0, 0x5000, 0x400, 0,
                                 3, 0,
                                 0x100000, 0x1000, 0x100000, 0x1000, 0, 16)
    optionalHeader += b'\x00' * (16 * 8)
    data = dosHeader + b'PE\x00\x00' + fileHeader + optionalHeader + b''.join(records)
    return data + b'\x00' * (0x1000 - len(data))
