"""ELF executable file header and program header records."""

import struct
from dataclasses import dataclass, field

ELF_MAGIC = 0x464C457F

ELF_PROG_LOAD = 1

ELF_PROG_FLAG_EXEC = 1
ELF_PROG_FLAG_WRITE = 2
ELF_PROG_FLAG_READ = 4

_ELFHDR = struct.Struct("<I12sHHIIIIIHHHHHH")
_PROGHDR = struct.Struct("<IIIIIIII")

HEADER_SIZE = _ELFHDR.size
PROGHDR_SIZE = _PROGHDR.size


class ElfFormatError(ValueError):
    """The bytes are not a well-formed ELF image."""


@dataclass
class ElfHeader:
    """The ELF file header."""

    magic: int = ELF_MAGIC
    elf: bytes = field(default=bytes(12))
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = HEADER_SIZE
    phentsize: int = PROGHDR_SIZE
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    def pack(self):
        """Little-endian header bytes."""
        if len(self.elf) != 12:
            raise ElfFormatError("identification bytes must be 12 long")
        try:
            return _ELFHDR.pack(
                self.magic, self.elf, self.type, self.machine, self.version,
                self.entry, self.phoff, self.shoff, self.flags, self.ehsize,
                self.phentsize, self.phnum, self.shentsize, self.shnum, self.shstrndx,
            )
        except struct.error as exc:
            raise ElfFormatError(str(exc)) from exc

    @classmethod
    def unpack(cls, data):
        """Decode the header at the start of ``data``; the magic must match."""
        if len(data) < HEADER_SIZE:
            raise ElfFormatError(f"ELF header needs {HEADER_SIZE} bytes, got {len(data)}")
        header = cls(*_ELFHDR.unpack_from(data))
        if header.magic != ELF_MAGIC:
            raise ElfFormatError(f"bad ELF magic {header.magic:#x}")
        return header


@dataclass
class ProgramHeader:
    """One program section header."""

    type: int = 0
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    flags: int = 0
    align: int = 0

    @property
    def loadable(self):
        return self.type == ELF_PROG_LOAD

    def pack(self):
        """Little-endian program header bytes."""
        try:
            return _PROGHDR.pack(
                self.type, self.off, self.vaddr, self.paddr,
                self.filesz, self.memsz, self.flags, self.align,
            )
        except struct.error as exc:
            raise ElfFormatError(str(exc)) from exc

    @classmethod
    def unpack(cls, data):
        """Decode the program header at the start of ``data``."""
        if len(data) < PROGHDR_SIZE:
            raise ElfFormatError(f"program header needs {PROGHDR_SIZE} bytes, got {len(data)}")
        return cls(*_PROGHDR.unpack_from(data))


def program_headers(data):
    """All program headers of the ELF image in ``data``, in file order."""
    header = ElfHeader.unpack(data)
    headers = []
    for i in range(header.phnum):
        start = header.phoff + i * PROGHDR_SIZE
        headers.append(ProgramHeader.unpack(data[start:start + PROGHDR_SIZE]))
    return headers