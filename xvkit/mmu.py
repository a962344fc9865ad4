"""x86 segment and gate descriptors, page-table index arithmetic and flags."""

import struct
from dataclasses import dataclass, fields

from xvkit.constants import _UINT_MASK

# Eflags register.
FL_IF = 0x00000200

# Control register flags.
CR0_PE = 0x00000001
CR0_WP = 0x00010000
CR0_PG = 0x80000000
CR4_PSE = 0x00000010

# Segment selectors.
SEG_KCODE = 1
SEG_KDATA = 2
SEG_UCODE = 3
SEG_UDATA = 4
SEG_TSS = 5
NSEGS = 6

DPL_USER = 0x3

# Application segment type bits.
STA_X = 0x8
STA_W = 0x2
STA_R = 0x2

# System segment type bits.
STS_T32A = 0x9
STS_IG32 = 0xE
STS_TG32 = 0xF

# Paging.
NPDENTRIES = 1024
NPTENTRIES = 1024
PGSIZE = 4096
PTXSHIFT = 12
PDXSHIFT = 22

PTE_P = 0x001
PTE_W = 0x002
PTE_U = 0x004
PTE_PS = 0x080

DESCRIPTOR_SIZE = 8

_SEG_BITS = {
    "lim_15_0": 16, "base_15_0": 16, "base_23_16": 8, "type": 4, "s": 1,
    "dpl": 2, "p": 1, "lim_19_16": 4, "avl": 1, "rsv1": 1, "db": 1, "g": 1,
    "base_31_24": 8,
}

_GATE_BITS = {
    "off_15_0": 16, "cs": 16, "args": 5, "rsv1": 3, "type": 4, "s": 1,
    "dpl": 2, "p": 1, "off_31_16": 16,
}


def _check_widths(obj, widths):
    for f in fields(obj):
        value = getattr(obj, f.name)
        if not 0 <= value < (1 << widths[f.name]):
            raise ValueError(f"{f.name}={value} does not fit in {widths[f.name]} bits")


def _pack_bits(obj, widths):
    value = 0
    shift = 0
    for f in fields(obj):
        value |= getattr(obj, f.name) << shift
        shift += widths[f.name]
    return value.to_bytes(DESCRIPTOR_SIZE, "little")


def _unpack_bits(data, widths):
    if len(data) != DESCRIPTOR_SIZE:
        raise ValueError(f"descriptor must be {DESCRIPTOR_SIZE} bytes, got {len(data)}")
    value = int.from_bytes(data, "little")
    values = {}
    for name, width in widths.items():
        values[name] = value & ((1 << width) - 1)
        value >>= width
    return values


@dataclass(frozen=True)
class SegmentDescriptor:
    """A GDT segment descriptor, field by field."""

    lim_15_0: int
    base_15_0: int
    base_23_16: int
    type: int
    s: int
    dpl: int
    p: int
    lim_19_16: int
    avl: int
    rsv1: int
    db: int
    g: int
    base_31_24: int

    def __post_init__(self):
        _check_widths(self, _SEG_BITS)

    def pack(self):
        """The 8 bytes the processor reads."""
        return _pack_bits(self, _SEG_BITS)

    @classmethod
    def unpack(cls, data):
        """Decode 8 descriptor bytes."""
        return cls(**_unpack_bits(bytes(data), _SEG_BITS))

    @property
    def base(self):
        return self.base_15_0 | self.base_23_16 << 16 | self.base_31_24 << 24


@dataclass(frozen=True)
class GateDescriptor:
    """An IDT interrupt or trap gate descriptor."""

    off_15_0: int
    cs: int
    args: int
    rsv1: int
    type: int
    s: int
    dpl: int
    p: int
    off_31_16: int

    def __post_init__(self):
        _check_widths(self, _GATE_BITS)

    def pack(self):
        """The 8 bytes the processor reads."""
        return _pack_bits(self, _GATE_BITS)

    @classmethod
    def unpack(cls, data):
        """Decode 8 descriptor bytes."""
        return cls(**_unpack_bits(bytes(data), _GATE_BITS))

    @property
    def offset(self):
        return self.off_15_0 | self.off_31_16 << 16


def seg(type, base, lim, dpl):
    """A 32-bit segment with 4 KiB limit granularity."""
    base &= _UINT_MASK
    lim &= _UINT_MASK
    return SegmentDescriptor(
        (lim >> 12) & 0xFFFF, base & 0xFFFF, (base >> 16) & 0xFF, type, 1, dpl, 1,
        (lim >> 28) & 0xF, 0, 0, 1, 1, base >> 24,
    )


def seg16(type, base, lim, dpl):
    """A segment with byte limit granularity, as used for the TSS."""
    base &= _UINT_MASK
    lim &= _UINT_MASK
    return SegmentDescriptor(
        lim & 0xFFFF, base & 0xFFFF, (base >> 16) & 0xFF, type, 1, dpl, 1,
        (lim >> 16) & 0xF, 0, 0, 1, 0, base >> 24,
    )


def seg_asm(type, base, lim):
    """Descriptor bytes as the boot code lays them out directly."""
    return struct.pack(
        "<HHBBBB",
        (lim >> 12) & 0xFFFF,
        base & 0xFFFF,
        (base >> 16) & 0xFF,
        0x90 | type,
        0xC0 | ((lim >> 28) & 0xF),
        (base >> 24) & 0xFF,
    )


def set_gate(istrap, sel, off, dpl):
    """An interrupt gate, or a trap gate if ``istrap``, to ``sel:off``."""
    off &= _UINT_MASK
    return GateDescriptor(
        off & 0xFFFF, sel, 0, 0, STS_TG32 if istrap else STS_IG32, 0, dpl, 1, off >> 16
    )


def pdx(va):
    """Page directory index of a virtual address."""
    return ((va & _UINT_MASK) >> PDXSHIFT) & 0x3FF


def ptx(va):
    """Page table index of a virtual address."""
    return ((va & _UINT_MASK) >> PTXSHIFT) & 0x3FF


def pgaddr(d, t, o):
    """Virtual address from directory index, table index and offset."""
    return (d << PDXSHIFT | t << PTXSHIFT | o) & _UINT_MASK


def pg_round_up(sz):
    """Round up to a page boundary, wrapping at 32 bits."""
    return (sz + PGSIZE - 1) & ~(PGSIZE - 1) & _UINT_MASK


def pg_round_down(a):
    """Round down to a page boundary."""
    return a & ~(PGSIZE - 1) & _UINT_MASK


def pte_addr(pte):
    """Physical address held in a page table entry."""
    return pte & ~0xFFF & _UINT_MASK


def pte_flags(pte):
    """Flag bits of a page table entry."""
    return pte & 0xFFF