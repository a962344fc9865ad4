import pytest

from xvkit.mmu import (
    DPL_USER,
    PGSIZE,
    PTE_P,
    PTE_U,
    PTE_W,
    SEG_KCODE,
    STA_R,
    STA_W,
    STA_X,
    STS_IG32,
    STS_T32A,
    STS_TG32,
    GateDescriptor,
    SegmentDescriptor,
    pdx,
    pg_round_down,
    pg_round_up,
    pgaddr,
    pte_addr,
    pte_flags,
    ptx,
    seg,
    seg16,
    seg_asm,
    set_gate,
)


def test_flat_kernel_code_segment_bytes():
    assert seg(STA_X | STA_R, 0, 0xFFFFFFFF, 0).pack() == bytes.fromhex("ffff0000009acf00")


@pytest.mark.parametrize("type_", [STA_X | STA_R, STA_W])
@pytest.mark.parametrize("base,lim", [(0, 0xFFFFFFFF), (0x12345678, 0x0FFFF000)])
def test_seg_asm_matches_seg(type_, base, lim):
    assert seg_asm(type_, base, lim) == seg(type_, base, lim, 0).pack()


def test_segment_round_trip():
    d = seg(STA_W, 0x00ABCDEF, 0xFFFFFFFF, DPL_USER)
    assert SegmentDescriptor.unpack(d.pack()) == d
    assert d.dpl == DPL_USER
    assert d.base == 0x00ABCDEF


def test_seg16_uses_byte_granularity():
    d = seg16(STS_T32A, 0x80001000, 103, 0)
    assert d.g == 0
    assert d.lim_15_0 == 103
    assert d.base == 0x80001000
    assert SegmentDescriptor.unpack(d.pack()) == d


def test_segment_field_width_checked():
    with pytest.raises(ValueError):
        SegmentDescriptor(0, 0, 0, 16, 1, 0, 1, 0, 0, 0, 1, 1, 0)


def test_unpack_rejects_wrong_length():
    with pytest.raises(ValueError):
        SegmentDescriptor.unpack(b"\0" * 7)


def test_set_gate_types_and_round_trip():
    trap = set_gate(1, SEG_KCODE << 3, 0x80105ABC, DPL_USER)
    intr = set_gate(0, SEG_KCODE << 3, 0x80105ABC, 0)
    assert trap.type == STS_TG32
    assert intr.type == STS_IG32
    assert trap.offset == 0x80105ABC
    assert trap.p == 1 and trap.s == 0
    assert GateDescriptor.unpack(trap.pack()) == trap
    assert len(trap.pack()) == 8


@pytest.mark.parametrize("va", [0, 0x1234, 0x80000000, 0xFFFFFFFF, 0x00403ABC])
def test_pgaddr_reassembles_indexes(va):
    assert pgaddr(pdx(va), ptx(va), va & 0xFFF) == va
    assert 0 <= pdx(va) < 1024
    assert 0 <= ptx(va) < 1024


def test_page_rounding():
    assert pg_round_up(0) == 0
    assert pg_round_up(1) == PGSIZE
    assert pg_round_up(PGSIZE) == PGSIZE
    assert pg_round_down(PGSIZE + 1) == PGSIZE
    assert pg_round_up(0xFFFFFFFF) == 0


def test_pte_address_and_flags_split():
    pte = 0x00ABC000 | PTE_P | PTE_W | PTE_U
    assert pte_addr(pte) == 0x00ABC000
    assert pte_flags(pte) == PTE_P | PTE_W | PTE_U
    assert pte_addr(pte) | pte_flags(pte) == pte