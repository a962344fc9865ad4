# xvkit

Small, self-contained models of pieces of a teaching Unix-like kernel for
32-bit x86 and its user programs. Each piece can be read, tried from a
Python prompt and tested on its own. There are no dependencies beyond the
standard library.

## What is inside

- `xvkit.constants`: kernel parameters (`NPROC`, `NOFILE`, `MAXARG`, ...),
  the memory layout (`KERNBASE`, `PHYSTOP`, `DEVSPACE`, ...), open flags
  (`OpenFlag`), inode kinds (`FileType`), system call numbers (`Syscall`),
  trap numbers (`Trap`), the `Stat` record and the `v2p` / `p2v` address
  conversions.
- `xvkit.cstring`: C string and buffer routines with C semantics over
  `bytes`, `bytearray` and `str`: `memset`, `memcmp`, `memmove`, `strlen`,
  `strcmp`, `strncmp`, `strncpy`, `safestrcpy`, `strchr`, `atoi` and
  `gets`. Strings are cut at their first NUL; `strncpy` and `safestrcpy`
  return the bytes they would write; `strchr` returns an index or `None`.
- `xvkit.mmu`: GDT and IDT descriptors (`SegmentDescriptor`,
  `GateDescriptor`, each with `pack()` and `unpack()`), their builders
  (`seg`, `seg16`, `seg_asm`, `set_gate`), page-table address arithmetic
  (`pdx`, `ptx`, `pgaddr`, `pg_round_up`, `pg_round_down`, `pte_addr`,
  `pte_flags`) and the flag constants (`PTE_P`, `PTE_W`, `PTE_U`, `PGSIZE`,
  ...).
- `xvkit.elf`: `ElfHeader` and `ProgramHeader` packing and parsing, and
  `program_headers(data)` to list the program headers of an image. Bad
  magic or short data raises `ElfFormatError`.
- `xvkit.shell`: the shell grammar (`;`, `&`, `|`, `<`, `>`, `>>` and
  parentheses) parsed by `parse_command(line)` into `ExecCmd`, `RedirCmd`,
  `PipeCmd`, `ListCmd` and `BackCmd` trees; `Tokenizer` exposes the
  tokenizer itself; `parse_cd(line)` recognises the built-in `cd`. Syntax
  errors, including more than nine arguments to one command, raise
  `ShellSyntaxError`.
- `xvkit.umalloc`: `Allocator`, a first-fit, address-ordered free-list heap
  that grows through its own `sbrk` and merges neighbouring free blocks.
  `malloc` returns addresses; `free` rejects addresses it did not hand out;
  running past the optional `limit` raises `MemoryError`.
- `xvkit.wc`: `count(stream)` returns a `WordCount` of lines, words and
  bytes; `main` is the `xvkit-wc` command.

## Install

```
pip install .
```

## Examples

Parse a shell line:

```python
from xvkit.shell import parse_command

tree = parse_command("cat < in.txt | grep foo > out.txt &")
print(tree)
# BackCmd(cmd=PipeCmd(left=RedirCmd(...), right=RedirCmd(...)))
```

Build the kernel code segment descriptor and its bytes:

```python
from xvkit.mmu import STA_R, STA_X, seg

descriptor = seg(STA_X | STA_R, 0, 0xFFFFFFFF, 0)
print(descriptor.pack().hex())
```

Round-trip an ELF header:

```python
from xvkit.elf import ElfHeader

header = ElfHeader(entry=0x1000)
assert ElfHeader.unpack(header.pack()) == header
```

Allocate from the simulated heap:

```python
from xvkit.umalloc import Allocator

heap = Allocator()
block = heap.malloc(100)
heap.free(block)
```

## Command line

Count lines, words and bytes of files, or of standard input when no file
is given:

```
xvkit-wc README.md
```

Each file gives one line, `lines words bytes name`. A file that cannot be
opened prints `wc: cannot open NAME` and ends the command with status 1.

## What it does not do

- It does not run anything. The shell module parses command lines into
  trees but does not start programs, open files or set up pipes.
- It has no page tables, physical memory, processes, scheduler, locks or
  file system; `xvkit.mmu` only computes descriptor bytes and address
  arithmetic, and `xvkit.constants` only names the numbers.
- The heap allocator hands out numbers standing for addresses; it holds no
  memory contents.

## Tests

```
pip install .[test]
pytest
```