"""Models of a small x86 teaching kernel's pieces: constants, descriptors, ELF headers, shell parsing, C strings, heap and wc."""

__version__ = "0.1.0"

__all__ = [
    "constants",
    "cstring",
    "elf",
    "mmu",
    "shell",
    "umalloc",
    "wc",
]