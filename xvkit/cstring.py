"""NUL-terminated string and byte buffer helpers over bytes and bytearray."""


def _cstr(s):
    """The part of ``s`` before its first NUL."""
    if isinstance(s, str):
        return s.split("\0", 1)[0]
    return bytes(s).split(b"\0", 1)[0]


def _check_span(buf, start, n):
    if n < 0 or start < 0 or start + n > len(buf):
        raise ValueError(f"span {start}..{start + n} outside buffer of {len(buf)} bytes")


def memset(buf, c, n):
    """Fill the first ``n`` bytes of ``buf`` with the low byte of ``c``."""
    _check_span(buf, 0, n)
    buf[:n] = bytes([c & 0xFF]) * n
    return buf


def memcmp(a, b, n):
    """Compare ``n`` bytes; return the difference of the first unequal pair or 0."""
    _check_span(a, 0, n)
    _check_span(b, 0, n)
    for x, y in zip(a[:n], b[:n]):
        if x != y:
            return x - y
    return 0


def memmove(buf, dst, src, n):
    """Copy ``n`` bytes within ``buf`` from offset ``src`` to ``dst``; overlap is safe."""
    _check_span(buf, src, n)
    _check_span(buf, dst, n)
    buf[dst:dst + n] = bytes(buf[src:src + n])
    return buf


def strlen(s):
    """Number of characters before the first NUL."""
    return len(_cstr(s))


def strcmp(p, q):
    """Compare two NUL-terminated strings byte by byte."""
    return strncmp(p, q, max(strlen(p), strlen(q)) + 1)


def strncmp(p, q, n):
    """Compare at most ``n`` bytes of two NUL-terminated strings."""
    a = _as_bytes(_cstr(p)) + b"\0"
    b = _as_bytes(_cstr(q)) + b"\0"
    for x, y, _ in zip(a, b, range(n)):
        if x == 0 or x != y:
            return x - y
    return 0


def _as_bytes(s):
    return s.encode("latin-1") if isinstance(s, str) else s


def strncpy(t, n):
    """The ``n`` bytes strncpy writes: ``t`` cut at ``n``, NUL-padded, maybe unterminated."""
    if n <= 0:
        return b""
    text = _as_bytes(_cstr(t))[:n]
    return text + b"\0" * (n - len(text))


def safestrcpy(t, n):
    """The bytes safestrcpy writes: at most ``n - 1`` characters and a NUL."""
    if n <= 0:
        return b""
    return _as_bytes(_cstr(t))[:n - 1] + b"\0"


def strchr(s, c):
    """Index of the first ``c`` before the NUL in ``s``, or None."""
    text = _cstr(s)
    if isinstance(c, int):
        c = chr(c) if isinstance(text, str) else bytes([c & 0xFF])
    if len(c) != 1:
        raise ValueError("strchr needs exactly one character")
    index = text.find(c)
    return None if index < 0 else index


def atoi(s):
    """Value of the leading decimal digits of ``s``; 0 when there are none."""
    if not isinstance(s, str):
        s = bytes(s).decode("latin-1")
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = n * 10 + ord(ch) - ord("0")
    return n


def gets(stream, max):
    """Read one line from a binary stream, at most ``max - 1`` bytes, keeping the terminator."""
    line = bytearray()
    while len(line) + 1 < max:
        c = stream.read(1)
        if not c:
            break
        line += c
        if c in (b"\n", b"\r"):
            break
    return bytes(line)