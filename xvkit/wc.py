"""Count lines, words and bytes of files or standard input."""

import sys
from dataclasses import dataclass

_SPACE = frozenset(b" \r\t\n\v")
_NEWLINE = ord("\n")
_CHUNK = 512


@dataclass(frozen=True)
class WordCount:
    """Line, word and byte totals."""

    lines: int = 0
    words: int = 0
    chars: int = 0

    def format(self, name):
        """The report line for ``name``."""
        return f"{self.lines} {self.words} {self.chars} {name}"


def count(stream):
    """Count lines, words and bytes of a binary stream."""
    lines = words = chars = 0
    inword = False
    for chunk in iter(lambda: stream.read(_CHUNK), b""):
        for byte in chunk:
            chars += 1
            if byte == _NEWLINE:
                lines += 1
            if byte in _SPACE:
                inword = False
            elif not inword:
                words += 1
                inword = True
    return WordCount(lines, words, chars)


def _report(stream, name):
    try:
        result = count(stream)
    except OSError:
        print("wc: read error")
        return False
    print(result.format(name))
    return True


def main(argv=None):
    """Print counts for each named file, or for standard input if none."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        return 0 if _report(sys.stdin.buffer, "") else 1
    for name in args:
        try:
            stream = open(name, "rb")
        except OSError:
            print(f"wc: cannot open {name}")
            return 1
        with stream:
            if not _report(stream, name):
                return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())