"""Command-line parser for the shell: tokens, command trees and cd handling."""

from dataclasses import dataclass, field

from xvkit.constants import OpenFlag

MAXARGS = 10
WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"

_SINGLE = "|();&<"


class ShellSyntaxError(ValueError):
    """The command line cannot be parsed."""


@dataclass
class ExecCmd:
    """Run a program with its arguments; ``argv[0]`` names the program."""

    argv: list = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run ``cmd`` with descriptor ``fd`` reopened on ``file`` in ``mode``."""

    cmd: object
    file: str
    mode: OpenFlag
    fd: int


@dataclass
class PipeCmd:
    """Connect the output of ``left`` to the input of ``right``."""

    left: object
    right: object


@dataclass
class ListCmd:
    """Run ``left`` to completion, then ``right``."""

    left: object
    right: object


@dataclass
class BackCmd:
    """Run ``cmd`` without waiting for it."""

    cmd: object


class Tokenizer:
    """Splits a command line into words and shell symbols."""

    def __init__(self, line):
        self.line = line.split("\0", 1)[0]
        self.pos = 0

    @property
    def rest(self):
        """The text not yet consumed."""
        return self.line[self.pos:]

    def _skip_whitespace(self):
        while self.pos < len(self.line) and self.line[self.pos] in WHITESPACE:
            self.pos += 1

    def peek(self, toks):
        """Skip whitespace; tell whether the next character is one of ``toks``."""
        self._skip_whitespace()
        return self.pos < len(self.line) and self.line[self.pos] in toks

    def next_token(self):
        """Consume one token and return ``(kind, text)``.

        ``kind`` is ``""`` at the end of the line, ``"a"`` for a word, ``"+"``
        for ``>>`` and the symbol itself otherwise.
        """
        self._skip_whitespace()
        line = self.line
        start = self.pos
        if start >= len(line):
            kind = ""
        else:
            c = line[start]
            if c in _SINGLE:
                kind = c
                self.pos += 1
            elif c == ">":
                kind = ">"
                self.pos += 1
                if self.pos < len(line) and line[self.pos] == ">":
                    kind = "+"
                    self.pos += 1
            else:
                kind = "a"
                while (
                    self.pos < len(line)
                    and line[self.pos] not in WHITESPACE
                    and line[self.pos] not in SYMBOLS
                ):
                    self.pos += 1
        text = line[start:self.pos]
        self._skip_whitespace()
        return kind, text


def parse_command(line):
    """Parse a whole command line into a command tree."""
    tokens = Tokenizer(line)
    cmd = _parse_line(tokens)
    tokens.peek("")
    if tokens.pos != len(tokens.line):
        raise ShellSyntaxError(f"syntax: leftovers: {tokens.rest}")
    return cmd


def parse_cd(line):
    """The directory of a ``cd`` line (its last character chopped), or None."""
    if not line.startswith("cd "):
        return None
    return line[3:-1]


def _parse_line(tokens):
    cmd = _parse_pipe(tokens)
    while tokens.peek("&"):
        tokens.next_token()
        cmd = BackCmd(cmd)
    if tokens.peek(";"):
        tokens.next_token()
        cmd = ListCmd(cmd, _parse_line(tokens))
    return cmd


def _parse_pipe(tokens):
    cmd = _parse_exec(tokens)
    if tokens.peek("|"):
        tokens.next_token()
        cmd = PipeCmd(cmd, _parse_pipe(tokens))
    return cmd


def _parse_redirs(cmd, tokens):
    while tokens.peek("<>"):
        kind, _ = tokens.next_token()
        file_kind, file = tokens.next_token()
        if file_kind != "a":
            raise ShellSyntaxError("missing file for redirection")
        if kind == "<":
            cmd = RedirCmd(cmd, file, OpenFlag.RDONLY, 0)
        else:
            cmd = RedirCmd(cmd, file, OpenFlag.WRONLY | OpenFlag.CREATE, 1)
    return cmd


def _parse_block(tokens):
    if not tokens.peek("("):
        raise ShellSyntaxError("parseblock")
    tokens.next_token()
    cmd = _parse_line(tokens)
    if not tokens.peek(")"):
        raise ShellSyntaxError("syntax - missing )")
    tokens.next_token()
    return _parse_redirs(cmd, tokens)


def _parse_exec(tokens):
    if tokens.peek("("):
        return _parse_block(tokens)
    command = ExecCmd()
    ret = _parse_redirs(command, tokens)
    while not tokens.peek("|)&;"):
        kind, text = tokens.next_token()
        if kind == "":
            break
        if kind != "a":
            raise ShellSyntaxError("syntax")
        command.argv.append(text)
        if len(command.argv) >= MAXARGS:
            raise ShellSyntaxError("too many args")
        ret = _parse_redirs(ret, tokens)
    return ret