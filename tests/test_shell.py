import pytest

from xvkit.constants import OpenFlag
from xvkit.shell import (
    BackCmd,
    ExecCmd,
    ListCmd,
    PipeCmd,
    RedirCmd,
    ShellSyntaxError,
    Tokenizer,
    parse_cd,
    parse_command,
)


def test_simple_exec():
    assert parse_command("echo hello world\n") == ExecCmd(["echo", "hello", "world"])


def test_empty_line():
    assert parse_command("\n") == ExecCmd([])


def test_redirections_nest_innermost_first():
    cmd = parse_command("cat < in > out\n")
    assert cmd == RedirCmd(
        RedirCmd(ExecCmd(["cat"]), "in", OpenFlag.RDONLY, 0),
        "out",
        OpenFlag.WRONLY | OpenFlag.CREATE,
        1,
    )


def test_append_is_treated_as_write():
    cmd = parse_command("echo x >> log")
    assert cmd == RedirCmd(ExecCmd(["echo", "x"]), "log", OpenFlag.WRONLY | OpenFlag.CREATE, 1)


def test_pipe_is_right_associative():
    cmd = parse_command("ls | grep a | wc")
    assert cmd == PipeCmd(ExecCmd(["ls"]), PipeCmd(ExecCmd(["grep", "a"]), ExecCmd(["wc"])))


def test_list_and_background():
    cmd = parse_command("sleep 5 & ; echo done")
    assert cmd == ListCmd(BackCmd(ExecCmd(["sleep", "5"])), ExecCmd(["echo", "done"]))


def test_block_with_redirection():
    cmd = parse_command("(echo a; echo b) > f")
    assert cmd == RedirCmd(
        ListCmd(ExecCmd(["echo", "a"]), ExecCmd(["echo", "b"])),
        "f",
        OpenFlag.WRONLY | OpenFlag.CREATE,
        1,
    )


def test_words_end_at_symbols():
    assert parse_command("echo a|wc") == PipeCmd(ExecCmd(["echo", "a"]), ExecCmd(["wc"]))


def test_nine_arguments_allowed():
    words = [f"w{i}" for i in range(9)]
    assert parse_command(" ".join(words)).argv == words


def test_ten_arguments_rejected():
    with pytest.raises(ShellSyntaxError, match="too many args"):
        parse_command(" ".join(f"w{i}" for i in range(10)))


def test_missing_redirection_file():
    with pytest.raises(ShellSyntaxError, match="missing file"):
        parse_command("cat <\n")


def test_missing_close_paren():
    with pytest.raises(ShellSyntaxError, match="missing"):
        parse_command("(echo a")


def test_leftovers_rejected():
    with pytest.raises(ShellSyntaxError, match="leftovers"):
        parse_command("echo )")


def test_tokenizer_sequence():
    tokens = Tokenizer("a>>b < c")
    seen = [tokens.next_token() for _ in range(6)]
    assert seen == [
        ("a", "a"),
        ("+", ">>"),
        ("a", "b"),
        ("<", "<"),
        ("a", "c"),
        ("", ""),
    ]


def test_tokenizer_peek_skips_whitespace():
    tokens = Tokenizer("   | x")
    assert tokens.peek("|") is True
    assert tokens.peek("&") is False
    assert tokens.next_token() == ("|", "|")


def test_tokenizer_stops_at_nul():
    tokens = Tokenizer("ls\0rm")
    assert tokens.next_token() == ("a", "ls")
    assert tokens.next_token() == ("", "")


def test_parse_cd():
    assert parse_cd("cd dir\n") == "dir"
    assert parse_cd("ls\n") is None
    assert parse_cd("cd \n") == ""