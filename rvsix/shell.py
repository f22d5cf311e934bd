"""Command-line parser producing a tree of shell commands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union

MAXARGS = 10

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"


class ShellSyntaxError(ValueError):
    """The command line could not be parsed."""


class RedirMode(enum.Enum):
    """How a redirected file is opened."""

    READ = "read"
    WRITE = "write"  # create and truncate
    APPEND = "append"  # create, keep contents


@dataclass
class ExecCmd:
    argv: list = field(default_factory=list)


@dataclass
class RedirCmd:
    cmd: "Command"
    file: str
    mode: RedirMode
    fd: int


@dataclass
class PipeCmd:
    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


class Tokenizer:
    """Splits a command line into words and operator tokens.

    ``next_token`` returns ``(kind, text)`` where kind is ``""`` at the end,
    ``"a"`` for a word, ``"+"`` for ``>>`` and the symbol itself otherwise.
    """

    def __init__(self, text):
        self.text = text
        self.pos = 0

    def _skip_space(self):
        while self.pos < len(self.text) and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    @property
    def rest(self):
        return self.text[self.pos:]

    @property
    def at_end(self):
        return self.pos >= len(self.text)

    def peek(self, toks):
        """Skip blanks and report whether the next character is one of ``toks``."""
        self._skip_space()
        return not self.at_end and self.text[self.pos] in toks

    def next_token(self):
        self._skip_space()
        start = self.pos
        text = self.text
        if self.at_end:
            kind = ""
        else:
            c = text[self.pos]
            if c in "|();&<":
                kind = c
                self.pos += 1
            elif c == ">":
                self.pos += 1
                if self.pos < len(text) and text[self.pos] == ">":
                    kind = "+"
                    self.pos += 1
                else:
                    kind = ">"
            else:
                kind = "a"
                while (
                    self.pos < len(text)
                    and text[self.pos] not in WHITESPACE
                    and text[self.pos] not in SYMBOLS
                ):
                    self.pos += 1
        word = text[start:self.pos]
        self._skip_space()
        return kind, word


def parse_command(line):
    """Parse a full command line into a command tree."""
    tokens = Tokenizer(line)
    cmd = _parse_line(tokens)
    tokens.peek("")
    if not tokens.at_end:
        raise ShellSyntaxError(f"leftovers: {tokens.rest}")
    return cmd


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


_REDIRS = {
    "<": (RedirMode.READ, 0),
    ">": (RedirMode.WRITE, 1),
    "+": (RedirMode.APPEND, 1),
}


def _parse_redirs(cmd, tokens):
    while tokens.peek("<>"):
        kind, _ = tokens.next_token()
        file_kind, name = tokens.next_token()
        if file_kind != "a":
            raise ShellSyntaxError("missing file for redirection")
        mode, fd = _REDIRS[kind]
        cmd = RedirCmd(cmd, name, mode, fd)
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
    exec_cmd = ExecCmd()
    ret = _parse_redirs(exec_cmd, tokens)
    while not tokens.peek("|)&;"):
        kind, word = tokens.next_token()
        if kind == "":
            break
        if kind != "a":
            raise ShellSyntaxError("syntax")
        exec_cmd.argv.append(word)
        if len(exec_cmd.argv) >= MAXARGS:
            raise ShellSyntaxError("too many args")
        ret = _parse_redirs(ret, tokens)
    return ret