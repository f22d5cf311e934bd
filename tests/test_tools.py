import io
import sys

import pytest

from rvsix.mkfs import DIRSIZ
from rvsix.tools import Counts, cat_main, count, echo_main, fmtname, ls_main, wc_main


def fake_stdin(monkeypatch, data):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))


def test_count_simple():
    assert count(b"hello world\n") == Counts(lines=1, words=2, chars=12)


def test_count_invariants():
    data = b"  one\ttwo\r\nthree\v four\n\nfive"
    result = count(data)
    assert result.chars == len(data)
    assert result.lines == data.count(b"\n")
    assert result.words == len(data.split())


def test_count_nul_separates_words():
    assert count(b"a\0b").words == 2


def test_count_empty():
    assert count(b"") == Counts()


def test_wc_file(tmp_path, capsys):
    path = tmp_path / "f.txt"
    path.write_bytes(b"hello world\n")
    assert wc_main([str(path)]) == 0
    assert capsys.readouterr().out == f"1 2 12 {path}\n"


def test_wc_stdin(monkeypatch, capsys):
    fake_stdin(monkeypatch, b"a b\nc\n")
    assert wc_main([]) == 0
    assert capsys.readouterr().out == "2 3 6 \n"


def test_wc_missing(tmp_path, capsys):
    missing = tmp_path / "nope"
    assert wc_main([str(missing)]) == 1
    assert capsys.readouterr().out == f"wc: cannot open {missing}\n"


def test_echo(capsys):
    assert echo_main(["hello", "there"]) == 0
    assert capsys.readouterr().out == "hello there\n"


def test_echo_no_args(capsys):
    assert echo_main([]) == 0
    assert capsys.readouterr().out == ""


def test_cat_files(tmp_path, capsys):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_bytes(b"first\n" * 200)
    b.write_bytes(b"second\n")
    assert cat_main([str(a), str(b)]) == 0
    assert capsys.readouterr().out == "first\n" * 200 + "second\n"


def test_cat_stdin(monkeypatch, capsys):
    fake_stdin(monkeypatch, b"piped\n")
    assert cat_main([]) == 0
    assert capsys.readouterr().out == "piped\n"


def test_cat_missing(tmp_path, capsys):
    missing = tmp_path / "nope"
    assert cat_main([str(missing)]) == 1
    assert capsys.readouterr().err == f"cat: cannot open {missing}\n"


def test_fmtname_pads():
    name = fmtname("a/b/cat")
    assert name.rstrip() == "cat"
    assert len(name) == DIRSIZ


def test_fmtname_long_name_unchanged():
    assert fmtname("dir/12345678901234567") == "12345678901234567"


def test_ls_file(tmp_path, capsys):
    path = tmp_path / "x"
    path.write_bytes(b"abc")
    assert ls_main([str(path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith(fmtname(str(path)) + " 2 ")
    assert out.endswith(" 3\n")


def test_ls_directory(tmp_path, capsys):
    (tmp_path / "x").write_bytes(b"abcd")
    (tmp_path / "sub").mkdir()
    assert ls_main([str(tmp_path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 4
    assert lines[0].startswith(fmtname(".") + " 1 ")
    assert lines[1].startswith(fmtname("..") + " 1 ")
    by_name = {line[:DIRSIZ].rstrip(): line for line in lines}
    assert by_name["sub"].startswith(fmtname("sub") + " 1 ")
    assert by_name["x"].startswith(fmtname("x") + " 2 ")
    assert by_name["x"].endswith(" 4")


def test_ls_missing(tmp_path, capsys):
    missing = tmp_path / "nope"
    assert ls_main([str(missing)]) == 0
    assert capsys.readouterr().err == f"ls: cannot open {missing}\n"