import logging
from pathlib import Path

import pytest

import inplacefile.cli as cli


def _listdir(dirpath: Path) -> list[str]:
    return sorted(p.name for p in dirpath.iterdir())


def test_parser_help_contains_chinese_sections() -> None:
    help_text = cli.build_parser().format_help()
    assert "子命令" in help_text
    assert "通用选项" in help_text
    assert "--version" in help_text
    assert "disemvowel" in help_text


def test_subcommand_help_contains_examples(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["disemvowel", "--help"])

    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "示例:" in out
    assert "--dry-run" in out
    assert "--backup-suffix" in out
    assert "处理控制" in out


def test_error_message_is_chinese(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase"])

    assert exc.value.code == 2
    err = capsys.readouterr().err
    assert "错误:" in err
    assert "提示:" in err
    assert "缺少必需参数" in err


def test_backup_options_are_exclusive(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase", str(tmp_path / "a.txt"), "--backup-ext", "bak", "--backup-suffix", "~"])

    assert exc.value.code == 2
    assert "不能与" in capsys.readouterr().err


def test_disemvowel_rewrites_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "file.txt"
    target.write_text("AEIOUaeiou", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main(["disemvowel", str(target)])

    assert exc.value.code == 0
    assert target.read_text(encoding="utf-8") == ""
    assert _listdir(tmp_path) == ["file.txt"]
    out = capsys.readouterr().out
    assert "已修改" in out
    assert "汇总: 已修改=1 正常=0 待修改=0 失败=0" in out


def test_backup_suffix_keeps_original(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "notes.txt"
    target.write_text("Hello\r\nWorld\n", encoding="utf-8", newline="")

    with pytest.raises(SystemExit) as exc:
        cli.main(["disemvowel", str(target), "--backup-suffix", "~"])

    assert exc.value.code == 0
    assert _listdir(tmp_path) == ["notes.txt", "notes.txt~"]
    assert target.read_bytes() == b"Hll\r\nWrld\n"
    assert (tmp_path / "notes.txt~").read_bytes() == b"Hello\r\nWorld\n"
    assert "备份:" in capsys.readouterr().out


def test_unchanged_file_is_left_alone(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "rhythm.txt"
    target.write_text("rhythm\n", encoding="utf-8")
    ino = target.stat().st_ino

    with pytest.raises(SystemExit) as exc:
        cli.main(["disemvowel", str(target), "--backup-ext", "bak"])

    assert exc.value.code == 0
    assert _listdir(tmp_path) == ["rhythm.txt"]
    assert target.stat().st_ino == ino
    assert "正常" in capsys.readouterr().out


def test_check_mode_returns_1_when_changes_needed(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "sample.txt"
    original = "Twas brillig\n"
    target.write_text(original, encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase", str(target), "--check", "--backup-suffix", "~"])

    assert exc.value.code == 1
    assert target.read_text(encoding="utf-8") == original
    assert _listdir(tmp_path) == ["sample.txt"]
    assert "待修改" in capsys.readouterr().out


def test_missing_file_fails_with_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    missing = tmp_path / "missing.txt"
    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase", str(missing)])

    assert exc.value.code == 2
    out = capsys.readouterr().out
    assert "失败" in out
    assert "failed to canonicalize path" in out


def test_fail_fast_stops_after_first_failure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    good = tmp_path / "good.txt"
    good.write_text("abc\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase", str(tmp_path / "missing.txt"), str(good), "--fail-fast"])

    assert exc.value.code == 2
    assert good.read_text(encoding="utf-8") == "abc\n"
    assert "失败=1" in capsys.readouterr().out


def test_failures_do_not_stop_other_files(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    good = tmp_path / "good.txt"
    good.write_text("abc\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase", str(tmp_path / "missing.txt"), str(good), "-q"])

    assert exc.value.code == 2
    assert good.read_text(encoding="utf-8") == "ABC\n"
    out = capsys.readouterr().out
    assert "已修改    " not in out
    assert "汇总: 已修改=1 正常=0 待修改=0 失败=1" in out


def test_undecodable_file_is_discarded(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "latin1.txt"
    target.write_bytes(b"caf\xe9\n")

    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase", str(target)])

    assert exc.value.code == 2
    assert target.read_bytes() == b"caf\xe9\n"
    assert _listdir(tmp_path) == ["latin1.txt"]
    assert "失败" in capsys.readouterr().out


def test_encoding_option(tmp_path: Path) -> None:
    target = tmp_path / "latin1.txt"
    target.write_bytes(b"caf\xe9\n")

    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase", str(target), "--encoding", "latin-1"])

    assert exc.value.code == 0
    assert target.read_bytes() == b"CAF\xc9\n"


def test_unknown_encoding(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "a.txt"
    target.write_text("a\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase", str(target), "--encoding", "no-such-codec"])

    assert exc.value.code == 2
    assert "未知编码" in capsys.readouterr().out
    assert target.read_text(encoding="utf-8") == "a\n"


def test_verbose_logs_file_operations(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "a.txt"
    target.write_text("a\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase", str(target), "-v", "--backup-name", "a.orig"])

    assert exc.value.code == 0
    captured = capsys.readouterr()
    assert "信息" in captured.out
    assert "moved" in captured.err
    assert "saved" in captured.err


def test_quiet_lowers_log_level(tmp_path: Path) -> None:
    target = tmp_path / "a.txt"
    target.write_text("a\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main(["swapcase", str(target), "-q"])

    assert exc.value.code == 0
    assert logging.getLogger("inplacefile").level == logging.ERROR
