"""CLI entrypoint for inplacefile.

Subcommands: disemvowel, swapcase
"""

from __future__ import annotations

import argparse
import codecs
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

from . import __version__
from .errors import InPlaceError
from .logging_setup import configure as configure_logging
from .paths import AppendSuffix, BackupSpec, ExplicitPath, ReplaceExtension, ReplaceFileName
from .session import EditRequest
from .transforms import TRANSFORMS, transform_lines

ENCODING_DEFAULT = "utf-8"


@dataclass
class FileResult:
    path: Path
    status: str  # OK / CHANGED / WOULD / FAILED
    message: str = ""
    backup_path: Path | None = None


@dataclass(frozen=True)
class EditOptions:
    backup: BackupSpec | None = None
    follow_symlinks: bool = True
    encoding: str = ENCODING_DEFAULT
    check: bool = False

    def __post_init__(self) -> None:
        codecs.lookup(self.encoding)

    def request_for(self, path: Path) -> EditRequest:
        return EditRequest(
            path,
            backup=self.backup,
            follow_symlinks=self.follow_symlinks,
            encoding=self.encoding,
        )


class InPlaceArgumentParser(argparse.ArgumentParser):
    """中文化 argparse 错误输出。"""

    @staticmethod
    def _translate_error(message: str) -> str:
        required = re.match(r"the following arguments are required: (.+)", message)
        if required:
            return f"缺少必需参数: {required.group(1)}"

        unrecognized = re.match(r"unrecognized arguments: (.+)", message)
        if unrecognized:
            return f"无法识别的参数: {unrecognized.group(1)}"

        invalid_choice = re.match(r"argument (.+): invalid choice: (.+) \(choose from (.+)\)", message)
        if invalid_choice:
            return (
                f"参数 {invalid_choice.group(1)} 的取值无效: {invalid_choice.group(2)}，"
                f"可选值为 {invalid_choice.group(3)}"
            )

        not_allowed = re.match(r"argument (.+): not allowed with argument (.+)", message)
        if not_allowed:
            return f"参数 {not_allowed.group(1)} 不能与 {not_allowed.group(2)} 同时使用"

        return message

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        zh_message = self._translate_error(message)
        self.exit(
            2,
            f"错误: {zh_message}\n提示: 使用 `inplacefile <子命令> --help` 查看完整帮助。\n",
        )


def _add_edit_arguments(cmd: argparse.ArgumentParser) -> None:
    cmd._positionals.title = "位置参数"
    cmd._optionals.title = "通用选项"

    cmd.add_argument("files", type=Path, nargs="+", metavar="FILE", help="要原地编辑的文件")

    control = cmd.add_argument_group("处理控制")
    control.add_argument("--check", action="store_true", help="只检查，不写回；若有文件需要修改则退出码为 1")
    control.add_argument("--dry-run", dest="check", action="store_true", help="等同于 --check")
    control.add_argument("--fail-fast", action="store_true", help="遇到第一个失败后立即退出")
    control.add_argument(
        "--no-follow-symlinks",
        action="store_true",
        help="不解析符号链接：直接替换链接本身，而不是它指向的文件",
    )

    backup_group = cmd.add_argument_group("备份（最多选择一种）")
    backup = backup_group.add_mutually_exclusive_group()
    backup.add_argument("--backup-path", metavar="PATH", help="把原文件移动到该路径")
    backup.add_argument("--backup-name", metavar="NAME", help="同目录下使用新的文件名")
    backup.add_argument("--backup-ext", metavar="EXT", help="替换扩展名，例如 bak")
    backup.add_argument("--backup-suffix", metavar="SUFFIX", help="在文件名后追加后缀，例如 ~")

    io_group = cmd.add_argument_group("输入输出")
    io_group.add_argument("--encoding", default=ENCODING_DEFAULT, help="读取/写入编码（默认 utf-8）")

    output = cmd.add_argument_group("输出控制")
    out_mode = output.add_mutually_exclusive_group()
    out_mode.add_argument("-q", "--quiet", action="store_true", help="简洁输出：仅显示失败项和汇总")
    out_mode.add_argument("-v", "--verbose", action="store_true", help="详细输出：显示每一步文件操作")


def build_parser() -> argparse.ArgumentParser:
    p = InPlaceArgumentParser(
        prog="inplacefile",
        description="原地编辑文本文件（先写临时文件，再原子替换，可选保留备份）",
    )
    p._positionals.title = "位置参数"
    p._optionals.title = "通用选项"
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        title="子命令",
        description="可用子命令",
        metavar="CMD",
    )

    dis = sub.add_parser(
        "disemvowel",
        help="删除每一行中的元音字母",
        description="逐行删除 AEIOUaeiou；默认原地写回，支持 --check 只检查。",
        epilog=(
            "示例:\n"
            "  inplacefile disemvowel notes.txt\n"
            "  inplacefile disemvowel notes.txt --backup-suffix \"~\"\n"
            "  inplacefile disemvowel a.txt b.txt --check"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    _add_edit_arguments(dis)

    swap = sub.add_parser(
        "swapcase",
        help="交换每一行的大小写",
        description="逐行交换字母大小写；默认原地写回，支持 --check 只检查。",
        epilog=(
            "示例:\n"
            "  inplacefile swapcase notes.txt\n"
            "  inplacefile swapcase notes.txt --backup-ext bak"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    _add_edit_arguments(swap)

    return p


def _backup_spec(args: argparse.Namespace) -> BackupSpec | None:
    if args.backup_path is not None:
        return ExplicitPath(args.backup_path)
    if args.backup_name is not None:
        return ReplaceFileName(args.backup_name)
    if args.backup_ext is not None:
        return ReplaceExtension(args.backup_ext)
    if args.backup_suffix is not None:
        return AppendSuffix(args.backup_suffix)
    return None


def edit_file(path: Path, cmd: str, options: EditOptions) -> FileResult:
    transform = TRANSFORMS[cmd]
    with options.request_for(path).open() as session:
        changed = transform_lines(session.reader, session.writer, transform)
        if not changed:
            session.discard()
            return FileResult(path, "OK")
        if options.check:
            session.discard()
            return FileResult(path, "WOULD")
        session.save()
        return FileResult(path, "CHANGED", backup_path=session.backup_path)


def run_edit(args: argparse.Namespace) -> int:
    configure_logging(verbose=args.verbose, quiet=args.quiet)
    try:
        options = EditOptions(
            backup=_backup_spec(args),
            follow_symlinks=not args.no_follow_symlinks,
            encoding=args.encoding,
            check=args.check,
        )
    except LookupError:
        print(f"失败      未知编码: {args.encoding}")
        return 2

    if args.verbose:
        print(
            f"信息      cmd={args.cmd} files={len(args.files)} encoding={options.encoding} "
            f"backup={options.backup} follow_symlinks={options.follow_symlinks}"
        )

    results: list[FileResult] = []
    any_change_needed = False
    any_failed = False

    for path in args.files:
        try:
            r = edit_file(path, args.cmd, options)
        except InPlaceError as e:
            r = FileResult(path, "FAILED", e.format_user_message())
        except (OSError, UnicodeError) as e:
            r = FileResult(path, "FAILED", str(e))
        results.append(r)
        if r.status in ("CHANGED", "WOULD"):
            any_change_needed = True
        if r.status == "FAILED":
            any_failed = True
            if args.fail_fast:
                break

    for r in results:
        if args.quiet and r.status != "FAILED":
            continue
        if r.status == "OK":
            print(f"正常      {r.path}")
        elif r.status == "CHANGED":
            extra = f"  (备份: {r.backup_path})" if r.backup_path is not None else ""
            print(f"已修改    {r.path}{extra}")
        elif r.status == "WOULD":
            print(f"待修改    {r.path}")
        else:
            print(f"失败      {r.path}  ({r.message})")

    changed = sum(1 for r in results if r.status == "CHANGED")
    ok = sum(1 for r in results if r.status == "OK")
    would = sum(1 for r in results if r.status == "WOULD")
    failed = sum(1 for r in results if r.status == "FAILED")
    print(f"汇总: 已修改={changed} 正常={ok} 待修改={would} 失败={failed}")

    if any_failed:
        return 2
    if args.check and any_change_needed:
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cmd in TRANSFORMS:
        code = run_edit(args)
    else:
        code = 2

    raise SystemExit(code)


if __name__ == "__main__":
    main()
