"""主程序入口：向本机 Opiumware 投递脚本的命令行工具。

本模块承担以下职责：
1. 提供 ``execute`` / ``attach`` / ``check`` / ``ports`` / ``detach`` 子命令，供脚本化调用。
2. 在未指定子命令时组织交互式菜单，依序完成附加、端口检查与脚本投递。
3. 把投递结果渲染为单行状态文本，并以退出码反映成功或失败。
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from potassium import __version__, api
from potassium.config.defaults import ALL_PORTS_SELECTOR, CANDIDATE_PORTS
from potassium.logging_utils import setup_logging
from potassium.script_files import load_script, save_script

if os.name == "nt":
    os.system("")

BLUE = "\033[34m"
GREEN = "\033[32m"
RED = "\033[31m"
YELLOW = "\033[33m"
RESET = "\033[0m"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


@dataclass(frozen=True)
class MenuAction:
    """定义交互式菜单选项。Define an interactive menu option for the CLI."""

    key: str
    description: str
    handler: Callable[[], None]


def _colorize(message: str, color: str) -> str:
    """用 ANSI 颜色编码包装文本。Return ``message`` wrapped in ANSI color codes."""

    return f"{color}{message}{RESET}"


def logwrite(message: str, *, color: str | None = None) -> None:
    """打印信息（可选颜色）。Print ``message`` (optionally colorized)."""

    print(_colorize(message, color) if color else message)


def log_info(message: str) -> None:
    logwrite(message, color=BLUE)


def log_success(message: str) -> None:
    logwrite(message, color=GREEN)


def log_warning(message: str) -> None:
    logwrite(message, color=YELLOW)


def log_error(message: str) -> None:
    logwrite(message, color=RED)


def _report(status: str, ok: bool) -> int:
    if ok:
        log_success(status)
        return EXIT_OK
    log_error(status)
    return EXIT_FAILED


def _read_payload(args: argparse.Namespace) -> str | None:
    if args.file:
        return load_script(args.file).content
    if args.code is not None:
        return args.code
    if not sys.stdin.isatty():
        return sys.stdin.read()
    return None


# ---------------------------------------------------------------------------
# 子命令
# ---------------------------------------------------------------------------


def cmd_execute(args: argparse.Namespace) -> int:
    payload = _read_payload(args)
    if payload is None:
        log_error("No script given: use --file, --code or pipe the script on stdin.")
        return EXIT_USAGE
    outcome = api.deliver_outcome(payload, args.port)
    return _report(outcome.render(), outcome.ok)


def cmd_attach(args: argparse.Namespace) -> int:
    if args.port is not None:
        result = api.attach_to_port_outcome(args.port)
    else:
        result = api.attach_outcome()
    return _report(result.render(), result.ok)


def cmd_check(args: argparse.Namespace) -> int:
    reachable = api.check(args.port)
    if reachable:
        log_success(f"Port {args.port} is reachable")
        return EXIT_OK
    log_warning(f"Port {args.port} is not reachable")
    return EXIT_FAILED


def cmd_ports(args: argparse.Namespace) -> int:
    status = api.port_status()
    for port, reachable in status.items():
        marker = _colorize("●", GREEN if reachable else RED)
        print(f"{marker} {port}")
    return EXIT_OK if any(status.values()) else EXIT_FAILED


def cmd_detach(args: argparse.Namespace) -> int:
    log_info(api.detach(args.port))
    return EXIT_OK


def cmd_save(args: argparse.Namespace) -> int:
    payload = _read_payload(args)
    if payload is None:
        log_error("Nothing to save: use --code or pipe the script on stdin.")
        return EXIT_USAGE
    path = save_script(args.output, payload)
    log_success(f"Saved script to {path}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# 交互式菜单
# ---------------------------------------------------------------------------


def _prompt_port(allow_all: bool) -> str:
    hint = f"{CANDIDATE_PORTS[0]}-{CANDIDATE_PORTS[-1]}"
    if allow_all:
        hint += f" / {ALL_PORTS_SELECTOR}"
    value = input(f"端口 ({hint}): ").strip()
    return value or (ALL_PORTS_SELECTOR if allow_all else str(CANDIDATE_PORTS[0]))


def menu_attach() -> None:
    result = api.attach_outcome()
    _report(result.render(), result.ok)


def menu_ports() -> None:
    cmd_ports(argparse.Namespace())


def menu_execute_file() -> None:
    path = input("脚本路径: ").strip()
    if not path:
        log_warning("未输入路径。")
        return
    try:
        script = load_script(Path(path).expanduser())
    except (FileNotFoundError, UnicodeDecodeError) as exc:
        log_error(f"读取脚本失败：{exc}")
        return
    try:
        outcome = api.deliver_outcome(script.content, _prompt_port(allow_all=True))
    except ValueError as exc:
        log_error(str(exc))
        return
    log_info(f"→ {script.name}")
    _report(outcome.render(), outcome.ok)


def menu_execute_inline() -> None:
    code = input("脚本内容: ")
    if not code:
        log_warning("脚本为空。")
        return
    try:
        outcome = api.deliver_outcome(code, _prompt_port(allow_all=True))
    except ValueError as exc:
        log_error(str(exc))
        return
    _report(outcome.render(), outcome.ok)


def menu_detach() -> None:
    try:
        log_info(api.detach(_prompt_port(allow_all=False)))
    except ValueError as exc:
        log_error(str(exc))


MENU_ACTIONS: tuple[MenuAction, ...] = (
    MenuAction("1", "附加到 Opiumware（扫描全部端口）", menu_attach),
    MenuAction("2", "查看端口状态", menu_ports),
    MenuAction("3", "执行脚本文件", menu_execute_file),
    MenuAction("4", "执行单行脚本", menu_execute_inline),
    MenuAction("5", "断开端口", menu_detach),
)

EXIT_CHOICES = {"q", "quit", "exit"}


def _print_main_menu() -> None:
    """Render the interactive menu in a consistent order."""

    print(f"\n=== Potassium {__version__} ===")
    for action in MENU_ACTIONS:
        print(f"{action.key}) {action.description}")
    print("q) 退出")


def run_menu() -> int:
    while True:
        _print_main_menu()
        try:
            choice = input("请选择: ").strip().lower()
        except EOFError:
            break
        if choice in EXIT_CHOICES:
            break
        for action in MENU_ACTIONS:
            if choice == action.key:
                action.handler()
                break
        else:
            print("无效选项，请重试。")
    return EXIT_OK


# ---------------------------------------------------------------------------
# 入口
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="向本机 Opiumware 投递脚本")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="输出调试日志")
    parser.add_argument("--log-dir", help="同时把日志写入该目录")

    sub = parser.add_subparsers(dest="command")

    execute = sub.add_parser("execute", help="投递脚本")
    execute.add_argument(
        "--port",
        default=ALL_PORTS_SELECTOR,
        help=f"目标端口或 {ALL_PORTS_SELECTOR}（默认 {ALL_PORTS_SELECTOR}）",
    )
    source = execute.add_mutually_exclusive_group()
    source.add_argument("--file", help="脚本文件路径（.lua / .txt）")
    source.add_argument("--code", help="直接给出脚本内容")
    execute.set_defaults(handler=cmd_execute)

    attach = sub.add_parser("attach", help="查找第一个可用端口")
    attach.add_argument("--port", help="只探测指定端口")
    attach.set_defaults(handler=cmd_attach)

    check = sub.add_parser("check", help="检查单个端口是否可达")
    check.add_argument("port")
    check.set_defaults(handler=cmd_check)

    ports = sub.add_parser("ports", help="列出全部候选端口的状态")
    ports.set_defaults(handler=cmd_ports)

    detach = sub.add_parser("detach", help="断开端口")
    detach.add_argument("port")
    detach.set_defaults(handler=cmd_detach)

    save = sub.add_parser("save", help="把脚本保存到文件")
    save.add_argument("output")
    save.add_argument("--code", help="脚本内容（默认读取标准输入）")
    save.set_defaults(handler=cmd_save, file=None)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_dir, level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command is None:
        return run_menu()

    try:
        return args.handler(args)
    except FileNotFoundError as exc:
        log_error(str(exc))
        return EXIT_FAILED
    except ValueError as exc:
        log_error(str(exc))
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
