# gospace/modules/cli.py
"""
Command-line entry point for gospace.

  gospace [-root DIR] [-pkg PKG] [-repo URL] <command> [command args...]

root, pkg and repo fall back to GOSPACE_ROOT, GOSPACE_PKG and GOSPACE_REPO,
then to the [gospace] section of gospace.conf. The command name is matched
case-insensitively. Everything after it is handed to the command's own parser.

Usage examples:
  gospace -root ~/ws -pkg example.com/app -repo https://example.com/app.git setup
  gospace update --no-pull
  gospace zipvendor /tmp/vendor.zip
  gospace IsTidy
"""

from __future__ import annotations
import argparse
import os
import sys
from typing import List, Mapping, Optional

from rich.console import Console
from rich.markup import escape

from gospace.modules import logger as _logger
from gospace.modules.command import Command, CommandArgsError, CommandError, ArgumentParser
from gospace.modules.config import ConfigError, GospaceConfig, Common, resolve_common, config as default_config
from gospace.modules.hash import Hash
from gospace.modules.manifest import exec_command
from gospace.modules.tidy import IsTidy
from gospace.modules.vendor import FlattenVendor, UnzipVendor, ZipVendor
from gospace.modules.workspace import Setup, Update


def make_console(no_color: bool = False) -> Console:
    if no_color:
        return Console(stderr=True, color_system=None, soft_wrap=True, highlight=False)
    return Console(stderr=True, soft_wrap=True, highlight=False)


def build_commands(common: Common, settings: Optional[GospaceConfig] = None) -> List[Command]:
    return [
        Setup(common, settings),
        Update(common, settings),
        IsTidy(common, settings),
        Hash(common, settings),
        ZipVendor(common, settings),
        UnzipVendor(common, settings),
        FlattenVendor(common, settings),
    ]


def find_command(cmds: List[Command], name: str) -> Optional[Command]:
    if not name:
        return None
    for cmd in cmds:
        if name.casefold() == cmd.name.casefold():
            return cmd
    return None


def build_argparser() -> argparse.ArgumentParser:
    ap = ArgumentParser(prog="gospace", description="Manage vendored source trees in a workspace root",
                        allow_abbrev=False)
    ap.add_argument("-root", "--root", dest="root", default="", help="Root directory (default GOSPACE_ROOT)")
    ap.add_argument("-pkg", "--pkg", dest="pkg", default="", help="Package name (default GOSPACE_PKG)")
    ap.add_argument("-repo", "--repo", dest="repo", default="", help="Repository to clone (default GOSPACE_REPO)")
    ap.add_argument("--conf", help="Path to gospace.conf")
    ap.add_argument("--no-color", action="store_true", help="Disable color output")
    ap.add_argument("--quiet", action="store_true", help="Only print warnings and errors")
    ap.add_argument("command", nargs="?", default="", help="Command to run")
    ap.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for the command")
    return ap


def main(argv: Optional[List[str]] = None,
         environ: Optional[Mapping[str, str]] = None,
         file_config: Optional[GospaceConfig] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ

    try:
        opts = build_argparser().parse_args(argv)
    except CommandArgsError as e:
        make_console().print(f"invalid args: {escape(str(e))}")
        return 1

    console = make_console(opts.no_color)
    _logger.configure_console(quiet=opts.quiet, no_color=opts.no_color)

    if opts.conf:
        file_config = GospaceConfig(locations=[opts.conf])
        if file_config.loaded_from is None:
            console.print(f"config file not found: {escape(opts.conf)}")
            return 1
    settings = default_config if file_config is None else file_config

    try:
        common = resolve_common(opts.root, opts.pkg, opts.repo, environ=environ, file_config=file_config)
    except ConfigError as e:
        for msg in e.messages:
            console.print(escape(msg))
        return 1

    cmds = build_commands(common, settings)
    cmd = find_command(cmds, opts.command)
    if cmd is None:
        console.print(f"unknown command: {escape(opts.command)}")
        console.print("supported:")
        for c in cmds:
            console.print(f"    {c.name}")
        return 1

    try:
        cmd.parse(opts.args)
    except CommandArgsError as e:
        console.print(f"invalid args {escape(str(e))}")
        return 1

    try:
        exec_command(cmd)
    except (CommandError, OSError) as e:
        console.print(f"[red]{escape(cmd.name)}: {escape(str(e))}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
