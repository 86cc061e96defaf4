# gospace/modules/command.py
"""
Base class shared by every gospace command.

A command has a name (matched case-insensitively by the CLI), an argparse
parser for its own arguments, and an exec() entry point. Toolchain calls
(git, go) go through Command.run so they are logged and fail uniformly.
"""

from __future__ import annotations
import argparse
import os
import subprocess
from typing import Dict, List, Optional

from gospace.modules import logger as _logger
from gospace.modules.config import Common, GospaceConfig, GospaceError


class CommandError(GospaceError):
    pass


class CommandArgsError(CommandError):
    pass


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that raises CommandArgsError instead of exiting."""

    def error(self, message):
        raise CommandArgsError(message)


class Command:
    name = ""
    help = ""

    def __init__(self, common: Common, settings: Optional[GospaceConfig] = None):
        self.common = common
        self.args = argparse.Namespace()
        self.log = _logger.Logger(self.name or "gospace", settings=settings)

    def add_arguments(self, parser: argparse.ArgumentParser):
        pass

    def build_parser(self) -> ArgumentParser:
        parser = ArgumentParser(prog=f"gospace {self.name}", description=self.help, allow_abbrev=False)
        self.add_arguments(parser)
        return parser

    def parse(self, args: List[str]):
        self.args = self.build_parser().parse_args(args)

    def exec(self):
        raise NotImplementedError

    def repo_dir(self) -> str:
        return self.common.repo_dir()

    def path(self, *parts: str) -> str:
        return self.common.path(*parts)

    def vendor_dir(self) -> str:
        return os.path.join(self.repo_dir(), "vendor")

    def run(self, cmd: List[str], cwd: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> str:
        self.log.debug(f"Running: {' '.join(cmd)} (cwd={cwd})")
        run_env = None
        if env:
            run_env = os.environ.copy()
            run_env.update(env)
        try:
            res = subprocess.run(cmd, cwd=cwd, env=run_env,
                                 stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
        except OSError as e:
            raise CommandError(f"Could not run {cmd[0]}: {e}") from e
        if res.returncode != 0:
            raise CommandError(f"Command failed: {' '.join(cmd)}\nstdout: {res.stdout}\nstderr: {res.stderr}")
        return res.stdout.strip()

    def go(self, *args: str) -> str:
        """Run a go subcommand inside the repository directory."""
        return self.run(["go", *args], cwd=self.repo_dir(), env={"GO111MODULE": "on"})

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"
