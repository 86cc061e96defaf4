# gospace/modules/config.py
"""
Configuration for gospace.

Two layers live here:
- GospaceConfig: optional INI file (gospace.conf) read with configparser.
- Common: the resolved workspace settings (root, package, repo) shared by
  every command. resolve_common() fills it from flags, then environment
  variables, then the [gospace] section of a config file passed with --conf.
"""

import configparser
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

DEFAULT_LOCATIONS = [
    "/etc/gospace/gospace.conf",
    os.path.expanduser("~/.config/gospace/gospace.conf"),
]

ENV_ROOT = "GOSPACE_ROOT"
ENV_PKG = "GOSPACE_PKG"
ENV_REPO = "GOSPACE_REPO"


class GospaceError(Exception):
    pass


class ConfigError(GospaceError):
    """Raised when required settings are missing; carries one message per field."""

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__("\n".join(self.messages))


class GospaceConfig:
    def __init__(self, locations=None):
        self.locations = DEFAULT_LOCATIONS if locations is None else locations
        self.config = configparser.ConfigParser()
        self.loaded_from = None
        self.reload()

    def reload(self):
        """(Re)load settings from the first config file that exists."""
        self.config = configparser.ConfigParser()
        self.loaded_from = None
        for path in self.locations:
            if os.path.isfile(path):
                self.config.read(path)
                self.loaded_from = path
                return

    def get(self, section, option, fallback=None):
        try:
            return self.config.get(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def getboolean(self, section, option, fallback=False):
        try:
            return self.config.getboolean(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getint(self, section, option, fallback=0):
        try:
            return self.config.getint(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback


@dataclass(frozen=True)
class Common:
    """Workspace settings shared by all commands."""

    root: str
    root_abs: str
    package: str
    repo: str

    def path(self, *parts: str) -> str:
        return os.path.join(self.root_abs, *parts)

    def repo_dir(self) -> str:
        """Directory holding the package sources: <root>/src/<package>."""
        return self.path("src", *[p for p in self.package.split("/") if p])


def resolve_common(root: Optional[str] = None,
                   package: Optional[str] = None,
                   repo: Optional[str] = None,
                   environ: Optional[Mapping[str, str]] = None,
                   file_config: Optional[GospaceConfig] = None) -> Common:
    """
    Resolve root/package/repo from explicit values, falling back to the
    GOSPACE_* environment variables. The [gospace] section of file_config is
    only consulted when a config file is given explicitly (--conf).
    Raises ConfigError listing every setting that is still empty.
    """
    environ = os.environ if environ is None else environ

    def pick(value, env_name, option):
        if value:
            return value
        if environ.get(env_name):
            return environ[env_name]
        if file_config is None:
            return ""
        return file_config.get("gospace", option, fallback="") or ""

    root = pick(root, ENV_ROOT, "root")
    package = pick(package, ENV_PKG, "pkg")
    repo = pick(repo, ENV_REPO, "repo")

    missing = []
    if not root:
        missing.append(f"root directory is missing, please specify `-root` or {ENV_ROOT} environment variable")
    if not package:
        missing.append(f"package name is missing, please specify `-pkg` or {ENV_PKG} environment variable")
    if not repo:
        missing.append(f"repo name is missing, please specify `-repo` or {ENV_REPO} environment variable")
    if missing:
        raise ConfigError(missing)

    return Common(root=root, root_abs=os.path.abspath(root), package=package, repo=repo)


# Default instance shared by other modules
config = GospaceConfig()
