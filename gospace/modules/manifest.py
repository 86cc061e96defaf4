# gospace/modules/manifest.py
"""
Guard for the repository manifest (go.mod).

Toolchain calls made by a command (go mod vendor, go mod tidy, ...) may
rewrite go.mod as a side effect. exec_command() snapshots the file before the
command runs and writes the snapshot back afterwards if the bytes changed.
Restoration is best effort: I/O errors while restoring are ignored.
"""

import os
from contextlib import contextmanager

from gospace.modules import logger as _logger

MANIFEST_NAME = "go.mod"

_default_log = _logger.Logger("manifest")


def manifest_path(cmd) -> str:
    return os.path.join(cmd.repo_dir(), MANIFEST_NAME)


def _read_bytes(path):
    with open(path, "rb") as fh:
        return fh.read()


def _restore(path, original, log):
    try:
        current = _read_bytes(path)
        if current == original:
            return
        with open(path, "wb") as fh:
            fh.write(original)
        log.info(f"Restored {path}")
    except OSError as e:
        log.debug(f"Could not restore {path}: {e}")


@contextmanager
def preserve_manifest(path, log=None):
    """Restore `path` to its current bytes when the block exits, if it changed."""
    log = log or _default_log
    try:
        original = _read_bytes(path)
    except OSError:
        # nothing to protect
        yield
        return

    try:
        yield
    finally:
        _restore(path, original, log)


def exec_command(cmd):
    with preserve_manifest(manifest_path(cmd), log=getattr(cmd, "log", None)):
        return cmd.exec()
