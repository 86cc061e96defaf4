# gospace/modules/vendor.py
"""
vendor.py - vendor tree handling.

- flattenvendor: moves <repo>/vendor/* into <root>/src so dependencies resolve
  from the workspace root.
- zipvendor: packs the vendor tree into a zip archive (deterministic: sorted
  entries, fixed timestamps) so it can be cached and restored later.
- unzipvendor: unpacks such an archive straight into <root>/src.

Archive layout: entries are paths relative to the vendor directory, e.g.
  github.com/foo/bar/bar.go
  modules.txt
"""

from __future__ import annotations
import os
import shutil
import tempfile
import zipfile
from typing import List

from gospace.modules.command import Command, CommandError

VENDOR_INDEX = "modules.txt"
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def _is_within(path: str, directory: str) -> bool:
    path = os.path.abspath(path)
    directory = os.path.abspath(directory)
    return path == directory or path.startswith(directory + os.sep)


def list_vendor_files(vendor_dir: str) -> List[str]:
    """Return file paths under vendor_dir, relative and with '/' separators, sorted."""
    files = []
    for root, dirs, names in os.walk(vendor_dir):
        dirs.sort()
        for fn in names:
            rel = os.path.relpath(os.path.join(root, fn), vendor_dir)
            files.append(rel.replace(os.sep, "/"))
    return sorted(files)


def vendor_modules(cmd: Command):
    cmd.log.info(f"Vendoring modules in {cmd.repo_dir()}")
    cmd.go("mod", "vendor")


def _conflict(dest: str, src_dir: str) -> bool:
    """True when dest is a directory or one of its parents under src_dir is a file."""
    if os.path.isdir(dest):
        return True
    parent = os.path.dirname(dest)
    while _is_within(parent, src_dir) and parent != os.path.abspath(src_dir):
        if os.path.exists(parent) and not os.path.isdir(parent):
            return True
        parent = os.path.dirname(parent)
    return False


def flatten_vendor(cmd: Command) -> int:
    """
    Move every file from the vendor directory to <root>/src, replacing existing
    files, then remove the vendor directory. Returns the number of files moved.
    Nothing is moved when a destination is blocked by a directory or a file.
    """
    vendor_dir = cmd.vendor_dir()
    if not os.path.isdir(vendor_dir):
        raise CommandError(f"Vendor directory not found: {vendor_dir}")

    src_dir = cmd.path("src")
    repo_dir = cmd.repo_dir()
    plan = []
    for rel in list_vendor_files(vendor_dir):
        if rel == VENDOR_INDEX:
            continue
        dest = os.path.join(src_dir, *rel.split("/"))
        if _is_within(dest, repo_dir):
            cmd.log.warning(f"Skipping {rel}: would overwrite the package itself")
            continue
        if _conflict(dest, src_dir):
            raise CommandError(f"Cannot flatten {rel}: {dest} is blocked by an existing directory or file")
        plan.append((os.path.join(vendor_dir, *rel.split("/")), dest))

    for source, dest in plan:
        os.makedirs(os.path.dirname(dest), exist_ok=True)
        os.replace(source, dest)

    shutil.rmtree(vendor_dir)
    cmd.log.info(f"Flattened {len(plan)} files into {src_dir}")
    return len(plan)


class FlattenVendor(Command):
    name = "flattenvendor"
    help = "Move the vendor directory contents into <root>/src"

    def exec(self):
        flatten_vendor(self)


class ZipVendor(Command):
    name = "zipvendor"
    help = "Pack the vendor directory into a zip archive"

    def add_arguments(self, parser):
        parser.add_argument("dest", help="Path of the zip archive to write")
        parser.add_argument("--skip-vendor", action="store_true",
                            help="Use the existing vendor directory instead of running go mod vendor")

    def exec(self):
        vendor_dir = self.vendor_dir()
        existed = os.path.isdir(vendor_dir)
        if not self.args.skip_vendor:
            vendor_modules(self)
        if not os.path.isdir(vendor_dir):
            raise CommandError(f"Vendor directory not found: {vendor_dir}")

        dest = os.path.abspath(self.args.dest)
        if os.path.isdir(dest):
            raise CommandError(f"Destination is a directory: {dest}")
        outdir = os.path.dirname(dest)
        os.makedirs(outdir, exist_ok=True)

        files = list_vendor_files(vendor_dir)
        tmpfd, tmpname = tempfile.mkstemp(suffix=".zip", dir=outdir)
        os.close(tmpfd)
        try:
            with zipfile.ZipFile(tmpname, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for rel in files:
                    info = zipfile.ZipInfo(rel, date_time=ZIP_EPOCH)
                    info.compress_type = zipfile.ZIP_DEFLATED
                    info.external_attr = 0o644 << 16
                    with open(os.path.join(vendor_dir, *rel.split("/")), "rb") as fh:
                        zf.writestr(info, fh.read())
            os.replace(tmpname, dest)
        finally:
            if os.path.exists(tmpname):
                os.remove(tmpname)

        if not existed:
            shutil.rmtree(vendor_dir)
        self.log.info(f"Vendor archive written: {dest} ({len(files)} files)")
        return dest


class UnzipVendor(Command):
    name = "unzipvendor"
    help = "Unpack a vendor zip archive into <root>/src"

    def add_arguments(self, parser):
        parser.add_argument("src", help="Path of the zip archive to read")

    def exec(self):
        src = os.path.abspath(self.args.src)
        if not os.path.isfile(src):
            raise CommandError(f"Archive not found: {src}")

        dest_dir = self.path("src")
        try:
            with zipfile.ZipFile(src, "r") as zf:
                members = [m for m in zf.infolist() if not m.is_dir() and m.filename != VENDOR_INDEX]
                for m in members:
                    target = os.path.join(dest_dir, *m.filename.split("/"))
                    if m.filename.startswith("/") or os.path.isabs(m.filename) or not _is_within(target, dest_dir):
                        raise CommandError(f"Unsafe path in archive: {m.filename}")

                os.makedirs(dest_dir, exist_ok=True)
                for m in members:
                    zf.extract(m, path=dest_dir)
        except zipfile.BadZipFile as e:
            raise CommandError(f"Invalid archive {src}: {e}") from e

        self.log.info(f"Unpacked {len(members)} files from {src} into {dest_dir}")
        return dest_dir
