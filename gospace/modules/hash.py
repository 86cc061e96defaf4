# gospace/modules/hash.py

import hashlib
import os

from gospace.modules.command import Command, CommandError


def sha256sum(paths):
    """
    SHA256 over `paths`. Each file contributes its base name and byte length
    before its contents, so moving bytes from one file to the next changes
    the digest. Missing files are hashed as empty.
    """
    sha256 = hashlib.sha256()
    for file_path in paths:
        data = b""
        if os.path.exists(file_path):
            with open(file_path, "rb") as f:
                data = f.read()
        sha256.update(f"{os.path.basename(file_path)}\0{len(data)}\0".encode())
        sha256.update(data)
    return sha256.hexdigest()


class Hash(Command):
    """
    Prints a hash of go.mod and go.sum, usable as a cache key for the vendor
    archive.
    """

    name = "hash"
    help = "Print the sha256 of go.mod and go.sum"

    def exec(self):
        gomod = os.path.join(self.repo_dir(), "go.mod")
        gosum = os.path.join(self.repo_dir(), "go.sum")
        if not os.path.isfile(gomod):
            raise CommandError(f"go.mod not found: {gomod}")
        digest = sha256sum([gomod, gosum])
        print(digest)
        return digest
