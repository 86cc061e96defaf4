# gospace/modules/tidy.py

import os

from gospace.modules.command import Command, CommandError


class NotTidyError(CommandError):
    pass


def _snapshot(path):
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except FileNotFoundError:
        return None


def _put_back(path, content):
    if content is None:
        if os.path.exists(path):
            os.remove(path)
        return
    with open(path, "wb") as fh:
        fh.write(content)


class IsTidy(Command):
    """
    Runs `go mod tidy` and fails when it would change go.mod or go.sum.
    go.sum is put back here; go.mod is put back by the manifest guard.
    """

    name = "istidy"
    help = "Check that go.mod and go.sum are tidy"

    def exec(self):
        gomod = os.path.join(self.repo_dir(), "go.mod")
        gosum = os.path.join(self.repo_dir(), "go.sum")
        before = {gomod: _snapshot(gomod), gosum: _snapshot(gosum)}
        if before[gomod] is None:
            raise CommandError(f"go.mod not found: {gomod}")

        try:
            self.go("mod", "tidy")
        finally:
            changed = [os.path.basename(p) for p, content in before.items() if _snapshot(p) != content]
            _put_back(gosum, before[gosum])

        if changed:
            raise NotTidyError(f"{', '.join(changed)} not tidy, run `go mod tidy`")
        self.log.success(f"{self.common.package} is tidy")
