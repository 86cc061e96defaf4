# gospace/modules/workspace.py
"""
workspace.py - create and refresh the package checkout under <root>/src.

- setup: clones the repository into <root>/src/<package> (or reuses an
  existing clone), vendors its modules and flattens the vendor tree.
- update: pulls the existing clone, then vendors and flattens again.
"""

import os

from gospace.modules.command import Command, CommandError
from gospace.modules.vendor import flatten_vendor, vendor_modules


class Setup(Command):
    name = "setup"
    help = "Clone the repository into the workspace and flatten its vendor tree"

    def add_arguments(self, parser):
        parser.add_argument("--branch", help="Branch to clone")

    def exec(self):
        repo_dir = self.repo_dir()
        os.makedirs(self.path("src"), exist_ok=True)

        if not os.path.exists(repo_dir):
            self.log.info(f"Cloning {self.common.repo} into {repo_dir}")
            os.makedirs(os.path.dirname(repo_dir), exist_ok=True)
            cmd = ["git", "clone"]
            if self.args.branch:
                cmd += ["--branch", self.args.branch]
            self.run(cmd + [self.common.repo, repo_dir])
        else:
            self.log.info(f"Using existing checkout {repo_dir}")

        vendor_modules(self)
        flatten_vendor(self)
        self.log.success(f"Workspace ready at {self.common.root_abs}")


class Update(Command):
    name = "update"
    help = "Pull the repository and refresh the flattened vendor tree"

    def add_arguments(self, parser):
        parser.add_argument("--no-pull", action="store_true",
                            help="Only re-vendor, do not pull from the remote")

    def exec(self):
        repo_dir = self.repo_dir()
        if not os.path.isdir(repo_dir):
            raise CommandError(f"Repository directory not found: {repo_dir}, run setup first.")

        if not self.args.no_pull:
            self.log.info(f"Updating {repo_dir}")
            self.run(["git", "fetch", "--all"], cwd=repo_dir)
            self.run(["git", "pull", "--ff-only"], cwd=repo_dir)

        vendor_modules(self)
        flatten_vendor(self)
        self.log.success(f"Workspace updated at {self.common.root_abs}")
