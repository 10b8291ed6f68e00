from __future__ import annotations

import logging
from enum import Enum

from ghpages_deploy.workspace.vcs import VcsClient

logger = logging.getLogger(__name__)


class BranchState(str, Enum):
    NO_BRANCH = "no_branch"
    BRANCH_EXISTS = "branch_exists"
    ORPHAN_CHECKED_OUT = "orphan_checked_out"
    CLEARED = "cleared"


class BranchResetter:
    """Replace-or-create a branch as an empty orphan in a working copy.

    ``reset()`` walks NO_BRANCH/BRANCH_EXISTS -> ORPHAN_CHECKED_OUT -> CLEARED.
    Whether the branch existed beforehand only decides if it is deleted first.
    Failures from the underlying client propagate unchanged.
    """

    def __init__(self, vcs: VcsClient) -> None:
        self._vcs = vcs
        self.state = BranchState.NO_BRANCH
        self.previously_existed = False

    def branch_exists(self, name: str) -> bool:
        return self._vcs.branch_exists(name)

    def delete_branch(self, name: str) -> None:
        self._vcs.delete_branch(name)

    def create_orphan_branch(self, name: str) -> None:
        self._vcs.checkout_orphan(name)
        self.state = BranchState.ORPHAN_CHECKED_OUT

    def clear_working_tree(self) -> list[str]:
        removed = self._vcs.remove_all()
        self.state = BranchState.CLEARED
        return removed

    def reset(self, name: str) -> BranchState:
        self.previously_existed = self.branch_exists(name)
        if self.previously_existed:
            self.state = BranchState.BRANCH_EXISTS
            logger.info("Branch '%s' already exists; replacing it", name)
            if self._vcs.current_branch() == name:
                self._vcs.detach_head()
            self.delete_branch(name)
        else:
            self.state = BranchState.NO_BRANCH

        self.create_orphan_branch(name)
        logger.info("Checked out orphan branch '%s'", name)

        removed = self.clear_working_tree()
        logger.info("Removed %d paths from '%s'", len(removed), name)
        return self.state
