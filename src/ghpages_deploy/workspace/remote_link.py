from __future__ import annotations

import logging
from dataclasses import dataclass

from ghpages_deploy.workspace.vcs import VcsClient

logger = logging.getLogger(__name__)


@dataclass
class RemoteLinkResult:
    remote_name: str
    action: str  # "added", "updated", "unchanged"
    upstream_needed: bool


class RemoteLinker:
    def __init__(self, vcs: VcsClient) -> None:
        self._vcs = vcs

    def add_remote(self, name: str, url: str) -> None:
        self._vcs.add_remote(name, url)

    def set_upstream(self, branch: str, remote_name: str) -> None:
        self._vcs.set_upstream(branch, remote_name)

    def ensure_remote(self, name: str, url: str) -> str:
        existing = self._vcs.remote_url(name)
        if existing is None:
            self.add_remote(name, url)
            return "added"
        if existing != url:
            logger.info("Remote '%s' pointed at %s; updating to %s", name, existing, url)
            self._vcs.set_remote_url(name, url)
            return "updated"
        return "unchanged"

    def link(self, branch: str, remote_name: str, url: str) -> RemoteLinkResult:
        """Point ``remote_name`` at ``url`` and track ``remote_name/branch`` if it exists.

        A missing remote branch is the first-publish case: nothing is linked
        and ``upstream_needed`` tells the push to create the link itself.
        """
        action = self.ensure_remote(remote_name, url)

        if not self._vcs.remote_branch_exists(remote_name, branch):
            logger.info(
                "Remote branch '%s/%s' does not exist yet; upstream will be set on push",
                remote_name,
                branch,
            )
            return RemoteLinkResult(remote_name=remote_name, action=action, upstream_needed=True)

        self._vcs.fetch(remote_name, branch)
        self.set_upstream(branch, remote_name)
        logger.info("Branch '%s' now tracks '%s/%s'", branch, remote_name, branch)
        return RemoteLinkResult(remote_name=remote_name, action=action, upstream_needed=False)
