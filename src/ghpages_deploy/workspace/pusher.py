from __future__ import annotations

import logging

from ghpages_deploy.workspace.vcs import VcsClient

logger = logging.getLogger(__name__)


class Pusher:
    def __init__(self, vcs: VcsClient) -> None:
        self._vcs = vcs

    def push(self, branch: str, remote_name: str, create_upstream: bool = False) -> None:
        """Force-push ``branch``; with ``create_upstream`` the push also records tracking."""
        logger.info(
            "Pushing '%s' to '%s'%s",
            branch,
            remote_name,
            " (setting upstream)" if create_upstream else "",
        )
        self._vcs.push(branch, remote_name, set_upstream=create_upstream)
