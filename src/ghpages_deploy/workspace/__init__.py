from ghpages_deploy.workspace.branch_reset import BranchResetter, BranchState
from ghpages_deploy.workspace.publisher import ArtifactPublisher, collect_output_files, copy_artifacts
from ghpages_deploy.workspace.pusher import Pusher
from ghpages_deploy.workspace.remote_link import RemoteLinker, RemoteLinkResult
from ghpages_deploy.workspace.stager import clone_project_tree, ensure_scratch_space, remove_scratch_space
from ghpages_deploy.workspace.vcs import GitClient, VcsClient

__all__ = [
    "ArtifactPublisher",
    "BranchResetter",
    "BranchState",
    "GitClient",
    "Pusher",
    "RemoteLinkResult",
    "RemoteLinker",
    "VcsClient",
    "clone_project_tree",
    "collect_output_files",
    "copy_artifacts",
    "ensure_scratch_space",
    "remove_scratch_space",
]
