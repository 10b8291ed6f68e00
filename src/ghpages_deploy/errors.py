from __future__ import annotations

from ghpages_deploy.models.outcome import ErrorKind


class DeployError(Exception):
    kind: ErrorKind


class IOFailure(DeployError):
    kind = ErrorKind.IO_FAILURE


class CopyFailure(DeployError):
    kind = ErrorKind.COPY_FAILURE


class ConfigurationError(DeployError):
    kind = ErrorKind.CONFIGURATION_ERROR


class VcsCommandFailure(DeployError):
    kind = ErrorKind.VCS_COMMAND_FAILURE

    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"git command failed ({returncode}): {' '.join(command)}\n{stderr}")
