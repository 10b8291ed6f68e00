from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ghpages_deploy.errors import ConfigurationError
from ghpages_deploy.lifecycle.error_policies import ErrorPolicy

CONFIG_FILENAME = "ghpages-deploy.yaml"

DEFAULT_COMMIT_MESSAGE = "Publish to gh-pages via ghpages-deploy"
DEFAULT_REMOTE_NAME = "ghpages-deploy"
DEFAULT_DEPENDENCY_DIRS = ("node_modules", "bower_components", ".venv")


class DeployConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    branch: str = "gh-pages"
    project_tmp_path: str = "tmp"
    repo_tmp_path: str = "gh-pages"
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    git_remote_name: str = DEFAULT_REMOTE_NAME
    git_remote_url: str = ""
    dist_dir: str = "dist"
    exclude: list[str] = Field(default_factory=list)
    git_user_name: str = ""
    git_user_email: str = ""
    error_policy: ErrorPolicy = ErrorPolicy.FAIL_FAST
    config_dir: Path | None = None

    def project_root(self) -> Path:
        return (self.config_dir or Path.cwd()).resolve()

    def scratch_root(self, project_root: Path) -> Path:
        return project_root / self.project_tmp_path

    def scratch_path(self, project_root: Path) -> Path:
        return self.scratch_root(project_root) / self.repo_tmp_path

    def exclude_paths(self, project_root: Path) -> list[Path]:
        """Paths that must never be copied into the scratch working copy."""
        paths = [self.scratch_root(project_root)]
        paths.extend(project_root / entry for entry in self.exclude)
        return paths

    def exclude_names(self) -> list[str]:
        """Directory names skipped at any depth, e.g. ``packages/web/node_modules``."""
        return list(DEFAULT_DEPENDENCY_DIRS)


def validate_config(config: DeployConfig) -> None:
    if not config.git_remote_url.strip():
        raise ConfigurationError(
            "gitRemoteUrl is required. Set it in "
            f"{CONFIG_FILENAME} or via GHPAGES_DEPLOY_REMOTE_URL."
        )
    if not config.branch.strip():
        raise ConfigurationError("branch must not be empty")
    if not config.git_remote_name.strip():
        raise ConfigurationError("gitRemoteName must not be empty")


def _find_config_file(start: Path | None = None) -> Path | None:
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_config(start: Path | None = None) -> DeployConfig:
    config_path = _find_config_file(start)

    if config_path is not None:
        with open(config_path) as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Cannot parse {config_path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping")
        try:
            config = DeployConfig.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}:\n{e}") from e
        config.config_dir = config_path.parent
    else:
        config = DeployConfig()
        if start is not None:
            config.config_dir = start.resolve()

    remote_url_env = os.environ.get("GHPAGES_DEPLOY_REMOTE_URL")
    if remote_url_env is not None:
        config.git_remote_url = remote_url_env

    branch_env = os.environ.get("GHPAGES_DEPLOY_BRANCH")
    if branch_env is not None:
        config.branch = branch_env

    return config
