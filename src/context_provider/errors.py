"""Exception hierarchy for context-provider."""

from pathlib import Path


class ContextProviderError(Exception):
    """Base class for all context-provider errors."""


class FatalConfigError(ContextProviderError):
    """A problem that stops a run before any results are produced."""


class WorkspaceNotFoundError(FatalConfigError):
    """The workspace root is missing or cannot be enumerated."""

    def __init__(self, workspace: Path | str, reason: str = "does not exist"):
        self.workspace = str(workspace)
        super().__init__(f"Workspace path {reason}: {self.workspace}")


class ModelLoadError(FatalConfigError):
    """The embedding model could not be initialized."""

    def __init__(self, model_name: str, cause: BaseException | None = None):
        self.model_name = model_name
        message = f"Failed to load embedding model '{model_name}'"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ConfigError(FatalConfigError):
    """The workspace configuration file is malformed."""


class RecoverableFileError(ContextProviderError):
    """A single file could not be loaded; the scan continues without it."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
