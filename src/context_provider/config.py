"""Scan, model, and workspace configuration."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

from context_provider.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".context-provider.json"
CONFIG_VERSION = "1.0.0"

DEFAULT_MODEL = "all-MiniLM-L6-v2"
DEFAULT_CACHE_DIR = Path.home() / ".context-provider" / "models"

DEFAULT_MAX_FILE_SIZE = 1024 * 1024  # 1 MiB
DEFAULT_MAX_TOKENS = 512
DEFAULT_OVERLAP = 50

# Build artifacts, version control, OS metadata
DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "node_modules/**",
    ".git/**",
    "dist/**",
    "build/**",
    "*.log",
    ".DS_Store",
    "Thumbs.db",
)

DEFAULT_INCLUDE_EXTENSIONS: tuple[str, ...] = (
    ".js", ".ts", ".jsx", ".tsx",
    ".py", ".java", ".c", ".cpp", ".h",
    ".md", ".txt", ".json", ".yaml", ".yml",
    ".html", ".css", ".scss", ".sass",
    ".go", ".rs", ".php", ".rb", ".swift",
)


def normalize_extension(extension: str) -> str:
    """Lowercase an extension and make sure it carries a leading dot."""
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = "." + extension
    return extension


@dataclass(frozen=True)
class ScanSettings:
    """Options recognized by the scanner and chunker.

    None for a sequence option means "use the documented default".
    """

    exclude_patterns: Optional[tuple[str, ...]] = None
    include_extensions: Optional[frozenset[str]] = None
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_tokens: int = DEFAULT_MAX_TOKENS
    overlap: int = DEFAULT_OVERLAP

    def __post_init__(self) -> None:
        # frozen: normalize through object.__setattr__
        if self.exclude_patterns is None:
            object.__setattr__(self, "exclude_patterns", DEFAULT_EXCLUDE_PATTERNS)
        else:
            object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))

        extensions: Iterable[str] = (
            DEFAULT_INCLUDE_EXTENSIONS
            if self.include_extensions is None
            else self.include_extensions
        )
        object.__setattr__(
            self,
            "include_extensions",
            frozenset(normalize_extension(ext) for ext in extensions),
        )

        if self.max_file_size < 0:
            raise ConfigError(f"max_file_size must be >= 0, got {self.max_file_size}")
        if self.max_tokens <= 0:
            raise ConfigError(f"max_tokens must be > 0, got {self.max_tokens}")
        if self.overlap < 0:
            raise ConfigError(f"overlap must be >= 0, got {self.overlap}")


@dataclass(frozen=True)
class ModelConfig:
    """Embedding model selection, handed to the model-loading side."""

    model: str = DEFAULT_MODEL
    cache_dir: Path = DEFAULT_CACHE_DIR
    quantized: bool = False


@dataclass(frozen=True)
class WorkspaceConfig:
    """Contents of a workspace's .context-provider.json."""

    version: str = CONFIG_VERSION
    model: ModelConfig = field(default_factory=ModelConfig)
    settings: ScanSettings = field(default_factory=ScanSettings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "model": self.model.model,
            "modelCache": str(self.model.cache_dir),
            "quantized": self.model.quantized,
            "settings": {
                "maxTokens": self.settings.max_tokens,
                "overlap": self.settings.overlap,
                "maxFileSize": self.settings.max_file_size,
                "excludePatterns": list(self.settings.exclude_patterns or ()),
                "includeExtensions": sorted(self.settings.include_extensions or ()),
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkspaceConfig":
        """Build a config from the JSON layout, filling gaps with defaults."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")

        raw_settings = data.get("settings")
        if raw_settings is None:
            raw_settings = {}
        if not isinstance(raw_settings, dict):
            raise ConfigError("'settings' must be a JSON object")

        try:
            settings = ScanSettings(
                exclude_patterns=_optional_strings(raw_settings, "excludePatterns"),
                include_extensions=_optional_strings(raw_settings, "includeExtensions"),
                max_file_size=int(raw_settings.get("maxFileSize", DEFAULT_MAX_FILE_SIZE)),
                max_tokens=int(raw_settings.get("maxTokens", DEFAULT_MAX_TOKENS)),
                overlap=int(raw_settings.get("overlap", DEFAULT_OVERLAP)),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid settings value: {exc}") from exc

        model = ModelConfig(
            model=str(data.get("model") or DEFAULT_MODEL),
            cache_dir=Path(data.get("modelCache") or DEFAULT_CACHE_DIR).expanduser(),
            quantized=bool(data.get("quantized", False)),
        )
        return cls(
            version=str(data.get("version", CONFIG_VERSION)),
            model=model,
            settings=settings,
        )

    @classmethod
    def load(cls, workspace: Path | str) -> "WorkspaceConfig":
        """Load the workspace config file, or defaults when there is none."""
        path = Path(workspace) / CONFIG_FILENAME
        if not path.is_file():
            logger.info("No workspace configuration found, using defaults")
            return cls()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read {path}: {exc}") from exc

        logger.info("Using workspace configuration %s", path)
        return cls.from_dict(data)

    def save(self, workspace: Path | str) -> Path:
        """Write this config into the workspace and return the file path."""
        path = Path(workspace) / CONFIG_FILENAME
        path.write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
        return path


def _optional_strings(data: dict[str, Any], key: str) -> Optional[tuple[str, ...]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return tuple(value)
