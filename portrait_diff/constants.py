"""Centralized constants and configuration loader.

This module provides access to configuration values and sensible defaults
for the comparison and portrait workflows. Values are loaded from
config/config.yaml when available, otherwise defaults are used.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"

# Image file extensions accepted by the batch workflows
COMPARISON_EXTENSIONS = (".jpg", ".jpeg", ".png", ".bmp", ".gif")
PORTRAIT_EXTENSIONS = (".jpg", ".jpeg", ".png", ".bmp")


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. Uses default if None.

    Returns:
        Configuration dictionary.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    try:
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {path}: {e}")

    return {}


def _get_nested(config: Dict, *keys: str, default: Any = None) -> Any:
    """Get nested config value with default fallback."""
    value = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
        else:
            return default
        if value is None:
            return default
    return value


# ============================================================
# Similarity Constants
# ============================================================

@dataclass
class SimilarityConfig:
    """Image comparison constants."""
    # Side of the square grid both images are resampled to
    sample_size: int = 100
    # Output naming
    diff_suffix: str = "_diff.png"
    result_suffix: str = "_result.json"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "SimilarityConfig":
        """Create from config dictionary."""
        sim = _get_nested(config, "similarity") or {}

        return cls(
            sample_size=int(sim.get("sample_size", 100)),
            diff_suffix=sim.get("diff_suffix", "_diff.png"),
            result_suffix=sim.get("result_suffix", "_result.json"),
        )


# ============================================================
# Portrait Crop Constants
# ============================================================

@dataclass
class CropConfig:
    """Face-anchored crop constants."""
    target_width: int = 800
    target_height: int = 1200
    # Headroom kept above the detected face top (px)
    head_top_margin: int = 50
    jpeg_quality: int = 90
    output_suffix: str = "_processed.jpg"
    result_suffix: str = "_result.json"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CropConfig":
        """Create from config dictionary."""
        crop = _get_nested(config, "crop") or {}

        return cls(
            target_width=int(crop.get("target_width", 800)),
            target_height=int(crop.get("target_height", 1200)),
            head_top_margin=int(crop.get("head_top_margin", 50)),
            jpeg_quality=int(crop.get("jpeg_quality", 90)),
            output_suffix=crop.get("output_suffix", "_processed.jpg"),
            result_suffix=crop.get("result_suffix", "_result.json"),
        )


# ============================================================
# Detection Constants
# ============================================================

@dataclass
class DetectionConfig:
    """Face detector collaborator constants."""
    backend: str = "haar_cascade"
    scale_factor: float = 1.1
    min_neighbors: int = 5
    min_size: Tuple[int, int] = (30, 30)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DetectionConfig":
        """Create from config dictionary."""
        det = _get_nested(config, "face_detection") or {}
        min_size = det.get("min_size", [30, 30])

        return cls(
            backend=det.get("backend", "haar_cascade"),
            scale_factor=float(det.get("scale_factor", 1.1)),
            min_neighbors=int(det.get("min_neighbors", 5)),
            min_size=tuple(min_size),
        )


# ============================================================
# Directory Layout
# ============================================================

@dataclass
class PathsConfig:
    """Input/output directories for the batch workflows."""
    original_dir: Path = Path("./data/original")
    target_dir: Path = Path("./data/target")
    output_dir: Path = Path("./output")
    input_dir: Path = Path("./data/seated_photos")
    processed_dir: Path = Path("./data/processed")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "PathsConfig":
        """Create from config dictionary."""
        paths = _get_nested(config, "paths") or {}

        return cls(
            original_dir=Path(paths.get("original_dir", "./data/original")),
            target_dir=Path(paths.get("target_dir", "./data/target")),
            output_dir=Path(paths.get("output_dir", "./output")),
            input_dir=Path(paths.get("input_dir", "./data/seated_photos")),
            processed_dir=Path(paths.get("processed_dir", "./data/processed")),
        )


# ============================================================
# Global Config Instance (lazy loaded)
# ============================================================

class Config:
    """Global configuration singleton."""

    _instance: Optional["Config"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load()
        return cls._instance

    def _load(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file."""
        self._config = load_config(config_path)
        self._similarity: Optional[SimilarityConfig] = None
        self._crop: Optional[CropConfig] = None
        self._detection: Optional[DetectionConfig] = None
        self._paths: Optional[PathsConfig] = None

    def reload(self, config_path: Optional[Path] = None) -> None:
        """Reload configuration from file and reset cached sections."""
        self._load(config_path)

    @property
    def similarity(self) -> SimilarityConfig:
        """Get similarity config."""
        if self._similarity is None:
            self._similarity = SimilarityConfig.from_config(self._config)
        return self._similarity

    @property
    def crop(self) -> CropConfig:
        """Get crop config."""
        if self._crop is None:
            self._crop = CropConfig.from_config(self._config)
        return self._crop

    @property
    def detection(self) -> DetectionConfig:
        """Get detection config."""
        if self._detection is None:
            self._detection = DetectionConfig.from_config(self._config)
        return self._detection

    @property
    def paths(self) -> PathsConfig:
        """Get directory layout config."""
        if self._paths is None:
            self._paths = PathsConfig.from_config(self._config)
        return self._paths

    def get(self, *keys: str, default: Any = None) -> Any:
        """Get a config value by key path."""
        return _get_nested(self._config, *keys, default=default)


def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()


# Convenience accessors
def get_similarity_config() -> SimilarityConfig:
    """Get similarity configuration."""
    return get_config().similarity


def get_crop_config() -> CropConfig:
    """Get crop configuration."""
    return get_config().crop


def get_detection_config() -> DetectionConfig:
    """Get detection configuration."""
    return get_config().detection


def get_paths_config() -> PathsConfig:
    """Get directory layout configuration."""
    return get_config().paths
