"""Load and validate the default color palettes.

Palettes live in ``palettes.yaml`` alongside this module.  The file is
loaded once and cached; ``reload_palette_config()`` re-reads it.

Usage::

    from src.state.palettes import default_palette

    default_palette()              # ("blue", "yellow", "red", "white", "green")
    default_palette("monochrome")  # ("black", "white")
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger("contrast_grid.state.palettes")

_CONFIG_PATH = Path(__file__).parent / "palettes.yaml"


@dataclass
class PaletteConfig:
    """Validated in-memory form of palettes.yaml.

    Attributes:
        version:  Config schema version string.
        default:  Name of the palette used when none is requested.
        palettes: Palette name → ordered color texts.
    """

    version: str
    default: str
    palettes: dict[str, tuple[str, ...]]
    _raw: dict = field(default_factory=dict, repr=False)

    def palette(self, name: str | None = None) -> tuple[str, ...]:
        """Return the named palette, or the default one.

        Unknown names fall back to the default palette with a warning.
        """
        if name is None:
            return self.palettes[self.default]
        if name not in self.palettes:
            logger.warning("Unknown palette %r, using %r", name, self.default)
            return self.palettes[self.default]
        return self.palettes[name]


class PaletteConfigError(ValueError):
    """Raised when palettes.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Palette config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise PaletteConfigError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> PaletteConfig:
    """Validate the raw YAML dict and construct a PaletteConfig.

    Raises:
        PaletteConfigError: If palettes are missing, empty, or malformed.
    """
    errors: list[str] = []

    version = str(raw.get("version", "1.0"))

    palettes_raw = raw.get("palettes") or {}
    if not isinstance(palettes_raw, dict) or not palettes_raw:
        errors.append("'palettes' section is missing or empty")
        palettes_raw = {}

    palettes: dict[str, tuple[str, ...]] = {}
    for name, colors in palettes_raw.items():
        if not isinstance(colors, list) or not colors:
            errors.append(f"palettes.{name} must be a non-empty list of colors")
            continue
        if not all(isinstance(c, str) and c.strip() for c in colors):
            errors.append(f"palettes.{name} must contain only non-blank strings")
            continue
        palettes[str(name)] = tuple(c.strip() for c in colors)

    default = raw.get("default")
    if default is None and palettes:
        default = next(iter(palettes))
    if palettes and default not in palettes:
        errors.append(f"default palette {default!r} is not defined under 'palettes'")

    if errors:
        raise PaletteConfigError(
            f"palettes.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return PaletteConfig(version=version, default=str(default), palettes=palettes, _raw=raw)


def load_palette_config(path: Path | None = None) -> PaletteConfig:
    """Load and validate palettes from disk (bundled palettes.yaml by default)."""
    target = path or _CONFIG_PATH
    config = _validate_and_build(_load_yaml(target))
    logger.info(
        "Loaded %d palette(s) v%s from %s", len(config.palettes), config.version, target
    )
    return config


# ---------------------------------------------------------------------------
# Global singleton
# ---------------------------------------------------------------------------

_config: PaletteConfig | None = None
_config_lock = threading.Lock()


def get_palette_config() -> PaletteConfig:
    """Return the global PaletteConfig, loading it on first call.  Thread-safe."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_palette_config()
    return _config


def reload_palette_config(path: Path | None = None) -> PaletteConfig:
    """Re-read palettes and replace the singleton; the old one stays on failure."""
    global _config
    new_config = load_palette_config(path)
    with _config_lock:
        _config = new_config
    return new_config


def default_palette(name: str | None = None) -> tuple[str, ...]:
    return get_palette_config().palette(name)
