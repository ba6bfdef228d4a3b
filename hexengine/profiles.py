"""
Map generation profiles keyed by archetype name.

Profiles are loaded from profiles.yaml (the copy shipped with the package
unless another data directory is given). Built-in defaults with the same
values are used when the file is missing, so generation never depends on
the file being present.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .map import TerrainKind

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "Continental"
PACKAGE_DATA_PATH = Path(__file__).parent / "data"
PROFILES_FILE = "profiles.yaml"


class ProfileError(ValueError):
    """Raised when a generation profile has out-of-range parameters."""


@dataclass(frozen=True)
class GenerationProfile:
    """Tunable parameters for one map archetype."""
    name: str
    description: str = ""
    noise_frequency: float = 0.1
    elevation_multiplier: float = 1.0
    sea_level_adjustment: int = 0
    water_flow_intensity: float = 1.0
    river_generation_rate: float = 0.3
    terrain_bias: dict[TerrainKind, float] = field(default_factory=dict)

    def __hash__(self):
        return hash(self.name)

    def bias_for(self, kind: TerrainKind) -> float:
        return self.terrain_bias.get(kind, 1.0)

    def validate(self) -> "GenerationProfile":
        """Check parameter ranges, returning self for chaining."""
        problems = []
        if not 0 < self.noise_frequency < 1:
            problems.append(f"noise_frequency {self.noise_frequency} not in (0, 1)")
        if not 0 < self.elevation_multiplier < 5:
            problems.append(f"elevation_multiplier {self.elevation_multiplier} not in (0, 5)")
        if not 0 < self.water_flow_intensity < 5:
            problems.append(f"water_flow_intensity {self.water_flow_intensity} not in (0, 5)")
        if not 0 <= self.river_generation_rate <= 1:
            problems.append(f"river_generation_rate {self.river_generation_rate} not in [0, 1]")
        if not -20 <= self.sea_level_adjustment <= 20:
            problems.append(f"sea_level_adjustment {self.sea_level_adjustment} not in [-20, 20]")
        for kind, bias in self.terrain_bias.items():
            if bias <= 0:
                problems.append(f"terrain bias for {kind.value} must be positive, got {bias}")
        if problems:
            raise ProfileError(f"Invalid profile '{self.name}': " + "; ".join(problems))
        return self


def _bias(**values: float) -> dict[TerrainKind, float]:
    return {TerrainKind[name.upper()]: value for name, value in values.items()}


def default_profiles() -> dict[str, GenerationProfile]:
    """Built-in archetypes, used when no profiles file is available."""
    profiles = [
        GenerationProfile(
            name="Continental",
            description="Large landmasses with varied terrain, rivers, and moderate water coverage",
            noise_frequency=0.08, elevation_multiplier=1.0, sea_level_adjustment=0,
            water_flow_intensity=1.0, river_generation_rate=0.3,
            terrain_bias=_bias(desert=1.0, grassland=1.2, hill=1.0, mountain=0.8, water=1.0),
        ),
        GenerationProfile(
            name="Archipelago",
            description="Many islands separated by water with coastal terrain focus",
            noise_frequency=0.12, elevation_multiplier=0.7, sea_level_adjustment=20,
            water_flow_intensity=2.0, river_generation_rate=0.1,
            terrain_bias=_bias(desert=0.5, grassland=1.2, hill=0.6, mountain=0.4, water=3.0,
                               lagoon=2.5, shoreline=2.0, river=0.5),
        ),
        GenerationProfile(
            name="Highland",
            description="Mountainous terrain with high elevation and deep valleys",
            noise_frequency=0.06, elevation_multiplier=1.4, sea_level_adjustment=-10,
            water_flow_intensity=0.8, river_generation_rate=0.4,
            terrain_bias=_bias(desert=0.7, grassland=0.9, hill=1.5, mountain=2.0, water=0.6),
        ),
        GenerationProfile(
            name="Desert",
            description="Arid landscape with minimal water and sandy terrain",
            noise_frequency=0.1, elevation_multiplier=0.8, sea_level_adjustment=-10,
            water_flow_intensity=0.2, river_generation_rate=0.05,
            terrain_bias=_bias(desert=4.0, grassland=0.2, hill=1.0, mountain=0.6, water=0.1,
                               river=0.2, shoreline=0.5, lagoon=0.1),
        ),
        GenerationProfile(
            name="Wetlands",
            description="Low-lying areas with rivers, marshes, and abundant water",
            noise_frequency=0.09, elevation_multiplier=0.6, sea_level_adjustment=8,
            water_flow_intensity=1.8, river_generation_rate=0.6,
            terrain_bias=_bias(desert=0.4, grassland=1.6, hill=0.6, mountain=0.3, water=1.5,
                               river=2.0, lagoon=1.4),
        ),
        GenerationProfile(
            name="Volcanic",
            description="Dramatic terrain with extreme elevation changes and island chains",
            noise_frequency=0.15, elevation_multiplier=1.6, sea_level_adjustment=5,
            water_flow_intensity=1.2, river_generation_rate=0.2,
            terrain_bias=_bias(desert=0.8, grassland=0.7, hill=1.3, mountain=1.8, water=1.3),
        ),
    ]
    return {p.name: p for p in profiles}


class ProfileRegistry:
    """Looks up generation profiles by archetype name."""

    def __init__(self, data_path: Path | str | None = None):
        self.data_path = Path(data_path) if data_path else PACKAGE_DATA_PATH
        self.profiles: dict[str, GenerationProfile] = {}
        self.default_name = DEFAULT_PROFILE
        self._load_profiles()

    def _load_profiles(self):
        """Load profiles from YAML, falling back to the built-in set."""
        profile_path = self.data_path / PROFILES_FILE
        if not profile_path.exists():
            logger.warning(f"Profile file not found: {profile_path}, using built-in profiles")
            self.profiles = default_profiles()
            return

        with open(profile_path) as f:
            data = yaml.safe_load(f) or {}

        self.default_name = data.get("default", DEFAULT_PROFILE)
        for name, info in (data.get("profiles") or {}).items():
            try:
                profile = self._parse_profile(name, info or {})
            except (ProfileError, TypeError, ValueError) as e:
                logger.warning(f"Skipping profile '{name}': {e}")
                continue
            self.profiles[profile.name] = profile

        if not self.profiles:
            logger.warning(f"No usable profiles in {profile_path}, using built-in profiles")
            self.profiles = default_profiles()

        if self.default_name not in self.profiles:
            logger.warning(f"Default profile '{self.default_name}' not defined, "
                           f"using '{next(iter(self.profiles))}'")
            self.default_name = next(iter(self.profiles))

        logger.info(f"Loaded {len(self.profiles)} generation profiles from {profile_path}")

    def _parse_profile(self, name: str, info: dict) -> GenerationProfile:
        bias = {}
        for terrain_name, value in (info.get("terrain_bias") or {}).items():
            kind = TerrainKind.from_name(terrain_name)
            if kind is None:
                logger.warning(f"Profile '{name}': unknown terrain '{terrain_name}' in bias table")
                continue
            bias[kind] = float(value)

        return GenerationProfile(
            name=info.get("name", name),
            description=info.get("description", ""),
            noise_frequency=float(info.get("noise_frequency", 0.1)),
            elevation_multiplier=float(info.get("elevation_multiplier", 1.0)),
            sea_level_adjustment=int(info.get("sea_level_adjustment", 0)),
            water_flow_intensity=float(info.get("water_flow_intensity", 1.0)),
            river_generation_rate=float(info.get("river_generation_rate", 0.3)),
            terrain_bias=bias,
        ).validate()

    @property
    def default(self) -> GenerationProfile:
        return self.profiles[self.default_name]

    def names(self) -> list[str]:
        return list(self.profiles)

    def _find(self, name: str) -> Optional[GenerationProfile]:
        if name in self.profiles:
            return self.profiles[name]
        key = name.strip().lower()
        for profile_name, profile in self.profiles.items():
            if profile_name.lower() == key:
                return profile
        return None

    def __contains__(self, name: str) -> bool:
        return bool(name) and self._find(name) is not None

    def get(self, name: Optional[str]) -> GenerationProfile:
        """Return the named profile, or the default one if unknown."""
        profile = self._find(name) if name else None
        if profile is None:
            logger.warning(f"Unknown map archetype '{name}', using '{self.default_name}'")
            return self.default
        return profile


_registry: Optional[ProfileRegistry] = None


def get_registry() -> ProfileRegistry:
    """Shared registry over the packaged profiles, created on first use."""
    global _registry
    if _registry is None:
        _registry = ProfileRegistry()
    return _registry


def get_profile(name: Optional[str]) -> GenerationProfile:
    return get_registry().get(name)
