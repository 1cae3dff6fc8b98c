"""
Configuration Loader - YAML Files with Stacked Profile Overlays.

A deployment keeps one base file and a directory of small profiles
("lenient", "moderation", ...) that each touch a few sections. Profiles
are applied left to right, so "lenient,moderation" layers moderation
on top of lenient, which sits on top of the base file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from query_composer.config.models import QueryConfig

logger = logging.getLogger(__name__)

ProfileSelection = Union[str, Iterable[str], None]


def split_profiles(profile: ProfileSelection) -> List[str]:
    """Profile names from "a,b", ["a", "b"] or None, blanks dropped."""
    if profile is None:
        return []
    names = profile.split(",") if isinstance(profile, str) else list(profile)
    return [name.strip() for name in names if name and name.strip()]


class ConfigLoader:
    """Loads and validates query configuration from YAML files."""

    def __init__(
        self,
        base_path: Optional[Path] = None,
        profiles_dir: Optional[Path] = None,
    ) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Base path for relative config paths
            profiles_dir: Profile directory (default: <base_path>/config/profiles)
        """
        self._base_path = Path(base_path) if base_path else Path(".")
        self._profiles_dir = (
            Path(profiles_dir) if profiles_dir else self._base_path / "config" / "profiles"
        )

    def load(
        self,
        config_path: Union[str, Path],
        profile: ProfileSelection = None,
    ) -> QueryConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file
            profile: Profile name, comma-separated names or a list of names;
                later profiles override earlier ones

        Returns:
            Validated QueryConfig object

        Raises:
            FileNotFoundError: If config or a profile file doesn't exist
            ValueError: If a file's root is not a mapping
            ValidationError: If the merged config is invalid
        """
        config_dict = self._load_yaml(self._resolve_path(config_path))

        profiles = split_profiles(profile)
        for name in profiles:
            config_dict = self._merge_configs(config_dict, self._load_profile(name))
        if profiles:
            logger.info(f"Applied config profiles: {', '.join(profiles)}")

        return QueryConfig.model_validate(config_dict)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> QueryConfig:
        return QueryConfig.model_validate(config_dict)

    def available_profiles(self) -> List[str]:
        """Names of the profiles found in the profile directory."""
        if not self._profiles_dir.is_dir():
            return []
        return sorted(p.stem for p in self._profiles_dir.glob("*.yaml"))

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        p = Path(path)
        if p.is_absolute():
            return p
        return self._base_path / p

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config root in {path} must be a mapping")
        return data

    def _load_profile(self, profile: str) -> Dict[str, Any]:
        profile_path = self._profiles_dir / f"{profile}.yaml"
        if not profile_path.exists():
            known = ", ".join(self.available_profiles()) or "none"
            raise FileNotFoundError(f"Profile not found: {profile} (available: {known})")
        return self._load_yaml(profile_path)

    def _merge_configs(
        self,
        base: Dict[str, Any],
        overlay: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Deep merge overlay into base config."""
        result = dict(base)
        for key, value in overlay.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result


def load_config(
    config_path: Union[str, Path],
    profile: ProfileSelection = None,
    base_path: Optional[Path] = None,
) -> QueryConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to YAML config file
        profile: Optional profile name(s)
        base_path: Base path for resolving relative paths

    Returns:
        Validated QueryConfig object
    """
    return ConfigLoader(base_path=base_path).load(config_path, profile)
