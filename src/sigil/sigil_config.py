"""
Configuration for the Sigil desugarer.
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, List

import yaml


@dataclass
class SigilConfig:
    """Reserved names and limits used while desugaring."""

    effect_suffix: str = "!"
    compare_name: str = "__compare"
    unpack_name: str = "__unpack"
    handle_name: str = "__handle"
    nil_text: str = "nil"
    max_depth: int = 250  # 0 disables the nesting ceiling

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SigilConfig':
        """
        Build a configuration from a mapping, keeping defaults for missing keys.

        Raises:
            ValueError: If the mapping contains unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        return cls(**data)

    @classmethod
    def load_from_file(cls, config_path: str) -> 'SigilConfig':
        """Load configuration from a YAML file."""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        logging.getLogger("SigilConfig").debug("loading configuration from %s", config_path)

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    def to_dict(self) -> Dict[str, Any]:
        """Return the configuration as a plain mapping."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to a YAML file."""
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=True)

    def primitive_names(self) -> List[str]:
        """Names of the comparison, unpack and handle primitives."""
        return [self.compare_name, self.unpack_name, self.handle_name]

    def validate(self) -> List[str]:
        """Validate the configuration and return any errors."""
        errors = []

        if not self.effect_suffix:
            errors.append("effect_suffix must not be empty")

        if not self.nil_text:
            errors.append("nil_text must not be empty")

        if self.max_depth < 0:
            errors.append(f"max_depth must not be negative, got {self.max_depth}")

        reserved = ["=", "=>", "~>", "type"] + self.primitive_names()
        seen = set()
        for name in reserved:
            if not name:
                errors.append("Primitive names must not be empty")

            elif name in seen:
                errors.append(f"Reserved name '{name}' is used more than once")

            seen.add(name)

        for name in self.primitive_names():
            if name and self.effect_suffix and name.endswith(self.effect_suffix):
                errors.append(f"Primitive name '{name}' must not end with the effect suffix '{self.effect_suffix}'")

        return errors
