"""Layout constants, overridable from the environment or a .env file."""

from dataclasses import dataclass
import math
import os

from dotenv import load_dotenv

ENV_PREFIX = "FAMTREE_"


@dataclass(frozen=True)
class LayoutConfig:
    node_width: float = 160
    node_height: float = 80
    generation_spacing: float = 120  # vertical gap between generation rows
    sibling_spacing: float = 50  # horizontal gap between boxes in a row

    @property
    def spouse_offset(self) -> float:
        return self.node_width + self.sibling_spacing

    @property
    def slot_width(self) -> float:
        """Center-to-center distance between neighbours in a row."""
        return self.node_width + self.sibling_spacing

    @property
    def generation_step(self) -> float:
        """Center-to-center distance between generation rows."""
        return self.node_height + self.generation_spacing

    def row_width(self, count: int) -> float:
        if count <= 0:
            return 0.0
        return count * self.node_width + (count - 1) * self.sibling_spacing

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> "LayoutConfig":
        """
        Build a config from FAMTREE_* environment variables.

        Loads `dotenv_path` (or a .env found from the working directory) first;
        variables already set in the environment win.
        """
        load_dotenv(dotenv_path)
        values = {}
        for name in ("node_width", "node_height", "generation_spacing", "sibling_spacing"):
            var = ENV_PREFIX + name.upper()
            raw = os.getenv(var)
            if raw is None or not raw.strip():
                continue
            try:
                value = float(raw)
            except ValueError:
                raise ValueError(f"{var} must be a number, got {raw!r}") from None
            if not math.isfinite(value):
                raise ValueError(f"{var} must be finite, got {raw!r}")
            if value < 0:
                raise ValueError(f"{var} must not be negative, got {raw!r}")
            values[name] = value
        return cls(**values)
