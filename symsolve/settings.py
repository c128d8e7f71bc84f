"""
SymSolve — Solver settings and their JSON persistence.

A solve call reads the process-wide settings once and passes the frozen
snapshot down its entire call tree, so a recursive or concurrent solve
never sees a value change half way through.

Settings may be persisted in ``<project>/data/symsolve.json``.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Optional

logger = logging.getLogger(__name__)

_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "data")
_DATA_FILE = os.path.join(_DATA_DIR, "symsolve.json")


@dataclass(frozen=True)
class SolveSettings:
    """Immutable configuration for one solve invocation."""

    search_radius: int = 1000          # sample count on each side of zero
    roots_per_side: int = 10           # candidate cap per side of the scan
    pi_conversions: bool = True        # snap numeric trig roots to n·π/d
    step_size: float = 0.1
    step_sizes: tuple = (0.1, 0.05, 0.01)
    max_newton_iterations: int = 200
    max_nonlinear_tries: int = 12
    nonlinear_jump_at: int = 50
    nonlinear_jump_size: float = 100
    nonlinear_start: float = 0.01
    solutions_as_object: bool = False  # systems: dict instead of pairs
    significant_digits: int = 14
    max_depth: int = 25

    def replace(self, **changes) -> "SolveSettings":
        """Return a copy with *changes* applied."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["step_sizes"] = list(self.step_sizes)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SolveSettings":
        """Build settings from a plain dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.debug("Ignoring unknown setting %r", key)
                continue
            values[key] = value
        if "step_sizes" in values:
            values["step_sizes"] = tuple(values["step_sizes"])
        return cls(**values)


# ── Default settings ─────────────────────────────────────────────────────
DEFAULT_SETTINGS = SolveSettings().to_dict()

_current = SolveSettings()


def get_settings() -> SolveSettings:
    """Return the process-wide settings snapshot."""
    return _current


def configure(settings: Optional[SolveSettings] = None, **changes) -> SolveSettings:
    """Replace the process-wide settings.

    Either pass a complete ``SolveSettings`` or keyword overrides applied
    on top of the current value.  Calls already in flight keep the
    snapshot they started with.
    """
    global _current
    base = settings if settings is not None else _current
    _current = base.replace(**changes) if changes else base
    return _current


def reset_settings() -> SolveSettings:
    """Restore the built-in defaults."""
    return configure(SolveSettings())


# ── Persistence ──────────────────────────────────────────────────────────

def _ensure_dir(path: str) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)


def _load_db(path: str) -> dict:
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                db = json.load(f)
            if isinstance(db, dict):
                return db
        except (json.JSONDecodeError, OSError):
            logger.warning("Could not read settings file %s; using defaults", path)
    return {"settings": dict(DEFAULT_SETTINGS)}


def load_settings(path: Optional[str] = None) -> SolveSettings:
    """Read settings from *path* (default: the project data file).

    Missing files and invalid JSON fall back to the defaults; keys that
    are absent from the file keep their default values.
    """
    db = _load_db(path or _DATA_FILE)
    merged = dict(DEFAULT_SETTINGS)
    merged.update(db.get("settings", {}))
    try:
        return SolveSettings.from_dict(merged)
    except TypeError:
        logger.warning("Malformed settings in %s; using defaults", path or _DATA_FILE)
        return SolveSettings()


def save_settings(settings: SolveSettings, path: Optional[str] = None) -> None:
    """Persist *settings* as JSON."""
    path = path or _DATA_FILE
    _ensure_dir(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"settings": settings.to_dict()}, f, indent=2, ensure_ascii=False)
