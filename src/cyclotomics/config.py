from __future__ import annotations

import os
import tomllib as toml
from dataclasses import dataclass
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path
from typing import Any

from cyclotomics.utility import UserInputError

STORAGE_KINDS = ("dense", "sparse")


@dataclass
class Settings:
    """
    Wrap the full TOML dict (without the [_PROFILE_] section).
    .as_dict() feeds runtime.apply().

    Added fields:
      - name:        resolved profile name (FILE.stem if not provided in [_PROFILE_])
      - description: one-line description from [_PROFILE_] or "(no description)"
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


# --- Paths -----------------------------------------------------------------

def workspace_dir() -> Path | None:
    env = os.environ.get("CYCLOTOMICS_HOME")
    if env:
        return Path(env).expanduser().resolve()
    return None


def _user_profile_path(name: str) -> Path | None:
    ws = workspace_dir()
    if ws is None:
        return None
    return ws / "profiles" / f"{name}.toml"


def _packaged_profiles() -> list[str]:
    ref = pkg_files("cyclotomics") / "profiles"
    try:
        return [p.name[:-5] for p in ref.iterdir() if p.name.endswith(".toml")]
    except (FileNotFoundError, NotADirectoryError):
        return []


# --- I/O -------------------------------------------------------------------


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except toml.TOMLDecodeError as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        msg = getattr(e, "msg", str(e))
        where = []
        if lineno is not None:
            where.append(f"line {lineno}")
        if colno is not None:
            where.append(f"column {colno}")
        loc = f" (at {', '.join(where)})" if where else ""
        # No traceback chaining
        raise UserInputError(f"reading {path.name}: {msg}{loc}.") from None


# --- Metadata handling -----------------------------------------------------


def _sanitize_oneline(s: str) -> str:
    return " ".join(str(s).split()) or "(no description)"


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    """
    Extract [_PROFILE_] meta (name, description) and return:
      (settings_without_profile, resolved_name, resolved_description)
    """
    meta = raw.get("_PROFILE_") or {}
    if "_PROFILE_" in raw:
        raw = {k: v for k, v in raw.items() if k != "_PROFILE_"}

    name = str(meta.get("name") or fallback_name)
    description = _sanitize_oneline(str(meta.get("description") or ""))

    return raw, name, description


def _validate(data: dict[str, Any], path: Path) -> None:
    storage = (data.get("STORAGE") or {}).get("DEFAULT")
    if storage is not None and storage not in STORAGE_KINDS:
        raise UserInputError(
            f"reading {path.name}: STORAGE.DEFAULT must be one of {', '.join(STORAGE_KINDS)}, got {storage!r}."
        )
    tol = (data.get("INVERSION") or {}).get("IMAG_TOL_FACTOR")
    if tol is not None and (isinstance(tol, bool) or not isinstance(tol, (int, float)) or tol <= 0):
        raise UserInputError(f"reading {path.name}: INVERSION.IMAG_TOL_FACTOR must be a positive number.")


# --- Public API ------------------------------------------------------------


def list_all_profiles() -> list[str]:
    """Names of all profiles: packaged ones plus those in $CYCLOTOMICS_HOME/profiles."""
    names = set(_packaged_profiles())
    ws = workspace_dir()
    if ws is not None and (ws / "profiles").is_dir():
        names.update(p.stem for p in (ws / "profiles").glob("*.toml"))
    return sorted(names)


def has_profile(name: str) -> bool:
    return name in list_all_profiles()


def load_settings(name: str | None = None) -> Settings:
    """
    Load a profile by name (default 'default'). The user workspace wins over
    the packaged copy. Strips the [_PROFILE_] metadata and validates the keys
    the arithmetic reads.
    """
    if not name:
        name = "default"

    user_path = _user_profile_path(name)
    if user_path is not None and user_path.exists():
        raw = _load_toml(user_path)
        path = user_path
    else:
        ref = pkg_files("cyclotomics") / "profiles" / f"{name}.toml"
        if not ref.is_file():
            raise FileNotFoundError(f"Profile '{name}' not found")
        with as_file(ref) as real:
            path = Path(real)
            raw = _load_toml(path)

    data, resolved_name, description = _split_profile_data(raw, path.stem)
    _validate(data, path)

    return Settings(
        data=data,
        name=resolved_name,
        description=description,
        _source=path,
    )
