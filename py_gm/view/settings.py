"""
Player view settings.

Settings are stored under one key of a caller-supplied string key-value
store (browser local storage, a dict, a shelf...) as compressed JSON. Stored
blobs may be partial: whatever they leave out falls back to ``DEFAULT``.
Keys are camelCase on the wire and snake_case in Python.
"""

import base64
import json
import zlib
from typing import Any, Mapping, MutableMapping, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..utils.merge import deep_merge

logger = structlog.get_logger()

KEY = "settings"


class _SettingsModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CameraSettings(_SettingsModel):
    """Perspective camera."""

    fov: float = Field(default=60, description="Vertical field of view in degrees")
    near: float = Field(default=1, description="Near clipping plane")
    far: float = Field(default=1200, description="Far clipping plane")


class ControlsSettings(_SettingsModel):
    """Orbit controls."""

    damping_factor: float = Field(default=0.2, description="Inertia damping")
    min_distance: float = Field(default=200, description="Closest zoom")
    max_distance: float = Field(default=1000, description="Farthest zoom")
    zoom_speed: float = Field(default=2.1, description="Zoom speed")
    rotate_speed: float = Field(default=0.8, description="Rotation speed")
    pan_speed: float = Field(default=1.1, description="Pan speed")


class MapViewSettings(_SettingsModel):
    """Map rendering sizes."""

    radius: float = Field(default=20, description="Face radius")
    max_text_size: float = Field(default=7, description="Largest label size")
    min_text_size: float = Field(default=1, description="Smallest label size")
    image_size: float = Field(default=20, description="Face icon size")


class ViewSettings(_SettingsModel):
    camera: CameraSettings = Field(default_factory=CameraSettings)
    controls: ControlsSettings = Field(default_factory=ControlsSettings)
    antialias: bool = Field(default=True, description="Enable antialiasing")
    map: MapViewSettings = Field(default_factory=MapViewSettings)


class GameSettings(_SettingsModel):
    view: ViewSettings = Field(default_factory=ViewSettings)


class UserSettings(_SettingsModel):
    """Complete settings tree."""

    game: GameSettings = Field(default_factory=GameSettings)


DEFAULT = UserSettings()

PartialSettings = Mapping[str, Any]


def merge(partial: PartialSettings) -> UserSettings:
    """Fill a partial (camelCase keyed) settings dict in from ``DEFAULT``."""
    merged = deep_merge(DEFAULT.model_dump(by_alias=True), partial)
    return UserSettings.model_validate(merged)


def encode(settings: Union[UserSettings, PartialSettings]) -> str:
    """Serialise full or partial settings to compressed base64 text."""
    if isinstance(settings, BaseModel):
        payload = settings.model_dump_json(by_alias=True)
    else:
        payload = json.dumps(settings, separators=(",", ":"))
    return base64.b64encode(zlib.compress(payload.encode("utf-8"))).decode("ascii")


def _parse(text: str) -> UserSettings:
    raw = zlib.decompress(base64.b64decode(text, validate=True))
    partial = json.loads(raw.decode("utf-8"))
    if not isinstance(partial, dict):
        raise ValueError(f"Settings payload must be an object, got {type(partial).__name__}")
    return merge(partial)


def decode(text: str) -> UserSettings:
    """
    Reverse :func:`encode`, merging the stored values over ``DEFAULT``.

    Text that is not valid base64, zlib, JSON or settings decodes to a copy
    of ``DEFAULT``. Use :func:`load` to also repair the store.
    """
    try:
        return _parse(text)
    except (ValueError, zlib.error) as e:
        logger.warning("Settings unreadable, using defaults", error=str(e))
        return DEFAULT.model_copy(deep=True)


def save(storage: MutableMapping[str, str], settings: Union[UserSettings, PartialSettings]) -> None:
    """Write settings to ``storage``."""
    storage[KEY] = encode(settings)


def load(storage: MutableMapping[str, str]) -> UserSettings:
    """
    Read settings from ``storage``.

    Missing or unreadable settings are replaced by ``DEFAULT``, which is
    written back so the store heals itself. Never raises for bad data.
    """
    text = storage.get(KEY, "")
    try:
        return _parse(text)
    except (ValueError, zlib.error) as e:
        logger.warning("Stored settings unreadable, restoring defaults", error=str(e))
        save(storage, DEFAULT)
        return DEFAULT.model_copy(deep=True)
