from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

import streamlit as st

# New York City
DEFAULT_CENTER = (40.7128, -74.006)
DEFAULT_ZOOM = 14
DEFAULT_STYLE = "mapbox/light-v11"


def _parse_bool(raw, default: bool) -> bool:
    if raw is None:
        return default
    return str(raw).strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    mapbox_token: str
    map_style: str
    default_center: tuple
    default_zoom: int
    cluster_radius: int
    cluster_max_zoom: int
    log_level: str
    json_logs: bool

    @classmethod
    def from_sources(cls, secrets: Mapping, environ: Mapping) -> "Settings":
        """Environment variables take precedence over Streamlit secrets."""

        def get(name: str, default):
            if name in environ:
                return environ[name]
            return secrets.get(name, default)

        return cls(
            mapbox_token=str(get("MAPBOX_TOKEN", "")).strip(),
            map_style=str(get("MAP_STYLE", DEFAULT_STYLE)),
            default_center=(
                float(get("MAP_CENTER_LAT", DEFAULT_CENTER[0])),
                float(get("MAP_CENTER_LNG", DEFAULT_CENTER[1])),
            ),
            default_zoom=int(get("MAP_ZOOM", DEFAULT_ZOOM)),
            cluster_radius=int(get("CLUSTER_RADIUS", 50)),
            cluster_max_zoom=int(get("CLUSTER_MAX_ZOOM", 16)),
            log_level=str(get("LOG_LEVEL", "INFO")).upper(),
            json_logs=_parse_bool(get("LOG_FORMAT_JSON", None), False),
        )


def _read_secrets() -> dict:
    # no secrets.toml is a normal setup for a local run
    if not st.secrets.load_if_toml_exists():
        return {}
    return {key: st.secrets[key] for key in st.secrets.keys()}


def load_settings() -> Settings:
    return Settings.from_sources(_read_secrets(), os.environ)
