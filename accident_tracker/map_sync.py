"""
Folium rendering of the accident board map.

The map is built fresh on every script run and the accident cluster layer is rebuilt
from the full record list each time (O(n), no incremental diffing).
"""

import hashlib
import html

import folium
from folium.plugins import MarkerCluster

from accident_tracker.models import SEVERITY_COLORS

MAPBOX_TILES = "https://api.mapbox.com/styles/v1/{style}/tiles/256/{{z}}/{{x}}/{{y}}?access_token={token}"
MAPBOX_ATTRIBUTION = (
    '© <a href="https://www.mapbox.com/about/maps/">Mapbox</a> '
    '© <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a>'
)
ACCIDENT_LAYER = "Accidents"


# ============================================
# Formatting helpers
# ============================================
def format_date(record):
    return record.occurred_at.astimezone().strftime("%b %d, %Y")


def format_time(record):
    return record.occurred_at.astimezone().strftime("%I:%M:%S %p")


def popup_html(record):
    """Popup body: colored severity, description, date, time and injuries."""
    color = SEVERITY_COLORS[record.severity]
    return f"""
    <div style="min-width:200px;font-family:sans-serif">
      <div style="display:flex;align-items:center;gap:6px;margin-bottom:6px">
        <span style="width:12px;height:12px;border-radius:50%;background:{color};display:inline-block"></span>
        <b>{record.severity.label} Accident</b>
      </div>
      <p style="margin:0 0 6px 0">{html.escape(record.description)}</p>
      <div style="font-size:12px;color:#4b5563">
        <div>📅 {format_date(record)}</div>
        <div>🕐 {format_time(record)}</div>
        <div>👥 {record.injuries} injuries</div>
      </div>
    </div>
    """


def token_fingerprint(token):
    """Stable short id for a token, used to key the map widget without exposing the token."""
    return hashlib.sha1(token.encode("utf-8")).hexdigest()[:12]


# ============================================
# Map construction
# ============================================
def build_map(token, style, view):
    """Base map: Mapbox tiles, zoom (navigation) control and scale bar."""
    fmap = folium.Map(
        location=list(view.center),
        zoom_start=view.zoom,
        tiles=None,
        zoom_control=True,
        control_scale=True,
    )
    folium.TileLayer(
        tiles=MAPBOX_TILES.format(style=style, token=token),
        attr=MAPBOX_ATTRIBUTION,
        name="Mapbox",
        max_zoom=22,
    ).add_to(fmap)
    return fmap


def sync_features(fmap, records, cluster_radius=50, cluster_max_zoom=16, selected_record_id=None):
    """
    Draw every accident into a new cluster layer.

    Leaflet.markercluster groups accidents within `cluster_radius` pixels into a
    count badge and zooms to the cluster on click; from `cluster_max_zoom + 1`
    on every accident is drawn on its own. Single accidents are severity-colored
    circles with a popup; the selected accident's popup is kept open.
    """
    layer = MarkerCluster(
        name=ACCIDENT_LAYER,
        options={
            "maxClusterRadius": cluster_radius,
            "disableClusteringAtZoom": cluster_max_zoom + 1,
            "zoomToBoundsOnClick": True,
            "showCoverageOnHover": False,
        },
    )

    for record in records:
        folium.CircleMarker(
            location=[record.latitude, record.longitude],
            radius=9,
            color="white",
            weight=2,
            fill=True,
            fill_color=record.color,
            fill_opacity=0.95,
            # a click on an accident must not also count as a click on the map
            bubbling_mouse_events=False,
            tooltip=f"{record.severity.label} accident",
            popup=folium.Popup(popup_html(record), max_width=300, show=record.id == selected_record_id),
        ).add_to(layer)

    layer.add_to(fmap)
    return layer


def render_accident_map(token, style, view, records, cluster_radius=50, cluster_max_zoom=16,
                        selected_record_id=None):
    fmap = build_map(token, style, view)
    sync_features(fmap, records, cluster_radius, cluster_max_zoom, selected_record_id)
    return fmap
