"""Basemap style for the pydeck host map.

pydeck's TileLayer cannot render XYZ raster tiles on its own (it needs a
JavaScript renderSubLayers callback), so the basemap is a Mapbox GL style
dict with a raster source. deck.gl understands this format natively when
the Deck uses map_provider="mapbox"; no API key is needed for raster tiles.

Esri World Street Map is the street basemap the trip map has always used.
"""

from travelmap.constants import MapConfig

# Esri World Street Map (XYZ order is z/y/x on ArcGIS servers)
ESRI_STREET_TILES = (
    "https://server.arcgisonline.com/ArcGIS/rest/services/World_Street_Map/MapServer/tile/{z}/{y}/{x}"
)

ESRI_ATTRIBUTION = (
    "Tiles &copy; Esri &mdash; Source: Esri, DeLorme, NAVTEQ, USGS, Intermap, iPC, NRCAN, "
    "Esri Japan, METI, Esri China (Hong Kong), Esri (Thailand), TomTom, 2012"
)

ESRI_STREET_STYLE: dict[str, object] = {
    "version": 8,
    "sources": {
        "esri-street": {
            "type": "raster",
            "tiles": [ESRI_STREET_TILES],
            "tileSize": MapConfig.TILE_SIZE_PX,
            "attribution": ESRI_ATTRIBUTION,
        }
    },
    "layers": [
        {
            "id": "esri-street",
            "type": "raster",
            "source": "esri-street",
            "minzoom": MapConfig.MIN_ZOOM,
            "maxzoom": MapConfig.MAX_ZOOM,
        }
    ],
}
