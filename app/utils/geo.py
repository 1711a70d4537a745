"""
Point location helpers.

Locations are persisted as Firestore GeoPoints and returned to callers
as GeoJSON Point geometries (coordinates are [longitude, latitude]).
"""

from typing import Dict

from firebase_admin import firestore


def to_geopoint(lat: float, lng: float) -> firestore.GeoPoint:
    return firestore.GeoPoint(lat, lng)


def to_geojson(point: firestore.GeoPoint) -> Dict:
    """
    Serialize a GeoPoint as a GeoJSON Point.

    Example:
        to_geojson(GeoPoint(39.0, 35.0)) -> {"type": "Point", "coordinates": [35.0, 39.0]}
    """
    return {"type": "Point", "coordinates": [point.longitude, point.latitude]}
