"""Area-of-interest geometries"""

import numpy as np
import ee

from .config import validate_bbox


def get_region(bbox, buffer_meters=0):
    """
    Create the analysis region from a bounding box

    Args:
        bbox (list): [west, south, east, north] in degrees
        buffer_meters (float): Buffer distance in metres, 0 for the bare rectangle

    Returns:
        ee.Geometry: Rectangle, buffered when buffer_meters > 0
    """
    region = ee.Geometry.Rectangle(list(validate_bbox(bbox)))
    if buffer_meters:
        region = region.buffer(buffer_meters)
    return region


def box_from_center(lon, lat, box_width, box_height):
    """[west, south, east, north] of a box of box_width x box_height metres around a point"""
    # Longitude degrees shrink with latitude
    width_deg = box_width / (111320 * np.cos(np.radians(lat)))
    height_deg = box_height / 111132

    return [
        lon - width_deg / 2, lat - height_deg / 2,
        lon + width_deg / 2, lat + height_deg / 2
    ]

