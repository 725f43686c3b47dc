"""
Maize masks

The maize mask marks pixels inside the UBOS maize zones, optionally restricted
to pixels a global land-cover product classifies as cropland:

    maize_mask = cropland_mask AND zone_mask

Earth Engine builders (ZoneMask, LandCoverMask, build_maize_mask) and their
numpy counterparts (threshold_mask, class_mask, intersect_masks) follow the
same rules, so the mask logic can be checked without a server.
"""

import logging
from functools import reduce

import ee
import numpy as np

from .config import get_zone_asset

logger = logging.getLogger(__name__)


class ZoneMask:
    """
    Rasterized UBOS maize zones

    Polygons are painted with value 1 onto a zero byte image, then thresholded
    at > 0 to give a boolean mask.
    """

    def __init__(self, asset_id=None, crop_filter=None, year=None):
        """
        Args:
            asset_id (str): FeatureCollection with the zone polygons
            crop_filter (tuple): (property, value) to keep, e.g. ('crop', 'Maize')
                when the layer holds several crops
            year (int): Keep only polygons with this 'year' property
        """
        self.asset_id = get_zone_asset(asset_id)
        self.crop_filter = crop_filter
        self.year = year

    def features(self):
        zones = ee.FeatureCollection(self.asset_id)
        if self.crop_filter:
            prop, value = self.crop_filter
            zones = zones.filter(ee.Filter.eq(prop, value))
        if self.year is not None:
            zones = zones.filter(ee.Filter.eq('year', self.year))
        return zones

    def image(self):
        """Boolean zone mask named 'ubos_maize'"""
        return (ee.Image(0).byte()
                .paint(featureCollection=self.features(), color=1)
                .rename('ubos_maize')
                .gt(0))


class LandCoverMask:
    """
    Cropland mask from a land-cover classification

    Supports MODIS MCD12Q1 (LC_Type1 classes 12 and 14, first image of a
    reference year) and GFSAD1000 (landcover class 2).
    """

    def __init__(self, config):
        """
        Args:
            config (LandCoverConfig): Dataset, band, cropland classes and reference window
        """
        self.config = config

    def landcover(self):
        """Class image for the reference window"""
        if self.config.is_collection:
            return (ee.ImageCollection(self.config.dataset_id)
                    .filterDate(self.config.start_date, self.config.end_date)
                    .first()
                    .select(self.config.band))
        return ee.Image(self.config.dataset_id).select(self.config.band)

    def image(self):
        """Boolean mask: 1 where the class is one of the cropland classes"""
        landcover = self.landcover()
        masks = [landcover.eq(code) for code in self.config.classes]
        return reduce(lambda a, b: a.Or(b), masks)


def build_maize_mask(zone_image, cropland_image=None):
    """
    Combine the zone mask with an optional cropland mask

    Args:
        zone_image (ee.Image): Boolean crop-zone mask
        cropland_image (ee.Image): Boolean cropland mask, or None

    Returns:
        ee.Image: cropland AND zones, or the zone mask alone
    """
    if cropland_image is None:
        return zone_image
    return cropland_image.And(zone_image)


def threshold_mask(values):
    """Boolean mask of a rasterized 0/1 field (> 0)"""
    return np.asarray(values) > 0


def class_mask(values, classes):
    """Boolean mask where values equal any of the class codes"""
    return np.isin(np.asarray(values), list(classes))


def intersect_masks(*masks):
    """Logical AND of any number of boolean masks"""
    if not masks:
        raise ValueError("intersect_masks needs at least one mask")
    return reduce(np.logical_and, (np.asarray(m, dtype=bool) for m in masks))
