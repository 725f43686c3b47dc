"""
Index processor for maize areas

Processing pipeline:
1. Build the region and the maize mask (UBOS zones, optionally ∩ land-cover cropland)
2. Filter the source catalog by region, date window and cloud cover
3. Compute the index per scene, mask to maize and clip to the region
4. Reduce each scene to its regional mean to get a time series
5. Stack scenes into a multi-band image or a season mean for maps and exports
"""

import logging

import ee

from .config import CLOUD_PROPERTY, TIME_START
from .indices import index_function
from .masks import LandCoverMask, ZoneMask, build_maize_mask
from .region import get_region
from .timeseries import features_to_frame, sort_by_date

logger = logging.getLogger(__name__)


class IndexProcessor:
    """
    Index time series over the maize mask for one pipeline configuration
    """

    def __init__(self, config, verbose=True):
        """
        Initialize the processor

        Args:
            config (PipelineConfig): Region, window, catalog and reduction settings
            verbose (bool): Log processing details
        """
        self.config = config
        self.verbose = verbose
        self.scene_count = None

        self.region = get_region(config.bbox, config.buffer_meters)

        self.zone_mask = ZoneMask(
            asset_id=config.zone_asset,
            crop_filter=config.crop_filter,
            year=config.year_filter,
        ).image()

        if config.landcover is not None:
            self.cropland_mask = LandCoverMask(config.landcover).image()
        else:
            self.cropland_mask = None

        self.maize_mask = build_maize_mask(self.zone_mask, self.cropland_mask)

        if self.verbose:
            logger.info("%s: region %s (buffer %s m), %s to %s",
                        config.index, list(config.bbox), config.buffer_meters,
                        config.start_date, config.end_date)

    def _log(self, message, *args):
        if self.verbose:
            logger.info(message, *args)

    def load_collection(self):
        """
        Filter the source catalog to the region, window and cloud threshold

        Returns:
            ee.ImageCollection: Raw scenes, possibly empty
        """
        config = self.config
        collection = ee.ImageCollection(config.collection_id)
        if config.select_before_filter:
            collection = collection.select(list(config.bands))

        collection = (collection
                      .filterBounds(self.region)
                      .filterDate(config.start_date, config.end_date))

        if config.cloud_threshold is not None:
            collection = collection.filter(ee.Filter.lt(CLOUD_PROPERTY, config.cloud_threshold))

        count = collection.size().getInfo()
        self.scene_count = count
        self._log("Number of images in %s for %s to %s: %s",
                  config.collection_id, config.start_date, config.end_date, count)

        if not count:
            logger.warning("No images in %s between %s and %s",
                           config.collection_id, config.start_date, config.end_date)

        return collection

    def mask_scene(self, image):
        """Restrict a scene to maize pixels, clipped to the region when configured"""
        masked = image.updateMask(self.maize_mask)
        if self.config.clip_scenes:
            masked = masked.clip(self.region)
        return masked

    def process_collection(self, collection=None):
        """
        Compute the index for every scene and mask it to maize

        Args:
            collection (ee.ImageCollection): Raw scenes; loaded when None

        Returns:
            ee.ImageCollection: Index scenes, sorted by time when configured
        """
        if collection is None:
            collection = self.load_collection()

        calculate = index_function(self.config)
        processed = collection.map(lambda image: self.mask_scene(calculate(image)))

        if self.config.sort_by_time:
            processed = processed.sort(TIME_START)
        return processed

    def reduce_scene(self, image):
        """Regional mean of the index band for one scene"""
        config = self.config
        params = dict(
            reducer=ee.Reducer.mean(),
            geometry=self.region,
            scale=config.reduce_scale,
            maxPixels=config.max_pixels,
        )
        if config.best_effort:
            params['bestEffort'] = True
        return image.select(config.index).reduceRegion(**params).get(config.index)

    def time_series(self, collection):
        """
        Reduce every scene to a feature holding its time and regional mean

        Args:
            collection (ee.ImageCollection): Processed index scenes

        Returns:
            ee.FeatureCollection: One geometry-less feature per scene
        """
        config = self.config

        def to_feature(image):
            if config.time_format:
                time_value = image.date().format(config.time_format)
            else:
                time_value = image.get(TIME_START)
            return ee.Feature(None, {
                config.time_property: time_value,
                config.value_column: self.reduce_scene(image),
            })

        return ee.FeatureCollection(collection.map(to_feature))

    def fetch_time_series(self, collection):
        """
        Download the time series as a DataFrame sorted by date

        Returns:
            pd.DataFrame: Columns 'date' and the index value column
        """
        features = self.time_series(collection).getInfo()['features']
        frame = sort_by_date(features_to_frame(
            features, self.config.time_property, self.config.value_column))
        self._log("%s time series: %d of %d scenes with valid maize pixels",
                  self.config.index, len(frame), len(features))
        return frame

    def to_multiband(self, collection):
        """
        Stack scenes into one image, one band per date

        Band names follow config.band_naming:
        - 'days': <prefix><days since start_date>, e.g. EVI_day_16
        - 'date': YYYY_MM_dd of the scene
        """
        naming = self.config.band_naming
        if naming == 'days':
            start = ee.Date(self.config.start_date)
            prefix = self.config.band_prefix
            stacked = collection.toBands()
            band_names = collection.aggregate_array(TIME_START).map(
                lambda t: ee.Date(t).difference(start, 'days').format(prefix + '%d'))
            return stacked.rename(band_names)
        if naming == 'date':
            renamed = collection.map(
                lambda image: image.rename(ee.Date(image.get(TIME_START)).format('YYYY_MM_dd')))
            return ee.ImageCollection(renamed).toBands()
        return collection.toBands()

    def season_mean(self, collection):
        """Per-pixel mean of the index over the whole window"""
        return collection.select(self.config.index).mean()

    def add_date_stamps(self, collection):
        """Set a 'date_string' property (yyyy-MM-dd) on every scene"""
        return collection.map(
            lambda image: image.set('date_string', ee.Date(image.get(TIME_START)).format('yyyy-MM-dd')))
