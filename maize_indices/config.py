"""
Pipeline configuration for the maize index time series

Each preset mirrors one analysis over the UBOS maize zones of Uganda:
- CCI:  Sentinel-2 surface reflectance, crop-zone mask only
- EVI:  MODIS MOD13Q1, crop zones ∩ MODIS cropland/mosaic (2020 land cover)
- LAI:  MODIS MOD15A2H, crop zones ∩ MODIS cropland/mosaic (2018 land cover)
- NDVI: MODIS MOD13Q1, crop zones ∩ MODIS cropland/mosaic (2018 land cover)
- NDWI: Landsat 8 surface reflectance, crop zones ∩ GFSAD cropland

Values can be overridden per run with get_pipeline_config(name, **overrides).
"""

import os
from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Optional, Tuple

from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()

# Google Cloud project used for ee.Initialize (override with EE_PROJECT)
PROJECT_ID = 'ee-maize-uganda'

# UBOS maize zone polygons (override with UBOS_MAIZE_ASSET)
UBOS_MAIZE_ASSET = 'UBOS_maize_zones'

# Catalog IDs
SENTINEL2_SR = 'COPERNICUS/S2_SR'
MODIS_VI = 'MODIS/006/MOD13Q1'
MODIS_LAI = 'MODIS/006/MOD15A2H'
MODIS_LANDCOVER = 'MODIS/006/MCD12Q1'
LANDSAT8_SR = 'LANDSAT/LC08/C02/T1_L2'
GFSAD_CROPLAND = 'USGS/GFSAD1000_V1'

# MODIS LC_Type1 classes: 12 = croplands, 14 = cropland/natural vegetation mosaic
MODIS_CROPLAND_CLASSES = (12, 14)
# GFSAD1000 landcover: 2 = cropland
GFSAD_CROPLAND_CLASSES = (2,)

# Product scale factors
MODIS_VI_DIVISOR = 10000  # MOD13Q1 NDVI/EVI are stored as value * 10000
MODIS_LAI_SCALE = 0.1     # MOD15A2H Lai_500m

CLOUD_PROPERTY = 'CLOUDY_PIXEL_PERCENTAGE'
TIME_START = 'system:time_start'

VEGETATION_PALETTE = [
    'FFFFFF', 'CE7E45', 'DF923D', 'F1B555', 'FCD163', '99B718', '74A901',
    '66A000', '529400', '3E8601', '207401', '056201', '004C00',
    '023B01', '012E01', '011D01', '011301'
]
NDVI_PALETTE = ['red', 'yellow', 'green']
NDWI_PALETTE = ['red', 'yellow', 'green', 'blue']
NDWI_LEGEND_NAMES = ['Low NDWI', 'Medium-Low NDWI', 'Medium-High NDWI', 'High NDWI']


def get_project_id(project=None):
    """Resolve the Earth Engine project: argument, then EE_PROJECT, then PROJECT_ID"""
    return project or os.getenv('EE_PROJECT') or PROJECT_ID


def get_zone_asset(asset=None):
    return asset or os.getenv('UBOS_MAIZE_ASSET') or UBOS_MAIZE_ASSET


@dataclass(frozen=True)
class LandCoverConfig:
    """
    Land-cover layer intersected with the crop-zone mask

    Args:
        dataset_id (str): Image or ImageCollection ID
        band (str): Class band
        classes (tuple): Class codes counted as cropland
        start_date, end_date (str): Reference window when dataset_id is a collection
        label (str): Name used for map layers
    """
    dataset_id: str
    band: str
    classes: Tuple[int, ...]
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    label: str = 'Cropland'

    @property
    def is_collection(self):
        return self.start_date is not None


@dataclass(frozen=True)
class ChartConfig:
    title: str
    ylabel: str
    date_format: str = '%m-%Y'
    line_width: float = 1
    point_size: float = 3
    color: Optional[str] = None
    kind: str = 'line'


@dataclass(frozen=True)
class ExportConfig:
    description: str
    scale: float
    folder: Optional[str] = None
    crs: Optional[str] = None
    file_format: str = 'GeoTIFF'
    max_pixels: float = 1e9


@dataclass(frozen=True)
class PipelineConfig:
    """
    Everything one index pipeline needs: region, window, catalog, reduction and outputs

    Args:
        name (str): Pipeline key ('cci', 'evi', ...)
        index (str): Index band name written on every processed scene
        bbox (tuple): [west, south, east, north] in degrees
        start_date, end_date (str): ISO dates of the analysis window
        collection_id (str): Source ImageCollection
        bands (tuple): Source bands used by the index formula
        scale_factor (float): Multiplier for product-scaled bands, None for band math
        scale_divisor (float): Divisor for product-scaled bands, used instead of scale_factor
        reduce_scale (float): Pixel size in metres for the regional mean
        max_pixels (float): Pixel cap for reduceRegion
        best_effort (bool): Let reduceRegion coarsen instead of failing on the cap
        cloud_threshold (float): Keep scenes with CLOUDY_PIXEL_PERCENTAGE below this
        landcover (LandCoverConfig): Cropland layer to intersect, None for zones only
        buffer_meters (float): Buffer applied to the region rectangle
        band_naming (str): 'days' or 'date' renaming for the multi-band image
    """
    name: str
    index: str
    bbox: Tuple[float, float, float, float]
    start_date: str
    end_date: str
    collection_id: str
    bands: Tuple[str, ...]
    scale_factor: Optional[float] = None
    scale_divisor: Optional[float] = None
    reduce_scale: float = 250
    max_pixels: float = 1e9
    best_effort: bool = False
    cloud_threshold: Optional[float] = None
    landcover: Optional[LandCoverConfig] = None
    buffer_meters: float = 0
    select_before_filter: bool = False
    clip_scenes: bool = True
    sort_by_time: bool = False
    band_naming: Optional[str] = None
    band_prefix: str = ''
    time_property: str = TIME_START
    value_property: Optional[str] = None
    time_format: Optional[str] = None
    zone_asset: Optional[str] = None
    crop_filter: Optional[Tuple[str, str]] = None
    year_filter: Optional[int] = None
    chart: Optional[ChartConfig] = None
    image_export: Optional[ExportConfig] = None
    table_export: Optional[ExportConfig] = None
    display_band: int = 0
    display_vis: dict = field(default_factory=dict, hash=False)
    season_mean: bool = False

    @property
    def value_column(self):
        return self.value_property or self.index


def _modis_cropland(year):
    return LandCoverConfig(
        dataset_id=MODIS_LANDCOVER,
        band='LC_Type1',
        classes=MODIS_CROPLAND_CLASSES,
        start_date=f'{year}-01-01',
        end_date=f'{year}-12-31',
        label='MODIS Cropland+Mosaic',
    )


UGANDA_REGION = (31.5, 1.3, 32.0, 2.3)

PIPELINES = {
    'cci': PipelineConfig(
        name='cci',
        index='CCI',
        bbox=UGANDA_REGION,
        start_date='2019-03-01',
        end_date='2019-06-30',
        collection_id=SENTINEL2_SR,
        bands=('B8', 'B4', 'B5'),  # NIR, Red, Red edge
        reduce_scale=100,
        max_pixels=1e8,
        best_effort=True,
        cloud_threshold=20,
        chart=ChartConfig(
            title='CCI Time Series for Maize Areas in Region',
            ylabel='CCI',
        ),
    ),
    'evi': PipelineConfig(
        name='evi',
        index='EVI',
        bbox=(33.25, 1.25, 33.75, 1.75),
        start_date='2018-04-01',
        end_date='2020-12-15',
        collection_id=MODIS_VI,
        bands=('EVI',),
        scale_divisor=MODIS_VI_DIVISOR,
        reduce_scale=250,
        landcover=_modis_cropland(2020),
        buffer_meters=100,
        clip_scenes=False,
        sort_by_time=True,
        band_naming='days',
        band_prefix='EVI_day_',
        chart=ChartConfig(
            title='EVI Time Series for Maize (UBOS + MODIS cropland)',
            ylabel='EVI',
            date_format='%m-%d-%Y',
            point_size=4,
            color='#2ca25f',
        ),
        image_export=ExportConfig(
            description='MODIS_EVI_TimeSeries_MaizeOnly_2018_2020',
            folder='EVI_Data',
            scale=250,
            max_pixels=1e9,
        ),
        display_vis={'min': 0, 'max': 1, 'palette': VEGETATION_PALETTE},
    ),
    'lai': PipelineConfig(
        name='lai',
        index='Lai_500m',
        bbox=UGANDA_REGION,
        start_date='2018-09-01',
        end_date='2018-12-15',
        collection_id=MODIS_LAI,
        bands=('Lai_500m',),
        scale_factor=MODIS_LAI_SCALE,
        reduce_scale=500,
        landcover=_modis_cropland(2018),
        select_before_filter=True,
        band_naming='date',
        chart=ChartConfig(
            title='LAI Time Series for Maize Areas (MODIS ∩ UBOS)',
            ylabel='LAI',
        ),
        image_export=ExportConfig(
            description='Region_LAI_MaizeOnly_Growing_Season_2018',
            folder='GEE_Exports',
            scale=500,
            crs='EPSG:4326',
            max_pixels=1e13,
        ),
        display_band=4,
        display_vis={'min': 0, 'max': 7, 'palette': VEGETATION_PALETTE},
    ),
    'ndvi': PipelineConfig(
        name='ndvi',
        index='NDVI',
        bbox=UGANDA_REGION,
        start_date='2018-03-01',
        end_date='2018-06-30',
        collection_id=MODIS_VI,
        bands=('NDVI',),
        scale_divisor=MODIS_VI_DIVISOR,
        reduce_scale=250,  # MOD13Q1 native resolution
        landcover=_modis_cropland(2018),
        band_naming='date',
        chart=ChartConfig(
            title='NDVI Time Series for Maize Areas (MODIS ∩ UBOS)',
            ylabel='NDVI',
        ),
        image_export=ExportConfig(
            description='Region_NDVI_MaizeOnly_Growing_Season_2018',
            folder='GEE_Exports',
            scale=250,
            crs='EPSG:4326',
            max_pixels=1e13,
        ),
        display_vis={'min': 0, 'max': 1, 'palette': NDVI_PALETTE},
    ),
    'ndwi': PipelineConfig(
        name='ndwi',
        index='NDWI',
        bbox=(32.25, 0.0, 33.25, 1.0),
        start_date='2023-06-01',
        end_date='2023-08-31',
        collection_id=LANDSAT8_SR,
        bands=('SR_B3', 'SR_B5'),  # Green, NIR
        reduce_scale=100,
        max_pixels=1e9,
        landcover=LandCoverConfig(
            dataset_id=GFSAD_CROPLAND,
            band='landcover',
            classes=GFSAD_CROPLAND_CLASSES,
            label='GFSAD Cropland',
        ),
        clip_scenes=False,
        time_property='date',
        value_property='mean_ndwi',
        time_format='YYYY-MM-dd',
        chart=ChartConfig(
            title='NDWI Time Series for Maize Areas (UBOS ∩ GFSAD)',
            ylabel='Mean NDWI',
            date_format='%Y-%m-%d',
            point_size=4,
            kind='scatter',
        ),
        image_export=ExportConfig(
            description='Growing_Season_NDWI_MaizeOnly',
            scale=30,
            max_pixels=1e9,
        ),
        table_export=ExportConfig(
            description='NDWI_Time_Series_MaizeOnly',
            scale=100,
            file_format='CSV',
        ),
        display_vis={'min': -1, 'max': 1, 'palette': NDWI_PALETTE},
        season_mean=True,
    ),
}


def validate_dates(start_date, end_date):
    """Parse an ISO date window, raising ConfigurationError unless start < end"""
    try:
        start = date.fromisoformat(str(start_date))
        end = date.fromisoformat(str(end_date))
    except ValueError as e:
        raise ConfigurationError(f"Invalid date window {start_date!r} - {end_date!r}: {e}") from e
    if start >= end:
        raise ConfigurationError(f"start_date {start_date} must be before end_date {end_date}")
    return start, end


def validate_bbox(bbox):
    """Check a [west, south, east, north] rectangle in degrees"""
    if bbox is None or len(bbox) != 4:
        raise ConfigurationError(f"bbox must have four values [west, south, east, north], got {bbox!r}")
    try:
        west, south, east, north = (float(v) for v in bbox)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"bbox values must be numbers, got {bbox!r}") from e
    if not (-180 <= west < east <= 180):
        raise ConfigurationError(f"bbox longitudes out of order or range: {west}, {east}")
    if not (-90 <= south < north <= 90):
        raise ConfigurationError(f"bbox latitudes out of order or range: {south}, {north}")
    return west, south, east, north


def get_pipeline_config(name, **overrides):
    """
    Look up a preset by name and apply overrides

    Args:
        name (str): 'cci', 'evi', 'lai', 'ndvi' or 'ndwi' (case-insensitive)
        **overrides: PipelineConfig fields to replace; None values are ignored

    Returns:
        PipelineConfig: Validated configuration
    """
    key = str(name).lower()
    if key not in PIPELINES:
        raise ConfigurationError(f"Unknown pipeline {name!r}; choose from {', '.join(PIPELINES)}")

    known = {f.name for f in fields(PipelineConfig)}
    overrides = {k: v for k, v in overrides.items() if v is not None}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigurationError(f"Unknown config fields: {', '.join(sorted(unknown))}")
    if 'bbox' in overrides:
        overrides['bbox'] = tuple(validate_bbox(overrides['bbox']))

    config = replace(PIPELINES[key], **overrides)
    validate_dates(config.start_date, config.end_date)
    validate_bbox(config.bbox)
    if config.buffer_meters < 0:
        raise ConfigurationError("buffer_meters cannot be negative")
    return config
