"""
Vegetation and water index time series (CCI, EVI, LAI, NDVI, NDWI) over the
maize-growing zones of Uganda, computed on Google Earth Engine.
"""

from .config import PIPELINES, PipelineConfig, get_pipeline_config
from .errors import ConfigurationError, EarthEngineInitError, ExportError, MaizeIndexError
from .pipelines import (PipelineResult, run_cci, run_evi, run_lai, run_ndvi, run_ndwi,
                        run_pipeline)
from .processor import IndexProcessor

__version__ = '0.1.0'
