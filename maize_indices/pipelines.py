"""
The five maize index pipelines

Every pipeline runs the same steps with its own configuration:
mask -> catalog filter -> per-scene index -> mask/clip -> regional mean ->
chart, map previews and Drive exports.

| Pipeline | Output                                                       |
|----------|--------------------------------------------------------------|
| CCI      | chart + maps                                                 |
| EVI      | multi-band (EVI_day_N), chart, GeoTIFF export, date stamps   |
| LAI      | multi-band (YYYY_MM_dd), chart, GeoTIFF export               |
| NDVI     | multi-band (YYYY_MM_dd), chart, GeoTIFF export               |
| NDWI     | scatter chart, season mean + legend, GeoTIFF and CSV exports |
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import ee
import matplotlib.pyplot as plt
import pandas as pd

from .charts import MASK_VIS, plot_time_series, visualize_image
from .config import NDWI_LEGEND_NAMES, NDWI_PALETTE, get_pipeline_config
from .export import export_image_to_drive, export_table_to_drive, save_time_series_csv
from .processor import IndexProcessor
from .timeseries import features_to_frame, summarize

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    config: object
    collection: object
    time_series: pd.DataFrame
    summary: dict
    output_image: Optional[object] = None
    tasks: List[object] = field(default_factory=list)
    chart_path: Optional[Path] = None
    map_paths: List[Path] = field(default_factory=list)
    csv_path: Optional[Path] = None


def _region_outline(region):
    return ee.Image().byte().paint(
        featureCollection=ee.FeatureCollection([ee.Feature(region)]), color=1, width=2)


def map_layers(processor, output_image=None):
    """
    Map previews for a pipeline: index layer, region outline and the masks

    Returns:
        list: (image, vis_params, title, legend) tuples
    """
    config = processor.config
    region = processor.region
    layers = []

    if output_image is not None:
        if config.season_mean:
            layers.append((output_image, config.display_vis,
                           f'Growing Season {config.index} (Maize only)',
                           (NDWI_PALETTE, NDWI_LEGEND_NAMES, f'{config.index} Legend')))
        else:
            layers.append((output_image.select(config.display_band).clip(region), config.display_vis,
                           f'{config.index} (maize, example date)', None))

    layers.append((_region_outline(region), {'palette': ['red']}, 'Region', None))
    layers.append((processor.zone_mask.clip(region), MASK_VIS['zones'], 'UBOS Maize Mask', None))
    if processor.cropland_mask is not None:
        label = config.landcover.label
        layers.append((processor.cropland_mask.clip(region), MASK_VIS['cropland'], label, None))
        layers.append((processor.maize_mask.clip(region), MASK_VIS['maize'],
                       f'Maize Mask ({label} ∩ UBOS)', None))
    return layers


def run_pipeline(config, export=True, show=False, output_dir=None, verbose=True):
    """
    Run one index pipeline end to end

    Args:
        config (PipelineConfig): Pipeline settings
        export (bool): Start the configured Drive export tasks
        show (bool): Open charts and maps in interactive windows
        output_dir (str or Path): Write the chart, maps and a CSV of the series here
        verbose (bool): Log processing details

    Returns:
        PipelineResult: An empty catalog gives an empty time series and no outputs
    """
    logger.info("=" * 60)
    logger.info("%s TIME SERIES FOR MAIZE AREAS", config.index)
    logger.info("=" * 60)

    processor = IndexProcessor(config, verbose=verbose)
    collection = processor.process_collection()

    if processor.scene_count == 0:
        frame = features_to_frame([], config.time_property, config.value_column)
        return PipelineResult(config=config, collection=collection, time_series=frame,
                              summary=summarize(frame, config.value_column))

    frame = processor.fetch_time_series(collection)
    summary = summarize(frame, config.value_column)
    if summary['count']:
        logger.info("%s mean %.4f (min %.4f, max %.4f) over %d scenes, %s to %s",
                    config.index, summary['mean'], summary['min'], summary['max'],
                    summary['count'], summary['first_date'], summary['last_date'])
    else:
        logger.warning("No %s values over maize pixels in the region", config.index)

    result = PipelineResult(config=config, collection=collection, time_series=frame, summary=summary)

    if config.season_mean:
        result.output_image = processor.season_mean(collection)
    elif config.band_naming:
        result.output_image = processor.to_multiband(collection)

    if config.band_naming == 'days':
        stamped = processor.add_date_stamps(collection)
        dates = stamped.aggregate_array('date_string').getInfo()
        logger.info("%s images with dates: %s", config.index, dates)

    if output_dir is not None:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        result.csv_path = save_time_series_csv(frame, output_dir / f'{config.name}_time_series.csv')

    if config.chart is not None and not frame.empty:
        chart_path = output_dir / f'{config.name}_time_series.png' if output_dir is not None else None
        fig = plot_time_series(
            frame, config.value_column,
            title=config.chart.title,
            ylabel=config.chart.ylabel,
            date_format=config.chart.date_format,
            line_width=config.chart.line_width,
            point_size=config.chart.point_size,
            color=config.chart.color,
            kind=config.chart.kind,
            output_path=chart_path,
            show=show,
        )
        plt.close(fig)
        result.chart_path = chart_path

    if show or output_dir is not None:
        for i, (image, vis, title, legend) in enumerate(map_layers(processor, result.output_image)):
            map_path = output_dir / f'{config.name}_map_{i}.png' if output_dir is not None else None
            if visualize_image(image, processor.region, vis, title,
                               output_path=map_path, show=show, legend=legend) and map_path:
                result.map_paths.append(map_path)

    if export:
        if config.image_export is not None and result.output_image is not None:
            target = config.image_export
            result.tasks.append(export_image_to_drive(
                result.output_image,
                description=target.description,
                region=processor.region,
                scale=target.scale,
                folder=target.folder,
                crs=target.crs,
                file_format=target.file_format,
                max_pixels=target.max_pixels,
            ))
        if config.table_export is not None:
            target = config.table_export
            result.tasks.append(export_table_to_drive(
                processor.time_series(collection),
                description=target.description,
                file_format=target.file_format,
                folder=target.folder,
            ))

    return result


def run_cci(export=True, show=False, output_dir=None, verbose=True, **overrides):
    """CCI over UBOS maize zones from Sentinel-2 (cloud < 20%)"""
    return run_pipeline(get_pipeline_config('cci', **overrides), export, show, output_dir, verbose)


def run_evi(export=True, show=False, output_dir=None, verbose=True, **overrides):
    """MODIS EVI over UBOS zones ∩ MODIS cropland/mosaic"""
    return run_pipeline(get_pipeline_config('evi', **overrides), export, show, output_dir, verbose)


def run_lai(export=True, show=False, output_dir=None, verbose=True, **overrides):
    """MODIS LAI over UBOS zones ∩ MODIS cropland/mosaic"""
    return run_pipeline(get_pipeline_config('lai', **overrides), export, show, output_dir, verbose)


def run_ndvi(export=True, show=False, output_dir=None, verbose=True, **overrides):
    """MODIS NDVI over UBOS zones ∩ MODIS cropland/mosaic"""
    return run_pipeline(get_pipeline_config('ndvi', **overrides), export, show, output_dir, verbose)


def run_ndwi(export=True, show=False, output_dir=None, verbose=True, **overrides):
    """Landsat 8 NDWI over UBOS zones ∩ GFSAD cropland"""
    return run_pipeline(get_pipeline_config('ndwi', **overrides), export, show, output_dir, verbose)
