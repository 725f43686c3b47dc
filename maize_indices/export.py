"""
Exports to Google Drive

Raster exports write GeoTIFFs of the maize-only index images; table exports
write the regional-mean time series as CSV. Tasks run on Earth Engine and
their output is not tracked here beyond the task state.
"""

import logging
from pathlib import Path

import ee

from .errors import ExportError

logger = logging.getLogger(__name__)


def _start(task, description):
    try:
        task.start()
    except ee.EEException as e:
        raise ExportError(f"Could not start export {description}: {e}") from e
    logger.info("Started export task: %s", description)
    return task


def export_image_to_drive(image, description, region, scale, folder=None, crs=None,
                          file_format='GeoTIFF', max_pixels=1e9, start=True):
    """
    Export an image to Google Drive

    Args:
        image (ee.Image): Image to export
        description (str): Task name, also used as the file name
        region (ee.Geometry): Export footprint
        scale (float): Pixel size in metres
        folder (str): Drive folder, Drive root when None
        crs (str): Output CRS, e.g. 'EPSG:4326'; native projection when None
        file_format (str): 'GeoTIFF' by default
        max_pixels (float): Pixel cap for the export
        start (bool): Start the task immediately

    Returns:
        ee.batch.Task
    """
    params = dict(
        image=image,
        description=description,
        region=region,
        scale=scale,
        fileFormat=file_format,
        maxPixels=max_pixels,
    )
    if folder:
        params['folder'] = folder
    if crs:
        params['crs'] = crs

    try:
        task = ee.batch.Export.image.toDrive(**params)
    except ee.EEException as e:
        raise ExportError(f"Could not create export {description}: {e}") from e
    return _start(task, description) if start else task


def export_table_to_drive(collection, description, file_format='CSV', folder=None, start=True):
    """
    Export a FeatureCollection (e.g. a time series) to Google Drive

    Returns:
        ee.batch.Task
    """
    params = dict(
        collection=collection,
        description=description,
        fileFormat=file_format,
    )
    if folder:
        params['folder'] = folder

    try:
        task = ee.batch.Export.table.toDrive(**params)
    except ee.EEException as e:
        raise ExportError(f"Could not create export {description}: {e}") from e
    return _start(task, description) if start else task


def task_status(task):
    """Current state of an export task ('READY', 'RUNNING', 'COMPLETED', ...)"""
    return task.status().get('state', 'UNKNOWN')


def save_time_series_csv(frame, path):
    """Write a local copy of the time series"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    out = frame.copy()
    out['date'] = out['date'].dt.strftime('%Y-%m-%d')
    out.to_csv(path, index=False)
    logger.info("Saved time series: %s", path)
    return path
