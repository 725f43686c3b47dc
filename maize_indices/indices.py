"""Per-scene index images on Earth Engine"""

import ee

from .config import TIME_START


def calculate_cci(image, nir='B8', red='B4', red_edge='B5'):
    """
    Calculate CCI from Sentinel-2 bands

    CCI Formula: (B8 - B4) / (B8 - B5)

    Args:
        image (ee.Image): Sentinel-2 surface reflectance scene

    Returns:
        ee.Image: Single 'CCI' band carrying the scene's system:time_start
    """
    nir_band = image.select(nir)
    red_band = image.select(red)
    red_edge_band = image.select(red_edge)

    cci = nir_band.subtract(red_band).divide(nir_band.subtract(red_edge_band))

    return ee.Image(cci.rename('CCI').copyProperties(image, [TIME_START]))


def calculate_ndwi(image, green='SR_B3', nir='SR_B5'):
    """
    Add an NDWI band to a Landsat 8 scene

    NDWI Formula: (SR_B3 - SR_B5) / (SR_B3 + SR_B5)
    """
    ndwi = image.normalizedDifference([green, nir]).rename('NDWI')
    return image.addBands(ndwi)


def scale_band(image, band, factor=None, divisor=None):
    """Select a product-scaled band and convert it to physical units"""
    selected = image.select(band)
    if divisor is not None:
        scaled = selected.divide(divisor)
    else:
        scaled = selected.multiply(factor)
    return ee.Image(scaled.copyProperties(image, [TIME_START]))


def index_function(config):
    """
    Build the per-scene index function for a pipeline

    Args:
        config (PipelineConfig): Pipeline settings

    Returns:
        callable: ee.Image -> ee.Image, for ImageCollection.map
    """
    if config.index == 'CCI':
        return lambda image: calculate_cci(image, *config.bands)
    if config.index == 'NDWI':
        return lambda image: calculate_ndwi(image, *config.bands)
    if config.scale_factor is not None or config.scale_divisor is not None:
        band = config.bands[0]
        return lambda image: scale_band(image, band, config.scale_factor, config.scale_divisor)
    raise ValueError(f"No index formula for {config.index}")
