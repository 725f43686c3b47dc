"""
Index formulas on plain numbers and numpy arrays

CCI  = (NIR - Red) / (NIR - RedEdge)
NDWI = (Green - NIR) / (Green + NIR)

Product-scaled MODIS bands are converted with apply_scale:
- MOD13Q1 NDVI/EVI: raw / 10000
- MOD15A2H Lai_500m: raw * 0.1

A zero denominator gives NaN, the same as a masked pixel.
"""

import numpy as np


def _ratio(numerator, denominator):
    with np.errstate(divide='ignore', invalid='ignore'):
        result = np.true_divide(numerator, denominator)
    result = np.where(np.asarray(denominator) == 0, np.nan, result)
    return result.item() if np.ndim(result) == 0 else result


def cci(nir, red, red_edge):
    """Chlorophyll content index from NIR, red and red-edge reflectance"""
    nir = np.asarray(nir, dtype=float)
    return _ratio(nir - np.asarray(red, dtype=float), nir - np.asarray(red_edge, dtype=float))


def normalized_difference(a, b):
    """(a - b) / (a + b)"""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    return _ratio(a - b, a + b)


def ndwi(green, nir):
    """Normalized difference water index (McFeeters) from green and NIR reflectance"""
    return normalized_difference(green, nir)


def apply_scale(raw, factor=None, divisor=None):
    """Convert stored integer values to physical units (raw * factor or raw / divisor)"""
    raw = np.asarray(raw, dtype=float)
    result = raw / divisor if divisor is not None else raw * factor
    return result.item() if np.ndim(result) == 0 else result
