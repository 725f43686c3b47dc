"""
Time series of regional means

Turns reduced Earth Engine features (one per scene) into a pandas DataFrame
with a 'date' column and one value column, and checks the window/order rules:
every record falls in [start, end] and sorted dates never decrease.
"""

import logging

import pandas as pd

logger = logging.getLogger(__name__)


def parse_timestamp(value):
    """Millisecond epoch (system:time_start) or date string -> UTC pandas Timestamp"""
    if value is None:
        return pd.NaT
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return pd.to_datetime(value, unit='ms', utc=True)
    return pd.to_datetime(value, utc=True)


def features_to_frame(features, time_property, value_property):
    """
    Build the time-series table from reduced features

    Args:
        features (list): Feature dicts as returned by FeatureCollection.getInfo()['features']
        time_property (str): Property holding the scene time
        value_property (str): Property holding the regional mean

    Returns:
        pd.DataFrame: Columns 'date' and value_property; scenes with no valid
            pixels (null mean) are dropped
    """
    records = []
    skipped = 0
    for feature in features:
        props = feature.get('properties', {}) if isinstance(feature, dict) else {}
        value = props.get(value_property)
        if value is None:
            skipped += 1
            continue
        records.append({
            'date': parse_timestamp(props.get(time_property)),
            value_property: float(value),
        })

    if skipped:
        logger.info("Skipped %d scenes with no valid %s values", skipped, value_property)

    frame = pd.DataFrame(records, columns=['date', value_property])
    frame['date'] = pd.to_datetime(frame['date'], utc=True)
    return frame


def sort_by_date(frame):
    return frame.sort_values('date', kind='mergesort').reset_index(drop=True)


def _window(start, end):
    start = pd.Timestamp(start)
    end = pd.Timestamp(end)
    if start.tzinfo is None:
        start = start.tz_localize('UTC')
    if end.tzinfo is None:
        end = end.tz_localize('UTC')
    # A date-only end includes the whole day
    if end == end.normalize():
        end = end + pd.Timedelta(days=1) - pd.Timedelta(microseconds=1)
    return start, end


def filter_window(frame, start, end):
    """Keep records whose date lies in [start, end] (end date inclusive)"""
    start, end = _window(start, end)
    mask = (frame['date'] >= start) & (frame['date'] <= end)
    return frame.loc[mask].reset_index(drop=True)


def is_within_window(frame, start, end):
    start, end = _window(start, end)
    return bool(((frame['date'] >= start) & (frame['date'] <= end)).all())


def is_monotonic(frame):
    """True when dates are non-decreasing"""
    return bool(frame['date'].is_monotonic_increasing)


def summarize(frame, column):
    """
    Summary statistics of a time series

    Returns:
        dict: count, mean, min, max and first/last date; values are None for an empty series
    """
    if frame.empty:
        return {'count': 0, 'mean': None, 'min': None, 'max': None,
                'first_date': None, 'last_date': None}

    values = frame[column]
    return {
        'count': int(values.count()),
        'mean': float(values.mean()),
        'min': float(values.min()),
        'max': float(values.max()),
        'first_date': frame['date'].min().strftime('%Y-%m-%d'),
        'last_date': frame['date'].max().strftime('%Y-%m-%d'),
    }
