from unittest.mock import MagicMock

import ee
import matplotlib
import pytest

matplotlib.use('Agg')

EE_MODULES = [
    'maize_indices.auth',
    'maize_indices.region',
    'maize_indices.masks',
    'maize_indices.indices',
    'maize_indices.processor',
    'maize_indices.export',
    'maize_indices.pipelines',
]


def make_collection(count=3):
    """ImageCollection mock whose filters and maps return itself"""
    collection = MagicMock(name='ImageCollection')
    for method in ('filterBounds', 'filterDate', 'filter', 'select', 'map', 'sort'):
        getattr(collection, method).return_value = collection
    collection.size.return_value.getInfo.return_value = count
    return collection


@pytest.fixture
def fake_ee(monkeypatch):
    """Replace the ee module in every package module with one MagicMock"""
    fake = MagicMock(name='ee')
    fake.EEException = ee.EEException
    fake.ImageCollection.return_value = make_collection()
    fake.FeatureCollection.return_value.getInfo.return_value = {'features': []}
    for module in EE_MODULES:
        monkeypatch.setattr(f'{module}.ee', fake)
    return fake


@pytest.fixture
def features():
    """Reduced features as returned by getInfo(), one with no maize pixels"""
    return [
        {'type': 'Feature', 'geometry': None,
         'properties': {'system:time_start': 1530403200000, 'NDVI': 0.61}},   # 2018-07-01
        {'type': 'Feature', 'geometry': None,
         'properties': {'system:time_start': 1525132800000, 'NDVI': 0.42}},   # 2018-05-01
        {'type': 'Feature', 'geometry': None,
         'properties': {'system:time_start': 1527811200000, 'NDVI': None}},   # 2018-06-01
        {'type': 'Feature', 'geometry': None,
         'properties': {'system:time_start': 1520208000000, 'NDVI': 0.35}},   # 2018-03-05
    ]
