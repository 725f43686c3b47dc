from unittest.mock import MagicMock

import ee
import pandas as pd
import pytest

from maize_indices.errors import ExportError
from maize_indices.export import (export_image_to_drive, export_table_to_drive,
                                  save_time_series_csv, task_status)


def test_image_export_parameters(fake_ee):
    image, region = MagicMock(name='image'), MagicMock(name='region')
    task = export_image_to_drive(image, 'Region_NDVI_MaizeOnly_Growing_Season_2018', region,
                                 scale=250, folder='GEE_Exports', crs='EPSG:4326', max_pixels=1e13)

    fake_ee.batch.Export.image.toDrive.assert_called_once_with(
        image=image,
        description='Region_NDVI_MaizeOnly_Growing_Season_2018',
        region=region,
        scale=250,
        fileFormat='GeoTIFF',
        maxPixels=1e13,
        folder='GEE_Exports',
        crs='EPSG:4326',
    )
    assert task is fake_ee.batch.Export.image.toDrive.return_value
    task.start.assert_called_once_with()


def test_image_export_omits_unset_folder_and_crs(fake_ee):
    export_image_to_drive(MagicMock(), 'Growing_Season_NDWI_MaizeOnly', MagicMock(), scale=30)
    kwargs = fake_ee.batch.Export.image.toDrive.call_args.kwargs
    assert 'folder' not in kwargs
    assert 'crs' not in kwargs


def test_export_without_start(fake_ee):
    task = export_image_to_drive(MagicMock(), 'x', MagicMock(), scale=30, start=False)
    task.start.assert_not_called()


def test_table_export(fake_ee):
    collection = MagicMock(name='series')
    task = export_table_to_drive(collection, 'NDWI_Time_Series_MaizeOnly')
    fake_ee.batch.Export.table.toDrive.assert_called_once_with(
        collection=collection,
        description='NDWI_Time_Series_MaizeOnly',
        fileFormat='CSV',
    )
    task.start.assert_called_once_with()


def test_failed_start_raises_export_error(fake_ee):
    fake_ee.batch.Export.image.toDrive.return_value.start.side_effect = ee.EEException('quota')
    with pytest.raises(ExportError, match='quota'):
        export_image_to_drive(MagicMock(), 'x', MagicMock(), scale=30)


def test_task_status():
    task = MagicMock()
    task.status.return_value = {'state': 'RUNNING', 'id': 'ABC'}
    assert task_status(task) == 'RUNNING'
    task.status.return_value = {}
    assert task_status(task) == 'UNKNOWN'


def test_save_time_series_csv(tmp_path):
    frame = pd.DataFrame({
        'date': pd.to_datetime(['2023-06-01', '2023-06-17'], utc=True),
        'mean_ndwi': [-0.18, -0.21],
    })
    path = save_time_series_csv(frame, tmp_path / 'out' / 'ndwi.csv')
    assert path.read_text().splitlines() == ['date,mean_ndwi', '2023-06-01,-0.18', '2023-06-17,-0.21']
