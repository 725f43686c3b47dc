import pytest

from maize_indices.config import (PIPELINES, PROJECT_ID, get_pipeline_config, get_project_id,
                                  validate_bbox, validate_dates)
from maize_indices.errors import ConfigurationError


def test_all_five_pipelines_are_defined():
    assert sorted(PIPELINES) == ['cci', 'evi', 'lai', 'ndvi', 'ndwi']


def test_pipeline_lookup_is_case_insensitive():
    assert get_pipeline_config('NDVI') == PIPELINES['ndvi']


def test_unknown_pipeline():
    with pytest.raises(ConfigurationError, match='Unknown pipeline'):
        get_pipeline_config('savi')


def test_overrides_replace_fields():
    config = get_pipeline_config('ndvi', start_date='2019-03-01', end_date='2019-06-30')
    assert (config.start_date, config.end_date) == ('2019-03-01', '2019-06-30')
    assert config.collection_id == PIPELINES['ndvi'].collection_id
    # presets are untouched
    assert PIPELINES['ndvi'].start_date == '2018-03-01'


def test_none_overrides_are_ignored():
    assert get_pipeline_config('lai', start_date=None, bbox=None) == PIPELINES['lai']


def test_unknown_override_field():
    with pytest.raises(ConfigurationError, match='Unknown config fields'):
        get_pipeline_config('cci', cloud_cover=10)


def test_bbox_override_is_validated():
    config = get_pipeline_config('cci', bbox=[32, 0.5, 33, 1.5])
    assert config.bbox == (32.0, 0.5, 33.0, 1.5)
    with pytest.raises(ConfigurationError):
        get_pipeline_config('cci', bbox=[33, 0.5, 32, 1.5])


def test_negative_buffer_rejected():
    with pytest.raises(ConfigurationError):
        get_pipeline_config('evi', buffer_meters=-5)


@pytest.mark.parametrize('start, end', [
    ('2018-06-30', '2018-03-01'),
    ('2018-03-01', '2018-03-01'),
    ('2018-13-01', '2018-12-01'),
    ('yesterday', '2018-12-01'),
])
def test_invalid_date_windows(start, end):
    with pytest.raises(ConfigurationError):
        validate_dates(start, end)


@pytest.mark.parametrize('bbox', [
    None,
    [31.5, 1.3, 32.0],
    [31.5, 1.3, 'east', 2.3],
    [31.5, 2.3, 32.0, 1.3],
    [31.5, 1.3, 190.0, 2.3],
])
def test_invalid_bboxes(bbox):
    with pytest.raises(ConfigurationError):
        validate_bbox(bbox)


def test_cci_preset():
    config = PIPELINES['cci']
    assert config.collection_id == 'COPERNICUS/S2_SR'
    assert config.bands == ('B8', 'B4', 'B5')
    assert config.cloud_threshold == 20
    assert config.best_effort is True
    assert config.reduce_scale == 100
    assert config.max_pixels == 1e8
    assert config.landcover is None
    assert config.image_export is None


def test_evi_preset_keeps_applied_100m_buffer():
    config = PIPELINES['evi']
    assert config.buffer_meters == 100
    assert config.sort_by_time is True
    assert config.band_naming == 'days'
    assert config.landcover.start_date == '2020-01-01'
    assert config.image_export.folder == 'EVI_Data'


def test_only_cci_filters_on_cloud_cover():
    assert [name for name, c in PIPELINES.items() if c.cloud_threshold is not None] == ['cci']


def test_ndwi_preset_exports_image_and_table():
    config = PIPELINES['ndwi']
    assert config.landcover.classes == (2,)
    assert config.value_column == 'mean_ndwi'
    assert config.time_property == 'date'
    assert config.image_export.scale == 30
    assert config.table_export.file_format == 'CSV'


def test_project_id_resolution(monkeypatch):
    monkeypatch.delenv('EE_PROJECT', raising=False)
    assert get_project_id() == PROJECT_ID
    monkeypatch.setenv('EE_PROJECT', 'from-env')
    assert get_project_id() == 'from-env'
    assert get_project_id('explicit') == 'explicit'


def test_modis_vi_presets_divide_and_lai_multiplies():
    assert PIPELINES['evi'].scale_divisor == 10000
    assert PIPELINES['ndvi'].scale_divisor == 10000
    assert PIPELINES['ndvi'].scale_factor is None
    assert PIPELINES['lai'].scale_factor == 0.1


def test_configs_are_hashable():
    configs = {get_pipeline_config(name) for name in PIPELINES}
    assert len(configs) == 5
    assert get_pipeline_config('ndwi') in configs
    assert hash(get_pipeline_config('evi')) == hash(PIPELINES['evi'])
