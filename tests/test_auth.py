import pytest

from maize_indices.auth import authenticate_gee, initialize_gee
from maize_indices.errors import EarthEngineInitError


def test_initialize_uses_project(fake_ee):
    assert initialize_gee('my-project') == 'my-project'
    fake_ee.Initialize.assert_called_once_with(project='my-project')


def test_initialize_failure_is_wrapped(fake_ee):
    fake_ee.Initialize.side_effect = Exception('Please authorize access to your Earth Engine account')
    with pytest.raises(EarthEngineInitError) as excinfo:
        initialize_gee('my-project')
    assert 'my-project' in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, Exception)


def test_authenticate(fake_ee):
    authenticate_gee()
    fake_ee.Authenticate.assert_called_once_with()
