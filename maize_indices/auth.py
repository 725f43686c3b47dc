"""Earth Engine authentication and initialization"""

import logging

import ee

from .config import get_project_id
from .errors import EarthEngineInitError

logger = logging.getLogger(__name__)


def authenticate_gee():
    """
    One-time authentication setup for Google Earth Engine
    Opens a browser to sign in with a Google account
    """
    ee.Authenticate()
    logger.info("Earth Engine authentication successful")


def initialize_gee(project=None):
    """
    Initialize Google Earth Engine

    Args:
        project (str): Google Cloud project ID; falls back to EE_PROJECT / PROJECT_ID

    Returns:
        str: The project that was initialized
    """
    project = get_project_id(project)
    try:
        ee.Initialize(project=project)
    except Exception as e:
        logger.error("Error initializing GEE: %s", e)
        logger.error("Run 'earthengine authenticate' and check that the Earth Engine API "
                     "is enabled for project %s", project)
        raise EarthEngineInitError(f"Could not initialize Earth Engine for project {project}") from e
    logger.info("Google Earth Engine initialized successfully (project %s)", project)
    return project
