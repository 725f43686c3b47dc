"""Exceptions raised by the maize index pipelines."""


class MaizeIndexError(Exception):
    """Base class for all pipeline errors"""


class ConfigurationError(MaizeIndexError):
    """Unknown pipeline, bad override or invalid region/date window"""


class EarthEngineInitError(MaizeIndexError):
    """Earth Engine could not be initialized"""


class ExportError(MaizeIndexError):
    """An export task could not be created or started"""
