'''
Command line entry point for the maize index pipelines.

    python -m maize_indices ndvi --no-export --output-dir out/
    python -m maize_indices all --start 2019-03-01 --end 2019-06-30
    python -m maize_indices evi --center 33.5 1.5 --size 20000 20000
'''

import logging
import sys

import click
import ee

from .auth import authenticate_gee, initialize_gee
from .charts import use_headless_backend
from .config import PIPELINES, get_pipeline_config
from .errors import MaizeIndexError
from .pipelines import run_pipeline
from .region import box_from_center

logger = logging.getLogger('maize_indices')


def configure_logging(verbose=True):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


@click.command()
@click.argument('index', type=click.Choice(sorted(PIPELINES) + ['all'], case_sensitive=False))
@click.option('--start', 'start_date', default=None, help='start of the date window (YYYY-MM-DD)')
@click.option('--end', 'end_date', default=None, help='end of the date window (YYYY-MM-DD)')
@click.option('--bbox', nargs=4, type=float, default=None, help='region as WEST SOUTH EAST NORTH')
@click.option('--center', nargs=2, type=float, default=None,
              help='region centre as LON LAT, instead of --bbox')
@click.option('--size', nargs=2, type=float, default=(50000, 50000), show_default=True,
              help='WIDTH HEIGHT in metres of the box around --center')
@click.option('--buffer', 'buffer_meters', type=float, default=None, help='buffer around the region in metres')
@click.option('--project', default=None, help='Google Cloud project for Earth Engine')
@click.option('--authenticate', is_flag=True, help='run the Earth Engine browser sign-in first')
@click.option('--no-export', is_flag=True, help='skip the Google Drive export tasks')
@click.option('--show', is_flag=True, help='open charts and map previews')
@click.option('-o', '--output-dir', default=None, type=click.Path(file_okay=False),
              help='write charts, maps and the time series CSV here')
@click.option('-q', '--quiet', is_flag=True, help='only log warnings and errors')
def main(index, start_date, end_date, bbox, center, size, buffer_meters, project, authenticate,
         no_export, show, output_dir, quiet):
    '''Compute an index time series over the UBOS maize zones (INDEX: cci, evi, lai, ndvi, ndwi or all).'''
    if bbox and center:
        raise click.UsageError('use either --bbox or --center, not both')

    configure_logging(not quiet)
    if not show:
        use_headless_backend()

    if center:
        bbox = box_from_center(center[0], center[1], size[0], size[1])

    names = sorted(PIPELINES) if index.lower() == 'all' else [index.lower()]
    failed = []
    try:
        if authenticate:
            authenticate_gee()
        initialize_gee(project)
        configs = [get_pipeline_config(name, start_date=start_date, end_date=end_date,
                                       bbox=bbox or None, buffer_meters=buffer_meters)
                   for name in names]
    except MaizeIndexError as e:
        logger.error("%s", e)
        sys.exit(1)

    for config in configs:
        try:
            run_pipeline(config, export=not no_export, show=show,
                         output_dir=output_dir, verbose=not quiet)
        except (MaizeIndexError, ee.EEException) as e:
            logger.error("%s pipeline failed: %s", config.index, e)
            failed.append(config.name)

    if failed:
        logger.error("Failed pipelines: %s", ', '.join(failed))
        sys.exit(1)
