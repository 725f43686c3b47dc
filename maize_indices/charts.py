"""
Charts and map previews

- plot_time_series: date on the x axis, regional mean index on the y axis
- visualize_image: downloads an Earth Engine thumbnail and draws it with matplotlib
- add_legend: colour-class legend (used for the season NDWI map)
"""

import io
import logging

import ee
import matplotlib
import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import requests
from matplotlib.patches import Patch
from PIL import Image

logger = logging.getLogger(__name__)

MASK_VIS = {
    'zones': {'min': 0, 'max': 1, 'palette': ['white', 'cyan']},
    'cropland': {'min': 0, 'max': 1, 'palette': ['white', 'brown']},
    'maize': {'min': 0, 'max': 1, 'palette': ['white', 'green']},
}


def _color(value):
    """Earth Engine palettes use bare hex codes; matplotlib needs the '#'"""
    if value and len(value) in (6, 8) and all(c in '0123456789abcdefABCDEF' for c in value):
        return '#' + value
    return value


def plot_time_series(frame, column, title, ylabel, date_format='%m-%Y', line_width=1,
                     point_size=3, color=None, kind='line', output_path=None, show=False):
    """
    Plot a time series of regional means

    Args:
        frame (pd.DataFrame): Columns 'date' and column
        column (str): Value column
        title (str): Chart title
        ylabel (str): Vertical axis title
        date_format (str): strftime format for the date axis
        line_width (float): Line width; 0 draws points only
        point_size (float): Marker size
        color (str): Series colour
        kind (str): 'line' or 'scatter'
        output_path (str or Path): Save the chart here when given
        show (bool): Open an interactive window

    Returns:
        matplotlib.figure.Figure
    """
    fig, ax = plt.subplots(figsize=(12, 6))
    color = _color(color)
    dates = frame['date']
    if getattr(dates.dt, 'tz', None) is not None:
        dates = dates.dt.tz_localize(None)

    if kind == 'scatter':
        ax.scatter(dates, frame[column], s=point_size ** 2, color=color, label=column, zorder=3)
        if line_width:
            ax.plot(dates, frame[column], linewidth=line_width, color=color, alpha=0.6)
    else:
        ax.plot(dates, frame[column], linewidth=line_width, marker='o',
                markersize=point_size, color=color, label=column)

    ax.set_title(title)
    ax.set_xlabel('Date', fontweight='bold')
    ax.set_ylabel(ylabel, fontweight='bold')
    ax.xaxis.set_major_formatter(mdates.DateFormatter(date_format))
    ax.grid(True, alpha=0.3)
    ax.legend(loc='best')
    fig.autofmt_xdate()
    fig.tight_layout()

    if output_path is not None:
        fig.savefig(output_path, dpi=150)
        logger.info("Saved chart: %s", output_path)
    if show:
        plt.show()
    return fig


def add_legend(ax, palette, names, title):
    """Add a colour-box legend (bottom left) to a map axis"""
    handles = [Patch(facecolor=_color(c), edgecolor='black', label=name)
               for c, name in zip(palette, names)]
    legend = ax.legend(handles=handles, title=title, loc='lower left', framealpha=0.9)
    legend.get_title().set_fontweight('bold')
    return legend


def fetch_thumbnail(image, region, vis_params, dimensions=800, timeout=60):
    """
    Download an Earth Engine thumbnail as a PIL image

    Args:
        image (ee.Image): Image to render
        region (ee.Geometry): Footprint
        vis_params (dict): min/max/palette/bands
        dimensions (int): Longest side in pixels

    Returns:
        PIL.Image.Image
    """
    thumbnail_params = {
        'region': region,
        'dimensions': dimensions,
        'format': 'png'
    }
    thumbnail_params.update(vis_params)

    url = image.getThumbURL(thumbnail_params)
    logger.debug("Thumbnail URL: %s", url)

    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return Image.open(io.BytesIO(response.content))


def visualize_image(image, region, vis_params, title, output_path=None, show=False, legend=None):
    """
    Render an Earth Engine image as a map preview

    Args:
        legend (tuple): (palette, names, title) to draw a class legend

    Returns:
        bool: True if the image was rendered, False if Earth Engine or the download failed
    """
    try:
        img = fetch_thumbnail(image, region, vis_params)
    except (requests.RequestException, ee.EEException) as e:
        logger.warning("Could not render %s: %s", title, e)
        return False

    fig, ax = plt.subplots(figsize=(12, 10))
    ax.imshow(img)
    ax.set_title(f"{title}\nImage Size: {img.size}")
    ax.axis('off')
    if legend is not None:
        add_legend(ax, *legend)
    fig.tight_layout()

    if output_path is not None:
        fig.savefig(output_path, dpi=150)
        logger.info("Saved map: %s", output_path)
    if show:
        plt.show()
    plt.close(fig)
    return True


def use_headless_backend():
    """Switch matplotlib to Agg when charts are only written to files"""
    matplotlib.use('Agg')
