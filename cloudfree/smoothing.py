'''
Tools for cleaning up a spectral index (e.g., NDVI) time series after cloud
masking, so that it charts as a smooth line. Both filters work per distinct
timestamp, reading a window of neighboring images (by acquisition time) and
writing one single-band image with that timestamp. Contains:

* `filter_extremes()`
* `index_series()`
* `smooth_dataset()`
'''

import logging
import numbers
import warnings
import numpy as np
from cloudfree.eos import CURRENT_WINDOW_DAYS, DEFAULT_EXTREME_THRESHOLD, EXTREME_WINDOW_DAYS, INDEX_BAND, MILLIS_PER_DAY
from cloudfree.errors import DegenerateDivision
from cloudfree.image import Image, timestamps
from cloudfree.utils import map_ordered, mean_composite

logger = logging.getLogger(__name__)


def __within__(images, t, days, closed=True):
    # The images acquired within the given number of days of t
    if closed:
        return [i for i in images if abs(i.timestamp - t) <= days * MILLIS_PER_DAY]

    return [i for i in images if abs(i.timestamp - t) < days * MILLIS_PER_DAY]


def __filter_extreme__(t, neighbors, current, threshold, band):
    avg = mean_composite(neighbors, band)
    cur = mean_composite(current, band)
    denom = avg + cur
    degenerate = np.ma.filled(denom == 0, False)

    # Where avg + cur is zero the difference is defined to be zero
    with np.errstate(divide = 'ignore', invalid = 'ignore'):
        dif = np.ma.where(degenerate, 0.0, (avg - cur) / denom)

    result = np.ma.where(dif > threshold, avg, cur)
    return (Image({band: result}, t), int(degenerate.sum()))


def __smooth__(t, neighbors, band):
    return Image({band: mean_composite(neighbors, band)}, t)


def filter_extremes(
        images, threshold=DEFAULT_EXTREME_THRESHOLD, band=INDEX_BAND,
        window=EXTREME_WINDOW_DAYS, processes=1, progress=None):
    '''
    Filters out "extreme" values from a time series. For each distinct
    timestamp, the mean of the band over the images within `window` days
    either side (avg) is compared to the mean over the images acquired less
    than a day away (cur); where the normalized difference
    (avg - cur) / (avg + cur) exceeds the threshold, the value is replaced
    with avg. Where avg + cur is zero the difference is taken to be zero
    (the value is kept) and a DegenerateDivision warning is issued.

    Can be applied twice with a decreasing threshold for better results.
    Returns a list of single-band images, one per distinct timestamp in
    order of first appearance. Arguments:
        images      A sequence of Image instances with the index band
        threshold   The normalized difference that must be exceeded for a
                    value to be considered extreme; 0.07 is recommended for
                    NDVI after cloud masking
        band        The name of the index band
        window      The half-width of the neighborhood, in days
        processes   The number of worker processes
        progress    Optional callable, progress(done, total), invoked
                    after each timestamp
    '''
    images = list(images) # Every window reads this snapshot
    dates = timestamps(images)
    tasks = [
        (t, __within__(images, t, window),
            __within__(images, t, CURRENT_WINDOW_DAYS, closed = False),
            threshold, band)
        for t in dates
    ]
    results, _ = map_ordered(__filter_extreme__, tasks,
        processes = processes, progress = progress)

    degenerate = sum(n for _, n in results)
    if degenerate:
        logger.warning('%d pixel(s) had avg + cur == 0', degenerate)
        warnings.warn('Zero denominator at %d pixel(s); those values were '
            'kept unchanged' % degenerate, DegenerateDivision, stacklevel = 2)

    return [img for img, _ in results]


def smooth_dataset(
        images, window_size, band=INDEX_BAND, processes=1, progress=None):
    '''
    Smooths a time series by replacing the value at each distinct timestamp
    with the mean of the band over all images acquired within window_size
    days either side (inclusive). Returns a list of single-band images, one
    per distinct timestamp in order of first appearance. Arguments:
        images      A sequence of Image instances with the index band
        window_size The number of days to average across on each side
        band        The name of the index band
        processes   The number of worker processes
        progress    Optional callable, progress(done, total), invoked
                    after each timestamp
    '''
    if not isinstance(window_size, numbers.Real) or window_size < 0:
        raise ValueError('window_size must be a non-negative number of days')

    images = list(images)
    tasks = [
        (t, __within__(images, t, window_size), band)
        for t in timestamps(images)
    ]
    results, _ = map_ordered(__smooth__, tasks, processes = processes,
        progress = progress)
    return results


def index_series(images, band=INDEX_BAND, region=None):
    '''
    Reduces each image to the mean of the band over a region, ignoring
    masked pixels; returns a list of (timestamp, mean) pairs in the order of
    the images. The mean is NaN where the region has no valid pixels.
    Arguments:
        images  A sequence of Image instances
        band    The name of the band to reduce
        region  Optional 2-D Boolean array, True inside the region
    '''
    series = []
    for img in images:
        arr = np.ma.masked_invalid(
            np.ma.asarray(img.band(band), dtype = np.float64))
        if region is not None:
            arr = np.ma.masked_where(~np.asarray(region, dtype = bool), arr)

        valid = arr.count()
        series.append((img.timestamp, float(arr.mean()) if valid else np.nan))

    return series
