'''
Utilities and convenience functions for validating parameters and
manipulating raster arrays, masks and image collections.
Contains:

* `binary_mask()`
* `clamp()`
* `disk()`
* `focal_max()`
* `focal_min()`
* `map_ordered()`
* `mean_composite()`
* `normalized_difference()`
'''

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
import numbers
import numpy as np
from scipy.ndimage import maximum_filter, minimum_filter
from cloudfree.image import Image

logger = logging.getLogger(__name__)


def binary_mask(image, mask, invert=False):
    '''
    Applies a binary mask (data in [0,1]) to every band of an image, where
    pixels with a value of 1 are pixels to be masked out; returns a new
    Image of masked arrays with the same timestamp. Pixels already masked
    in the input stay masked; unmasked pixel values are never changed.
    Arguments:
        image   An Image instance
        mask    A 2-D NumPy array with the same shape as the image's bands
        invert  Invert the mask? (tranpose meaning of 0 and 1); defaults
                to False.
    '''
    maskr = np.asarray(mask)
    if image.shape is not None and maskr.shape != image.shape:
        raise ValueError('Raster and mask do not have the same shape')

    # Convert to Boolean; True where the pixel is to be nulled
    maskr = maskr < 1 if invert else maskr > 0

    bands = []
    for name, arr in image.bands.items():
        prior = np.ma.getmaskarray(arr)
        bands.append((name, np.ma.masked_array(np.ma.getdata(arr).copy(),
            mask = np.logical_or(prior, maskr))))

    return Image(bands, image.timestamp)


def clamp(value, min_value, max_value, default):
    '''
    Returns value if it is a number in the closed interval
    [min_value, max_value], otherwise returns the default. Never raises;
    a malformed parameter is replaced rather than reported. Arguments:
        value       The candidate parameter value
        min_value   The smallest acceptable value
        max_value   The largest acceptable value
        default     The value to substitute
    '''
    # bool is a numbers.Number but is not a meaningful parameter value
    if (not isinstance(value, numbers.Real)) or isinstance(value, bool)\
            or value != value:
        logger.debug('Parameter %r is not a number; using %r', value, default)
        return default

    if value < min_value or value > max_value:
        logger.debug('Parameter %r outside [%r, %r]; using %r', value,
            min_value, max_value, default)
        return default

    return value


def disk(radius):
    '''
    Generates a circular, binary structuring element (footprint) of the given
    radius in pixels, e.g., for radius=1:
        0 1 0
        1 1 1
        0 1 0
    A radius of 0 gives a single-pixel footprint. Arguments:
        radius  The radius of the circle, in pixels
    '''
    r = int(np.floor(radius))
    y, x = np.ogrid[-r:r + 1, -r:r + 1]
    return (x * x + y * y) <= radius * radius


def focal_max(arr, radius):
    '''
    Replaces each pixel with the maximum within a circular neighborhood;
    this is a morphological dilation for binary arrays. Arguments:
        arr     A 2-D NumPy array
        radius  The radius of the neighborhood, in pixels
    '''
    return maximum_filter(arr, footprint = disk(radius), mode = 'nearest')


def focal_min(arr, radius):
    '''
    Replaces each pixel with the minimum within a circular neighborhood;
    this is a morphological erosion for binary arrays. Arguments:
        arr     A 2-D NumPy array
        radius  The radius of the neighborhood, in pixels
    '''
    return minimum_filter(arr, footprint = disk(radius), mode = 'nearest')


def mean_composite(images, band):
    '''
    Creates a multi-image (multi-date) mean composite of a single band;
    masked pixels do not contribute and a pixel masked in every image is
    masked in the result. Returns a 2-D masked array. Arguments:
        images  A non-empty sequence of Image instances
        band    The name of the band to composite
    '''
    assert len(images) > 0, 'Cannot composite an empty collection'
    stack = np.ma.stack([
        np.ma.masked_invalid(np.ma.asarray(i.band(band), dtype = np.float64))
        for i in images
    ], axis = 0)
    return np.ma.mean(stack, axis = 0)


def normalized_difference(a, b):
    '''
    Calculates the normalized difference (a - b) / (a + b). Where the sum is
    zero the result is masked (or NaN for plain arrays) rather than infinite.
    Arguments:
        a   A NumPy array
        b   A NumPy array of the same shape
    '''
    with np.errstate(divide = 'ignore', invalid = 'ignore'):
        nd = np.divide(np.subtract(a, b), np.add(a, b))

    if isinstance(a, np.ma.MaskedArray) or isinstance(b, np.ma.MaskedArray):
        return np.ma.masked_invalid(nd)

    return np.where(np.isfinite(nd), nd, np.nan)


def map_ordered(func, tasks, processes=1, progress=None, errors=()):
    '''
    Applies func to each tuple of arguments in tasks, optionally over
    multiple processes; results are returned in the order of the tasks,
    whatever the order of completion. Arguments:
        func        A module-level (picklable) function
        tasks       A sequence of argument tuples, one per unit of work
        processes   The number of worker processes; 1 runs in this process
        progress    A callable invoked as progress(done, total) after each
                    unit of work; an exception it raises cancels the
                    remaining work and propagates
        errors      Exception types to collect per task instead of raising
    Returns a tuple of:
        (results, failures) where failures is a dict of {index: exception}
        and results has None at those indices
    '''
    total = len(tasks)
    results = [None] * total
    failures = dict()
    if processes is None or processes <= 1 or total <= 1:
        for i, args in enumerate(tasks):
            try:
                results[i] = func(*args)

            except errors as e:
                failures[i] = e

            if progress is not None:
                progress(i + 1, total)

        return (results, failures)

    with ProcessPoolExecutor(max_workers = processes) as executor:
        futures = dict(
            (executor.submit(func, *args), i) for i, args in enumerate(tasks))
        try:
            for done, future in enumerate(as_completed(futures), 1):
                i = futures[future]
                try:
                    results[i] = future.result()

                except errors as e:
                    failures[i] = e

                if progress is not None:
                    progress(done, total)

        except BaseException:
            for future in futures:
                future.cancel()

            raise

    return (results, failures)
