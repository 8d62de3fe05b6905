'''
Cloud-likelihood scoring for Sentinel-2 and Landsat 8 imagery. Each criterion
linearly rescales a band (or band combination) between a pair of reference
values, so that clear pixels land near or below 0 and clouds near or above 1;
the aggregate score of a pixel is the minimum over all criteria, i.e., a
pixel is only as cloud-like as its least cloud-like criterion says.

Scores are NOT clamped to [0, 1]; the quantization step in masking does that.
Contains:

* `cloud_score()`
* `criteria_landsat()`
* `criteria_sentinel()`
* `rescale()`
* `score_landsat()`
* `score_sentinel()`
* `snow_index()`
'''

from collections import OrderedDict
import numpy as np
from cloudfree.eos import BANDS, CLOUD_SCORE_VALUES, SCALE, sensor_name
from cloudfree.utils import normalized_difference


def __prepare__(image, sensor, roles):
    # Select and scale only the bands the criteria use; raises MissingBand
    #   for the first one that is absent. Masked pixels become NaN
    names = [BANDS[sensor][r] for r in roles]
    img = image.select(*names).scaled(SCALE[sensor])
    return dict(
        (r, np.ma.filled(np.ma.asarray(img.band(n), dtype = np.float64),
            np.nan))
        for r, n in zip(roles, names))


def __aggregate__(criteria):
    # NaN criteria (e.g., a normalized difference of zeros) do not vote
    with np.errstate(invalid = 'ignore'):
        return np.fmin.reduce(np.stack(list(criteria.values()), axis = 0),
            axis = 0)


def rescale(x, thresholds):
    '''
    Linearly rescales x so that thresholds[0] maps to 0 and thresholds[1]
    maps to 1; values beyond either reference value are not clipped.
    Arguments:
        x           A NumPy array
        thresholds  A (lo, hi) pair; lo > hi inverts the scale
    '''
    lo, hi = thresholds
    return np.divide(np.subtract(x, lo), float(hi - lo))


def criteria_sentinel(image, include_snow=False):
    '''
    Calculates each Sentinel-2 cloud criterion; returns an ordered dict of
    criterion name to score array. Arguments:
        image           An Image with unscaled Sentinel-2 band values and
                        native band names
        include_snow    True to add the (experimental) snow criterion
    '''
    v = CLOUD_SCORE_VALUES['SENTINEL']
    b = __prepare__(image, 'SENTINEL',
        ('CB', 'BLUE', 'GREEN', 'RED', 'NIR', 'CIRRUS', 'SWIR1'))

    criteria = OrderedDict()
    # Clouds are reasonably bright in the blue and cirrus bands
    criteria['BLUE'] = rescale(b['BLUE'], v['BLUE'])
    criteria['AEROSOLS'] = rescale(b['CB'], v['AEROSOLS'])
    criteria['CIRRUS'] = rescale(b['CB'] + b['CIRRUS'], v['CIRRUS'])
    # Clouds are reasonably bright in all visible bands
    criteria['RGB'] = rescale(b['RED'] + b['GREEN'] + b['BLUE'], v['RGB'])
    # Clouds are moist
    criteria['NDMI'] = rescale(
        normalized_difference(b['NIR'], b['SWIR1']), v['NDMI'])
    if include_snow:
        criteria['NDSI'] = rescale(
            normalized_difference(b['GREEN'], b['SWIR1']), v['NDSI'])

    return criteria


def criteria_landsat(image, include_snow=False):
    '''
    Calculates each Landsat cloud criterion; returns an ordered dict of
    criterion name to score array. Arguments:
        image           An Image with unscaled Landsat band values and
                        native band names
        include_snow    True to add the (experimental) snow criterion
    '''
    v = CLOUD_SCORE_VALUES['LANDSAT']
    b = __prepare__(image, 'LANDSAT',
        ('BLUE', 'GREEN', 'RED', 'NIR', 'SWIR1', 'SWIR2', 'TEMP'))

    criteria = OrderedDict()
    # Clouds are reasonably bright in the blue band
    criteria['BLUE'] = rescale(b['BLUE'], v['BLUE'])
    # Clouds are reasonably bright in all visible bands
    criteria['RGB'] = rescale(b['RED'] + b['GREEN'] + b['BLUE'], v['RGB'])
    # Clouds are reasonably bright in all infrared bands
    criteria['INFRARED'] = rescale(b['NIR'] + b['SWIR1'] + b['SWIR2'],
        v['INFRARED'])
    # Clouds are reasonably cool in temperature
    criteria['TEMP'] = rescale(b['TEMP'], v['TEMP'])
    if include_snow:
        criteria['NDSI'] = rescale(
            normalized_difference(b['GREEN'], b['SWIR1']), v['NDSI'])

    return criteria


def score_sentinel(image, include_snow=False):
    '''
    Aggregate cloud score for a Sentinel-2 image: the pixel-wise minimum of
    the blue, aerosol, cirrus, visible and moisture criteria.
    '''
    return __aggregate__(criteria_sentinel(image, include_snow))


def score_landsat(image, include_snow=False):
    '''
    Aggregate cloud score for a Landsat image: the pixel-wise minimum of the
    blue, visible, infrared and temperature criteria.
    '''
    return __aggregate__(criteria_landsat(image, include_snow))


SCORERS = {
    'SENTINEL': score_sentinel,
    'LANDSAT': score_landsat
}


def cloud_score(image, satellite, include_snow=False):
    '''
    Calculates the aggregate cloud score of an image for the given sensor;
    returns a 2-D float array (NaN where no criterion could be computed).
    Arguments:
        image           An Image with unscaled band values
        satellite       One of the eos.SATELLITE values or a sensor name
        include_snow    True to add the (experimental) snow criterion
    '''
    return SCORERS[sensor_name(satellite)](image, include_snow)


def snow_index(image, satellite):
    '''
    Calculates the normalized difference snow index (NDSI) between the green
    and SWIR1 bands; informational only, it does not enter the default cloud
    score. Arguments:
        image       An Image with native band names
        satellite   One of the eos.SATELLITE values or a sensor name
    '''
    sensor = sensor_name(satellite)
    b = __prepare__(image, sensor, ('GREEN', 'SWIR1'))
    return normalized_difference(b['GREEN'], b['SWIR1'])
