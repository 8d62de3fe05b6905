'''
This module contains spectral index transformations, e.g., the normalized
difference vegetation index (NDVI) used as the time series signal.
'''

import numpy as np
from cloudfree.eos import BANDS, INDEX_BAND, sensor_name
from cloudfree.utils import normalized_difference


def add_index(image, a, b, name=INDEX_BAND):
    '''
    Returns a new Image with the normalized difference of two bands, i.e.
    (a - b) / (a + b), appended as a band; the index is masked wherever
    either band is masked or the bands sum to zero. Arguments:
        image   An Image instance
        a       The name of the first band
        b       The name of the second band
        name    The name of the new band
    '''
    nd = np.ma.masked_invalid(normalized_difference(
        np.ma.asarray(image.band(a), dtype = np.float64),
        np.ma.asarray(image.band(b), dtype = np.float64)))
    return image.add_bands({name: nd})


def ndvi(image, satellite, name=INDEX_BAND):
    '''
    Calculates the normalized difference vegetation index (NDVI) from the
    near-infrared and red bands of the given sensor and appends it to the
    image. Arguments:
        image       An Image with native band names
        satellite   One of the eos.SATELLITE values or a sensor name
        name        The name of the new band
    '''
    bands = BANDS[sensor_name(satellite)]
    return add_index(image, bands['NIR'], bands['RED'], name = name)


def ndvi_collection(images, satellite, name=INDEX_BAND):
    'Applies ndvi() to every image in a collection'
    return [ndvi(i, satellite, name = name) for i in images]
