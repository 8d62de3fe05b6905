'''
Synthetic images shared by the test cases.
'''

import datetime
import numpy as np
from cloudfree.eos import MILLIS_PER_DAY
from cloudfree.image import Image, to_millis

T0 = to_millis(datetime.date(2019, 1, 1))
DAY = MILLIS_PER_DAY

# Raw Sentinel-2 values (reflectance x 10000) for a clear and a cloudy pixel
SENTINEL_CLEAR = {
    'B1': 500, 'B2': 500, 'B3': 600, 'B4': 500, 'B8': 3000, 'B9': 300,
    'B10': 10, 'B12': 1500, 'QA60': 0
}
SENTINEL_CLOUD = {
    'B1': 4000, 'B2': 6000, 'B3': 6000, 'B4': 6000, 'B8': 6500, 'B9': 3000,
    'B10': 100, 'B12': 5000, 'QA60': 0
}

# Raw Landsat values (x 100000); the thermal band never limits the score here
LANDSAT_CLEAR = {
    'B2': 5000, 'B3': 6000, 'B4': 5000, 'B5': 30000, 'B6': 15000,
    'B7': 8000, 'B10': 29500
}
LANDSAT_CLOUD = {
    'B2': 40000, 'B3': 40000, 'B4': 40000, 'B5': 40000, 'B6': 40000,
    'B7': 40000, 'B10': 28000
}


def synthetic_image(clear, cloud, cloud_pixels=(), shape=(9, 9), timestamp=T0):
    '''
    Creates an Image that is clear everywhere except at the given (row, col)
    cloud pixels. Arguments:
        clear           A dict of band name to raw value for clear pixels
        cloud           A dict of band name to raw value for cloud pixels
        cloud_pixels    A sequence of (row, col) indices
        shape           The (rows, columns) shape of every band
        timestamp       The acquisition time
    '''
    bands = []
    for name in clear.keys():
        arr = np.full(shape, clear[name], dtype = np.int32)
        for r, c in cloud_pixels:
            arr[r, c] = cloud[name]

        bands.append((name, arr))

    return Image(bands, timestamp)


def block(center, half=1):
    'Returns the (row, col) indices of a square block about a center pixel'
    r0, c0 = center
    return [
        (r, c) for r in range(r0 - half, r0 + half + 1)
        for c in range(c0 - half, c0 + half + 1)
    ]


def index_series_images(values, band='NDVI', shape=(2, 2), start=T0, step=DAY):
    '''
    Creates one single-band image per value, each filled with that value, at
    consecutive timestamps.
    '''
    return [
        Image({band: np.full(shape, v, dtype = np.float64)}, start + i * step)
        for i, v in enumerate(values)
    ]
