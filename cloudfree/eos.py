'''
Contains a number of stored data structures and tools for working with Earth
Observing System (EOS) data. For example, contains the native band names of
the supported sensors and the reference values used by the cloud scoring
algorithm.
'''

import numbers
from cloudfree.errors import UnsupportedSensor

# Satellite IDs; callers should use these rather than the raw integers
SATELLITE = {
    'LANDSAT': 1,
    'SENTINEL': 2
}

# Native band names for each sensor, keyed by the role the band plays
BANDS = {
    'SENTINEL': {
        'CB': 'B1', # Coastal aerosol
        'BLUE': 'B2',
        'GREEN': 'B3',
        'RED': 'B4',
        'NIR': 'B8',
        'WP': 'B9', # Water vapour
        'CIRRUS': 'B10',
        'SWIR1': 'B12',
        'QA': 'QA60' # Not used by the scorer
    },
    'LANDSAT': {
        'BLUE': 'B2',
        'GREEN': 'B3',
        'RED': 'B4',
        'NIR': 'B5',
        'SWIR1': 'B6',
        'SWIR2': 'B7',
        'TEMP': 'B10'
    }
}

# Raw band values are divided by these before scoring
SCALE = {
    'SENTINEL': 10000,
    'LANDSAT': 100000
}

# Cloud score reference values as (lo, hi) pairs; lo > hi inverts the scale
CLOUD_SCORE_VALUES = {
    'SENTINEL': {
        'BLUE': (0.1, 0.5),
        'AEROSOLS': (0.1, 0.3),
        'CIRRUS': (0.15, 0.2),
        'RGB': (0.2, 0.8),
        'NDMI': (-0.1, 0.1),
        'NDSI': (0.8, 0.6)
    },
    'LANDSAT': {
        'BLUE': (0.1, 0.3),
        'RGB': (0.2, 0.8),
        'INFRARED': (0.3, 0.8),
        'TEMP': (300, 290),
        'NDSI': (0.8, 0.6)
    }
}

# Cloud masking parameters as (minimum, maximum, default)
THRESHOLD_SETTINGS = (1, 100, 20)
DILATION_SETTINGS = (0, 100, 2)
CONTRACTION_SETTINGS = (0, 100, 1)

# Time series processing
MILLIS_PER_DAY = 86400000
INDEX_BAND = 'NDVI'
EXTREME_WINDOW_DAYS = 30
CURRENT_WINDOW_DAYS = 1
DEFAULT_EXTREME_THRESHOLD = 0.07


def sensor_name(satellite):
    '''
    Resolves a satellite identifier to the key used in the tables above,
    e.g., 2 or "sentinel" both resolve to "SENTINEL". Arguments:
        satellite   One of the SATELLITE values or a sensor name
    '''
    if isinstance(satellite, str):
        name = satellite.upper()
        if name in SATELLITE:
            return name

    # bool is an int; True must not resolve to LANDSAT
    elif isinstance(satellite, numbers.Integral)\
            and not isinstance(satellite, bool):
        for name, sid in SATELLITE.items():
            if sid == satellite:
                return name

    raise UnsupportedSensor(satellite)


def bands_for(satellite):
    '''
    Returns the mapping of band role (e.g., "BLUE") to the native band name
    for a given sensor. Arguments:
        satellite   One of the SATELLITE values or a sensor name
    '''
    return dict(BANDS[sensor_name(satellite)])
