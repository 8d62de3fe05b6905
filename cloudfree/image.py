'''
The raster data model: an `Image` is an ordered set of named, co-registered
2-D bands with a single acquisition timestamp; an image collection is any
ordered sequence of `Image` instances. Contains:

* `Image`
* `filter_date()`
* `sort_by_time()`
* `timestamps()`
* `to_millis()`
'''

import datetime
from collections import OrderedDict
import numpy as np
from cloudfree.errors import MissingBand

EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def to_millis(value):
    '''
    Converts a timestamp to integer milliseconds since the Unix epoch.
    Arguments:
        value   A number (already in milliseconds), a datetime.date or a
                datetime.datetime; naive datetimes are taken to be UTC
    '''
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.timezone.utc)

        return int(round((value - EPOCH).total_seconds() * 1000))

    if isinstance(value, datetime.date):
        return to_millis(datetime.datetime(value.year, value.month, value.day))

    return int(value)


class Image(object):
    '''
    A multi-band raster image. Bands are NumPy arrays (or masked arrays,
    where pixels have been nulled) that must all have the same shape.
    Arguments:
        bands       An ordered mapping (or sequence of pairs) of band name
                    to 2-D array
        timestamp   The acquisition time; see to_millis()
    '''
    def __init__(self, bands, timestamp):
        self.__bands__ = OrderedDict()
        for name, arr in OrderedDict(bands).items():
            if not isinstance(arr, np.ndarray):
                arr = np.asarray(arr)

            if arr.ndim != 2:
                raise ValueError('Band %r must be a 2-D array' % name)

            self.__bands__[name] = arr

        shapes = set(a.shape for a in self.__bands__.values())
        if len(shapes) > 1:
            raise ValueError('All bands of an image must have the same shape')

        self.timestamp = to_millis(timestamp)

    def __repr__(self):
        return '<Image %s %s t=%d>' % (self.band_names, self.shape,
            self.timestamp)

    def __contains__(self, name):
        return name in self.__bands__

    def __getitem__(self, name):
        return self.band(name)

    @property
    def band_names(self):
        'Return the band names, in order'
        return list(self.__bands__.keys())

    @property
    def bands(self):
        'Return a copy of the (name, array) mapping'
        return OrderedDict(self.__bands__)

    @property
    def shape(self):
        'Return the (rows, columns) shape shared by every band'
        for arr in self.__bands__.values():
            return arr.shape

        return None

    def band(self, name):
        '''
        Returns the array for a named band; raises MissingBand if the image
        does not have it.
        '''
        try:
            return self.__bands__[name]

        except KeyError:
            raise MissingBand(name, timestamp=self.timestamp) from None

    def select(self, *names):
        'Returns a new Image with only the named bands, in the given order'
        return Image([(n, self.band(n)) for n in names], self.timestamp)

    def add_bands(self, bands):
        '''
        Returns a new Image with the given bands appended (or replaced, where
        a name already exists). Arguments:
            bands   An ordered mapping of band name to 2-D array
        '''
        combined = self.bands
        combined.update(bands)
        return Image(combined, self.timestamp)

    def scaled(self, divisor):
        'Returns a new floating-point Image with every band divided by divisor'
        return Image([
            (n, np.divide(a, float(divisor))) for n, a in self.__bands__.items()
        ], self.timestamp)


def filter_date(images, start, end, inclusive=True):
    '''
    Returns the images acquired between start and end, preserving their
    order. Arguments:
        images      A sequence of Image instances
        start       The start of the window (see to_millis())
        end         The end of the window (see to_millis())
        inclusive   True to include images acquired exactly at start or end
    '''
    t0, t1 = to_millis(start), to_millis(end)
    if inclusive:
        return [i for i in images if t0 <= i.timestamp <= t1]

    return [i for i in images if t0 < i.timestamp < t1]


def sort_by_time(images):
    'Returns the images in chronological order; ties keep their order'
    return sorted(images, key = lambda i: i.timestamp)


def timestamps(images):
    'Returns the distinct timestamps of the images, in order of appearance'
    seen = OrderedDict()
    for img in images:
        seen.setdefault(img.timestamp, None)

    return list(seen.keys())
