'''
Exceptions and warnings raised by the cloud masking and time series tools.
'''

class CloudfreeError(Exception):
    pass


class UnsupportedSensor(CloudfreeError, ValueError):
    '''Raised for a satellite identifier with no band profile.'''
    def __init__(self, satellite):
        self.satellite = satellite
        super(UnsupportedSensor, self).__init__(
            'Unsupported satellite identifier: %r' % (satellite,))


class MissingBand(CloudfreeError, LookupError):
    '''
    Raised when an image lacks a band required by a scoring criterion. The
    `index` and `timestamp` attributes locate the image in a collection,
    where known.
    '''
    def __init__(self, band, index=None, timestamp=None):
        self.band = band
        self.index = index
        self.timestamp = timestamp
        msg = 'Image has no band named %r' % (band,)
        if index is not None:
            msg += ' (image %d, timestamp %s)' % (index, timestamp)

        super(MissingBand, self).__init__(msg)

    def __reduce__(self):
        return (self.__class__, (self.band, self.index, self.timestamp))

    def __str__(self):
        return self.args[0]


class MaskingBatchError(MissingBand):
    '''
    Raised after a whole collection has been masked if one or more images
    failed. Arguments:
        failures    A dict of {index: MissingBand} for each failed image
        results     The masked images, aligned with the input; None where
                    the image failed
    '''
    def __init__(self, failures, results):
        self.failures = failures
        self.results = results
        first = failures[min(failures.keys())]
        super(MaskingBatchError, self).__init__(
            first.band, first.index, first.timestamp)
        self.args = ('%d of %d image(s) could not be masked; first: %s' % (
            len(failures), len(results), first),)

    def __reduce__(self):
        return (self.__class__, (self.failures, self.results))


class DegenerateDivision(RuntimeWarning):
    '''
    Warns that a normalized difference had a zero denominator; the
    difference is taken to be zero at those pixels.
    '''
    pass
