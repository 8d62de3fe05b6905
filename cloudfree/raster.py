'''
Reads raster files into `Image` instances with GDAL. Requires the GDAL
Python bindings (install with the "gdal" extra).
Contains:

* `as_collection()`
* `as_image()`
'''

import numpy as np
from osgeo import gdal
from cloudfree.image import Image


def as_image(path, band_names=None, timestamp=0):
    '''
    A convenience function for opening a (multi-band) raster as an Image;
    each band's NoData value, if it has one, becomes the mask of that band.
    Arguments:
        path        The path of the raster file to open
        band_names  A sequence of names, one per band; defaults to each
                    band's description, or "B1", "B2", ... where a band
                    has none
        timestamp   The acquisition time (see image.to_millis())
    '''
    ds = gdal.Open(path)
    if ds is None:
        raise ValueError('File path not found')

    if band_names is not None:
        assert len(band_names) == ds.RasterCount, 'Must provide a name for each band'

    bands = []
    for b in range(1, ds.RasterCount + 1):
        band = ds.GetRasterBand(b)
        arr = band.ReadAsArray()
        if band_names is not None:
            name = band_names[b - 1]

        else:
            name = band.GetDescription() or 'B%d' % b

        nodata = band.GetNoDataValue()
        if nodata is not None:
            arr = np.ma.masked_equal(arr, nodata)

        bands.append((name, arr))

    ds = None
    return Image(bands, timestamp)


def as_collection(paths, timestamps, band_names=None):
    '''
    Opens each of several rasters as an Image. Arguments:
        paths       A sequence of raster file paths
        timestamps  A sequence of acquisition times, one per path
        band_names  A sequence of band names shared by all the rasters
    '''
    assert len(paths) == len(timestamps), 'Must provide a timestamp for each path'
    return [
        as_image(p, band_names = band_names, timestamp = t)
        for p, t in zip(paths, timestamps)
    ]
