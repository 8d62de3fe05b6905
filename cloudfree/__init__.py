'''
Cloud and shadow masking for Sentinel-2 and Landsat imagery by cloud scoring,
and smoothing of the spectral index time series derived from the masked
images.
'''

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
