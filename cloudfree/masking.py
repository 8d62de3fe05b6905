'''
Masks clouds and cloud shadows from Sentinel-2 or Landsat imagery using the
cloud scores calculated in `cloudfree.scoring`. A typical use is:

    from cloudfree.eos import SATELLITE
    from cloudfree.masking import mask_clouds_scoring

    masked = mask_clouds_scoring(images, SATELLITE['SENTINEL'],
        threshold = 15, dilation = 2, contraction = 1)

Band values must not be scaled from their original values and band names
must be the sensor's native names (see `cloudfree.eos.BANDS`).
Contains:

* `cloud_mask()`
* `mask_clouds()`
* `mask_clouds_scoring()`
* `mask_image()`
* `quantize()`
* `validate_parameters()`
'''

import logging
import numpy as np
from cloudfree.eos import CONTRACTION_SETTINGS, DILATION_SETTINGS, THRESHOLD_SETTINGS, sensor_name
from cloudfree.errors import MaskingBatchError, MissingBand
from cloudfree.scoring import SCORERS
from cloudfree.utils import binary_mask, clamp, focal_max, focal_min, map_ordered

logger = logging.getLogger(__name__)


def validate_parameters(threshold=None, dilation=None, contraction=None):
    '''
    Checks each cloud masking parameter against its allowed range; values
    that are not numbers or are out of range are replaced with the default.
    Returns a (threshold, dilation, contraction) tuple. Arguments:
        threshold   The cloud threshold, in [1, 100]; defaults to 20
        dilation    Pixels to dilate around clouds, in [0, 100]; defaults to 2
        contraction Radius of the contraction applied to cloud pixels, in
                    [0, 100]; defaults to 1
    '''
    return (
        clamp(threshold, *THRESHOLD_SETTINGS),
        clamp(dilation, *DILATION_SETTINGS),
        clamp(contraction, *CONTRACTION_SETTINGS))


def quantize(score):
    '''
    Stretches a cloud score to an integer percentage: multiplies by 100,
    truncates and clips to [0, 100]. Pixels without a score become 0.
    '''
    pct = np.nan_to_num(np.ma.filled(
        np.ma.asarray(score, dtype = np.float64), np.nan) * 100, nan = 0.0)
    return np.clip(np.trunc(pct), 0, 100).astype(np.uint8)


def cloud_mask(score, threshold, dilation, contraction):
    '''
    Returns a Boolean array, True where a pixel is cloud (or cloud edge or
    shadow). Pixels with a quantized score above the threshold are cloud
    candidates; candidates are contracted (a minimum filter of radius
    contraction removes isolated pixels) and what survives is dilated (a
    maximum filter of radius dilation). Radii of 0 leave the thresholded
    mask unchanged. Arguments:
        score       The aggregate cloud score, as from cloud_score()
        threshold   The cloud threshold (a percentage)
        dilation    The dilation radius, in pixels
        contraction The contraction radius, in pixels
    '''
    candidates = (quantize(score) > threshold).astype(np.uint8)
    clouds = focal_max(focal_min(candidates, contraction), dilation)
    return clouds > 0


def mask_clouds(score, image, threshold, dilation, contraction,
        keep_score=False):
    '''
    Masks every band of an image where the cloud score says it is cloud;
    returns a new Image with the source timestamp. Unmasked pixel values are
    unchanged. Arguments:
        score       The aggregate cloud score for this image
        image       The raw (unscaled) Image
        threshold   The cloud threshold (a percentage)
        dilation    The dilation radius, in pixels
        contraction The contraction radius, in pixels
        keep_score  True to add the quantized score as a "cloudScore" band
    '''
    if keep_score:
        image = image.add_bands({'cloudScore': quantize(score)})

    return binary_mask(image,
        cloud_mask(score, threshold, dilation, contraction))


def mask_image(image, satellite, threshold=None, dilation=None,
        contraction=None, keep_score=False, include_snow=False):
    '''
    Scores and masks a single image. Parameters are validated as in
    validate_parameters(); raises MissingBand if the image lacks a band the
    scorer needs, UnsupportedSensor for an unknown satellite. Arguments:
        image           The raw (unscaled) Image
        satellite       One of the eos.SATELLITE values or a sensor name
        threshold       The cloud threshold, in [1, 100]
        dilation        Pixels to dilate around clouds, in [0, 100]
        contraction     Contraction radius for cloud pixels, in [0, 100]
        keep_score      True to add the quantized score as a band
        include_snow    True to add the (experimental) snow criterion
    '''
    scorer = SCORERS[sensor_name(satellite)]
    threshold, dilation, contraction = validate_parameters(
        threshold, dilation, contraction)
    score = scorer(image, include_snow)
    return mask_clouds(score, image, threshold, dilation, contraction,
        keep_score = keep_score)


def mask_clouds_scoring(
        images, satellite, threshold=None, dilation=None, contraction=None,
        processes=1, progress=None, keep_score=False, include_snow=False):
    '''
    Masks clouds and shadows from every image in a collection with the
    scoring algorithm for the given satellite; returns a list of masked
    images in the input order, each with its source timestamp. Images are
    independent and may be processed over several processes.

    An unknown satellite raises UnsupportedSensor before any work is done.
    If any image lacks a required band, the rest of the batch is still
    processed and then MaskingBatchError (a MissingBand) is raised; its
    `failures` and `results` attributes hold the per-image outcome.
    Arguments:
        images          A sequence of raw (unscaled) Image instances
        satellite       One of the eos.SATELLITE values or a sensor name
        threshold       The cloud threshold, in [1, 100]; defaults to 20.
                        Lower values mask more pixels; 10-30 works well
        dilation        Pixels to dilate around clouds, in [0, 100];
                        defaults to 2
        contraction     Contraction radius for cloud pixels, used to remove
                        single-pixel commission errors, in [0, 100];
                        defaults to 1
        processes       The number of worker processes
        progress        Optional callable, progress(done, total), invoked
                        after each image; raising from it cancels the batch
        keep_score      True to add the quantized score as a band
        include_snow    True to add the (experimental) snow criterion
    '''
    sensor = sensor_name(satellite)
    params = validate_parameters(threshold, dilation, contraction)
    images = list(images)
    logger.debug('Masking %d %s image(s) with threshold=%s, dilation=%s, '
        'contraction=%s', len(images), sensor, *params)

    results, failures = map_ordered(mask_image, [
        (img, sensor) + params + (keep_score, include_snow) for img in images
    ], processes = processes, progress = progress, errors = (MissingBand,))

    if failures:
        for i in sorted(failures.keys()):
            failures[i] = MissingBand(failures[i].band, i,
                images[i].timestamp)
            logger.warning('Could not mask image: %s', failures[i])

        raise MaskingBatchError(failures, results)

    return results
