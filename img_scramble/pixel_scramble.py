"""Module responsible for pixel scrambling along Gilbert curve

Every pixel of the image is moved along the curve (see gilbert.gilbert2d)
by fixed offset equal to golden ratio fraction of the pixel count. Pixel
at curve position i lands at curve position i + offset (wrapping around),
decryption moves it back. Channels are copied as they are so the
transform is lossless.
"""

import logging
import math

import numpy as np
from PIL import Image

from .gilbert import gilbert2d
from .util import Mode, pixel_rows, round_half_up


logger = logging.getLogger(__name__)

GOLDEN_FRACTION = (math.sqrt(5) - 1) / 2


def golden_offset(width, height):
    """Number of curve positions every pixel is moved by"""
    return round_half_up(GOLDEN_FRACTION * width * height)


def curve_indices(width, height):
    """Flat pixel indices of the Gilbert curve positions

    Parameters:
        width (int): Image width in pixels
        height (int): Image height in pixels

    Return:
        numpy.ndarray: Index of pixel in row-major order for each curve position
    """
    curve = np.array(gilbert2d(width, height), dtype=np.int64).reshape(-1, 2)
    return curve[:, 0] + curve[:, 1] * width


def pixel_scramble(pixels, width, height, mode):
    """Scramble or unscramble RGBA pixel buffer

    Parameters:
        pixels (array_like): Buffer of width * height * 4 channel samples,
            flat or shaped (height, width, 4). Left untouched.
        width (int): Image width in pixels
        height (int): Image height in pixels
        mode (Mode or str): 'encrypt' or 'decrypt'

    Returns:
        numpy.ndarray: New buffer of the same shape as pixels
    """
    mode = Mode(mode)
    rows = pixel_rows(pixels, width, height)

    source = curve_indices(width, height)
    offset = golden_offset(width, height)
    target = np.roll(source, -offset)

    logger.debug('pixel scramble %s %dx%d, offset %d', mode.value, width, height, offset)

    result = rows.copy()
    if mode is Mode.ENCRYPT:
        result[target] = rows[source]
    else:
        result[source] = rows[target]

    return result.reshape(np.shape(pixels))


def pixel_encrypt(im):
    """Convert PIL image to numpy array and scramble its pixels

    Parameters:
        im (PIL.Image): Image to be encrypted loaded into Pillow Image object

    Returns:
        PIL.Image: Encrypted RGBA image
    """
    pixels = np.array(im.convert('RGBA'))
    width, height = im.size

    return Image.fromarray(pixel_scramble(pixels, width, height, Mode.ENCRYPT))


def pixel_decrypt(im):
    """Convert PIL image to numpy array and unscramble its pixels

    Parameters:
        im (PIL.Image): Image to be decrypted loaded into Pillow Image object

    Returns:
        PIL.Image: Decrypted RGBA image
    """
    pixels = np.array(im.convert('RGBA'))
    width, height = im.size

    return Image.fromarray(pixel_scramble(pixels, width, height, Mode.DECRYPT))
