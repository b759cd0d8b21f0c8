from enum import Enum
import math

import numpy as np

from .exceptions import PreconditionError


class Mode(str, Enum):
    ENCRYPT = 'encrypt'
    DECRYPT = 'decrypt'


def round_half_up(x):
    """Round non negative number to nearest integer, halves go up

    Unlike built-in round() which rounds halves to even.

    Parameters:
        x (float): Number to be rounded

    Return:
        int: Rounded value
    """
    return math.floor(x + 0.5)


def pixel_rows(pixels, width, height):
    """View pixel buffer as array of 4 channel pixels

    Parameters:
        pixels (array_like): Flat or (height, width, 4) buffer of channel samples
        width (int): Image width in pixels
        height (int): Image height in pixels

    Return:
        numpy.ndarray: Array of shape (width * height, 4)
    """
    if width < 1 or height < 1:
        raise PreconditionError(f'Image dimensions must be positive, got {width}x{height}')

    pixels = np.asarray(pixels)
    if pixels.size != width * height * 4:
        raise PreconditionError(f'Pixel buffer holds {pixels.size} samples, '
                                f'expected {width * height * 4} for {width}x{height} RGBA image')

    return pixels.reshape(width * height, 4)
