"""Module responsible for shuffling image blocks

Image is cut into level x level grid of equal blocks which are then
shuffled with two keys. The first one is fixed, the second one is user's
key and can be left empty. Indices used for swapping come from weak
deterministic generator (see get_rnd), the same indices are recomputed
while decrypting and swaps are replayed in reverse order.

Pixels outside of the grid (width % level columns on the right and
height % level rows at the bottom) are not part of any block and end
up zeroed in the result. Round trip restores the covered region only.
"""

import logging
import math

import numpy as np
from PIL import Image

from .exceptions import PreconditionError
from .util import Mode, pixel_rows


logger = logging.getLogger(__name__)

DEFAULT_KEY = 'hadsky.com'


def code_units(key):
    """Split key into UTF-16 code units, bytes keys are taken byte by byte"""
    if isinstance(key, (bytes, bytearray)):
        return list(key)

    raw = key.encode('utf-16-le', 'surrogatepass')
    return [int.from_bytes(raw[i:i + 2], 'little') for i in range(0, len(raw), 2)]


def get_rnd(key, seed):
    """Pseudo random index derived from key and seed

    Key character selected by seed gives number n, result is
    floor(0.n * seed) where 0.n is decimal fraction written with
    digits of n, so n = 7 gives 0.7 and n = 12 gives 0.12.

    Parameters:
        key (str or bytes): Non empty shuffle key
        seed (int): Positive seed, result is always lower than seed

    Return:
        int: Index in range from 0 to seed - 1
    """
    units = code_units(key)
    if not units:
        raise PreconditionError('Shuffle key must not be empty')

    index = seed % len(units)
    index = units[index] % len(units)

    return math.floor(float(f'0.{index}') * seed)


def perform_shuffle(array, key, reverse=False):
    """Run single shuffle pass over the list in place

    Parameters:
        array (list): Items to be shuffled
        key (str or bytes): Non empty shuffle key
        reverse (bool): Undo pass made with the same key

    Return:
        list: The same list
    """
    length = len(array)

    if not reverse:
        for i in range(length - 1, 0, -1):
            target = get_rnd(key, i + 1)
            array[i], array[target] = array[target], array[i]
    else:
        for i in range(length):
            target = get_rnd(key, i + 1)
            array[target], array[i] = array[i], array[target]

    return array


def shuffle_blocks(array, key='', decrypt=False):
    """Shuffle list with default key and then user key, or undo it

    Parameters:
        array (list): Items to be shuffled, modified in place
        key (str or bytes): User key, empty key skips user's pass
        decrypt (bool): Undo shuffling instead of shuffling

    Return:
        list: The same list
    """
    if not decrypt:
        array.reverse()
        perform_shuffle(array, DEFAULT_KEY)
        if key:
            perform_shuffle(array, key)
    else:
        if key:
            perform_shuffle(array, key, reverse=True)
        perform_shuffle(array, DEFAULT_KEY, reverse=True)
        array.reverse()

    return array


def block_size(width, height, level):
    """Size of single block for given image size and level

    Raises:
        PreconditionError: If block would be empty
    """
    if level < 2:
        raise PreconditionError(f'Block level must be at least 2, got {level}')

    block_w = width // level
    block_h = height // level

    if block_w == 0 or block_h == 0:
        raise PreconditionError('Image too small or block level too high '
                                f'({width}x{height} image, level {level})')

    return block_w, block_h


def split_blocks(img, level, block_w, block_h):
    """Cut image into level x level blocks, row by row

    Parameters:
        img (numpy.ndarray): Image of shape (height, width, 4)
        level (int): Number of blocks along each side
        block_w (int): Block width
        block_h (int): Block height

    Return:
        list: Block copies of shape (block_h, block_w, 4)
    """
    blocks = []
    for y in range(level):
        for x in range(level):
            blocks.append(img[y * block_h:(y + 1) * block_h, x * block_w:(x + 1) * block_w].copy())

    return blocks


def block_shuffle(pixels, width, height, level, key, mode):
    """Shuffle or unshuffle blocks of RGBA pixel buffer

    Parameters:
        pixels (array_like): Buffer of width * height * 4 channel samples,
            flat or shaped (height, width, 4). Left untouched.
        width (int): Image width in pixels
        height (int): Image height in pixels
        level (int): Number of blocks along each side, at least 2
        key (str or bytes): User key, may be empty
        mode (Mode or str): 'encrypt' or 'decrypt'

    Returns:
        numpy.ndarray: New buffer of the same shape as pixels

    Raises:
        PreconditionError: If image is too small for requested level
    """
    mode = Mode(mode)
    block_w, block_h = block_size(width, height, level)
    img = pixel_rows(pixels, width, height).reshape(height, width, 4)

    blocks = split_blocks(img, level, block_w, block_h)
    logger.debug('block shuffle %s %dx%d, %d blocks of %dx%d',
                 mode.value, width, height, len(blocks), block_w, block_h)

    shuffle_blocks(blocks, key, decrypt=mode is Mode.DECRYPT)

    result = np.zeros_like(img)
    index = 0
    for y in range(level):
        for x in range(level):
            if index < len(blocks):
                result[y * block_h:(y + 1) * block_h, x * block_w:(x + 1) * block_w] = blocks[index]
                index += 1

    return result.reshape(np.shape(pixels))


def block_encrypt(im, level, key=''):
    """Convert PIL image to numpy array and shuffle its blocks

    Parameters:
        im (PIL.Image): Image to be encrypted loaded into Pillow Image object
        level (int): Number of blocks along each side
        key (str): User key, may be empty

    Returns:
        PIL.Image: Encrypted RGBA image
    """
    pixels = np.array(im.convert('RGBA'))
    width, height = im.size

    return Image.fromarray(block_shuffle(pixels, width, height, level, key, Mode.ENCRYPT))


def block_decrypt(im, level, key=''):
    """Convert PIL image to numpy array and restore order of its blocks

    Parameters:
        im (PIL.Image): Image to be decrypted loaded into Pillow Image object
        level (int): Number of blocks along each side
        key (str): User key, may be empty

    Returns:
        PIL.Image: Decrypted RGBA image
    """
    pixels = np.array(im.convert('RGBA'))
    width, height = im.size

    return Image.fromarray(block_shuffle(pixels, width, height, level, key, Mode.DECRYPT))
