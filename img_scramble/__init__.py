"""Reversible image scrambling: pixels moved along Gilbert curve or keyed block shuffle"""

from .exceptions import ScrambleException, PreconditionError, DecodeError, SchemeException, ImageLocatorException
from .gilbert import gilbert2d
from .pixel_scramble import golden_offset, pixel_scramble, pixel_encrypt, pixel_decrypt
from .block_shuffle import DEFAULT_KEY, get_rnd, perform_shuffle, shuffle_blocks, block_shuffle, block_encrypt, block_decrypt
from .util import Mode

__all__ = [
    'ScrambleException',
    'PreconditionError',
    'DecodeError',
    'SchemeException',
    'ImageLocatorException',
    'gilbert2d',
    'golden_offset',
    'pixel_scramble',
    'pixel_encrypt',
    'pixel_decrypt',
    'DEFAULT_KEY',
    'get_rnd',
    'perform_shuffle',
    'shuffle_blocks',
    'block_shuffle',
    'block_encrypt',
    'block_decrypt',
    'Mode',
]
