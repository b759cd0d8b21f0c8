import logging
import os

from io import BytesIO
from pathlib import Path
from urllib.error import URLError
from urllib.parse import urlparse
from urllib.request import urlopen, pathname2url

from PIL import Image, UnidentifiedImageError
import numpy as np
import matplotlib.pyplot as plt

from .block_shuffle import block_encrypt, block_decrypt, block_size
from .config import load_settings
from .exceptions import SchemeException, DecodeError
from .pixel_scramble import pixel_encrypt, pixel_decrypt
from .util import Mode


logger = logging.getLogger(__name__)

schemes = ['GILBERT', 'BLOCK']
scheme_suffixes = {'GILBERT': 'pixel', 'BLOCK': 'block'}


def image_from_url(url):
    """Load image from path or url

    Parameters:
        url (str): Path to local file or url of an image

    Returns:
        PIL.Image: Image converted to RGBA

    Raises:
        DecodeError: If image can't be read or decoded
    """
    if os.path.isfile(url):
        url = 'file:' + pathname2url(os.path.abspath(url))

    try:
        with urlopen(url) as f:
            img_file = BytesIO(f.read())

        im = Image.open(img_file)
        im.load()
    except (URLError, ValueError, UnidentifiedImageError, OSError) as e:
        raise DecodeError(f'Unable to load image {url}: {e}') from e

    if im.mode != 'RGBA':
        im = im.convert('RGBA')

    return im


def check_scheme(scheme):
    scheme = scheme.upper()
    if scheme not in schemes:
        raise SchemeException(f'Invalid scrambling scheme {scheme}, allowed schemes: {", ".join(schemes)}')

    return scheme


def switch_scheme(scheme):
    """Return the other scrambling scheme"""
    return 'BLOCK' if check_scheme(scheme) == 'GILBERT' else 'GILBERT'


def encrypt_image(im, scheme, **kwargs):
    level = kwargs.get('level')
    key = kwargs.get('key')

    level = level if level is not None else load_settings().block_level
    key = key if key is not None else load_settings().block_key

    scheme = check_scheme(scheme)
    logger.debug('encrypting %dx%d image with %s', *im.size, scheme)

    if scheme == 'GILBERT':
        enc_im = pixel_encrypt(im)
    else:
        enc_im = block_encrypt(im, level, key)

    return enc_im


def decrypt_image(im, scheme, **kwargs):
    level = kwargs.get('level')
    key = kwargs.get('key')

    level = level if level is not None else load_settings().block_level
    key = key if key is not None else load_settings().block_key

    scheme = check_scheme(scheme)
    logger.debug('decrypting %dx%d image with %s', *im.size, scheme)

    if scheme == 'GILBERT':
        dec_im = pixel_decrypt(im)
    else:
        dec_im = block_decrypt(im, level, key)

    return dec_im


def process_image(im, mode, scheme, **kwargs):
    if Mode(mode) is Mode.ENCRYPT:
        return encrypt_image(im, scheme, **kwargs)

    return decrypt_image(im, scheme, **kwargs)


def encrypt_then_decrypt(img_url, scheme, **kwargs):
    im = image_from_url(img_url)

    settings = load_settings()
    level = kwargs.get('level')
    key = kwargs.get('key')

    level = level if level is not None else settings.block_level
    key = key if key is not None else settings.block_key

    enc_im = encrypt_image(im, scheme, level=level, key=key)
    dec_im = decrypt_image(enc_im, scheme, level=level, key=key)

    return dec_im, enc_im


def covered_region(im, scheme, level=None):
    """Pixels of the image which survive round trip with given scheme

    Block scheme drops columns and rows which don't fit into the grid.

    Returns:
        numpy.ndarray: Array of shape (height, width, 4)
    """
    pixels = np.array(im.convert('RGBA'))

    if check_scheme(scheme) == 'BLOCK':
        level = level if level is not None else load_settings().block_level
        block_w, block_h = block_size(im.size[0], im.size[1], level)
        pixels = pixels[:block_h * level, :block_w * level]

    return pixels


def result_name(url, scheme, index=None):
    """Name of exported result, e.g. photo_pixel.jpg or photo_block_3.jpg"""
    stem = Path(urlparse(url).path).stem or 'image'
    suffix = scheme_suffixes[check_scheme(scheme)]

    if index is not None:
        return f'{stem}_{suffix}_{index}.jpg'

    return f'{stem}_{suffix}.jpg'


def save_result(im, path, quality=None):
    """Encode image as JPEG, alpha channel is dropped"""
    quality = quality if quality is not None else load_settings().jpeg_quality

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    im.convert('RGB').save(path, 'JPEG', quality=quality)
    logger.info('saved %s', path)

    return path


def process_file(url, mode, options, output_dir, quality=None, name=None):
    """Load image, scramble or unscramble it and save result as JPEG

    Parameters:
        url (str): Path to local file or url of an image
        mode (Mode or str): 'encrypt' or 'decrypt'
        options (config.ProcessingOptions): Scheme, block level and key
        output_dir (str or Path): Directory for the result
        quality (int): JPEG quality, settings are used when None
        name (str): File name of the result, result_name(url, scheme) when None

    Returns:
        Path: Path of saved result
    """
    im = image_from_url(url)
    result = process_image(im, mode, options.scheme, **options.scheme_kwargs())

    name = name if name is not None else result_name(url, options.scheme)

    return save_result(result, Path(output_dir) / name, quality)


def plot_channels(dec_im, enc_im, scheme):
    dec_pixels = np.array(dec_im.convert('RGB'))
    enc_pixels = np.array(enc_im.convert('RGB'))

    dec_channels = [dec_pixels[:, :, i].ravel() for i in range(3)]
    enc_channels = [enc_pixels[:, :, i].ravel() for i in range(3)]

    hist_kwargs = {'bins': 256, 'range': [0, 256], 'color': ['red', 'green', 'blue']}

    fig, (hist_dec, hist_enc) = plt.subplots(nrows=1, ncols=2)
    hist_dec.hist(dec_channels, **hist_kwargs)
    hist_enc.hist(enc_channels, **hist_kwargs)
    hist_dec.set_title('plain')
    hist_enc.set_title(f'{scheme_suffixes[check_scheme(scheme)]} scrambled')
    plt.show()

    return fig
