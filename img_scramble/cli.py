import logging
import sys

from argparse import ArgumentParser

import numpy as np
from pydantic import ValidationError

from .batch_handler import BatchHandler, bundle_zip
from .config import ProcessingOptions, load_settings
from .exceptions import ScrambleException, ImageLocatorException
from .imgscramble import encrypt_then_decrypt, covered_region, image_from_url, plot_channels, schemes, switch_scheme


logger = logging.getLogger(__name__)


def build_parser(settings):
    arg_parser = ArgumentParser(prog='img-scramble',
                                description='Scramble images by moving pixels along Gilbert curve '
                                            'or by shuffling image blocks')
    arg_parser.add_argument('mode', choices=['encrypt', 'decrypt', 'roundtrip'],
                            help="encrypt or decrypt images, roundtrip checks that decryption "
                                 "restores the first image")
    arg_parser.add_argument('-s', '--scheme', type=str, default=settings.default_scheme,
                            help=f"specify scrambling scheme, allowed schemes: {', '.join(schemes)}")
    arg_parser.add_argument('-l', '--locator', type=str, nargs='+', default=None,
                            help="specify images to be processed, can be paths to local "
                                 "files or urls of images")
    arg_parser.add_argument('-b', '--level', type=int, default=settings.block_level,
                            help="number of blocks along each side for BLOCK scheme")
    arg_parser.add_argument('-k', '--key', type=str, default=settings.block_key,
                            help="user key for BLOCK scheme, empty string skips user's pass")
    arg_parser.add_argument('-o', '--output-dir', type=str, default=settings.output_dir,
                            help="directory for results")
    arg_parser.add_argument('-q', '--quality', type=int, default=settings.jpeg_quality,
                            help="JPEG quality of results")
    arg_parser.add_argument('-w', '--workers', type=int, default=settings.workers,
                            help="number of images processed at the same time")
    arg_parser.add_argument('--switch', action='store_true',
                            help="run with the other scheme than selected one")
    arg_parser.add_argument('-z', '--zip', action='store_true',
                            help="bundle results into zip archive")
    arg_parser.add_argument('--show', action='store_true', help="show images in roundtrip mode")
    arg_parser.add_argument('--plot', action='store_true', help="plot channel histograms in roundtrip mode")
    arg_parser.add_argument('-v', '--verbose', action='store_true', help="enable verbose logging")

    return arg_parser


def roundtrip(locator, options, show=False, plot=False):
    im = image_from_url(locator)
    dec_im, enc_im = encrypt_then_decrypt(locator, options.scheme,
                                          level=options.block_level, key=options.block_key)

    original = covered_region(im, options.scheme, options.block_level)
    restored = covered_region(dec_im, options.scheme, options.block_level)
    matches = np.array_equal(original, restored)

    if matches:
        logger.info('%s: decrypted image matches the original', locator)
    else:
        logger.error('%s: decrypted image differs from the original', locator)

    if show:
        dec_im.show()
        enc_im.show()

    if plot:
        plot_channels(dec_im, enc_im, options.scheme)

    return matches


def main(argv=None):
    try:
        settings = load_settings()
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error('invalid settings: %s', e)
        return 1

    cl_args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if cl_args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        if not cl_args.locator:
            raise ImageLocatorException('No proper image locator specified, please use path to local file '
                                        'or url of an image')

        scheme = switch_scheme(cl_args.scheme) if cl_args.switch else cl_args.scheme
        options = ProcessingOptions(scheme=scheme, block_level=cl_args.level, block_key=cl_args.key)

        if cl_args.mode == 'roundtrip':
            return 0 if roundtrip(cl_args.locator[0], options, cl_args.show, cl_args.plot) else 1

        handler = BatchHandler(cl_args.workers)
        items = handler.process(cl_args.locator, cl_args.mode, options, cl_args.output_dir, cl_args.quality)

        if cl_args.zip:
            bundle_zip(items, cl_args.output_dir)

        failed = [item for item in items if item.status != 'done']
        return 1 if failed else 0

    except ScrambleException as e:
        logger.error('%s', e)
        return 1
    except ValidationError as e:
        logger.error('invalid options: %s', e)
        return 1


if __name__ == '__main__':
    sys.exit(main())
