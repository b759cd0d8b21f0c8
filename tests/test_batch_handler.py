import os
import zipfile

import numpy as np
import pytest
from PIL import Image

from img_scramble.batch_handler import BatchHandler, BatchItem, bundle_zip, output_names
from img_scramble.config import ProcessingOptions

from conftest import random_pixels


@pytest.fixture
def images(tmp_path):
    paths = []
    for i, (width, height) in enumerate([(20, 20), (33, 17), (12, 40)]):
        path = tmp_path / f'img{i}.png'
        Image.fromarray(random_pixels(width, height, seed=i)).save(path)
        paths.append(str(path))
    return paths


def test_process_batch(images, tmp_path):
    broken = tmp_path / 'broken.png'
    broken.write_bytes(b'definitely not png')
    locators = images[:2] + [str(broken)] + images[2:]
    options = ProcessingOptions(scheme='GILBERT')

    items = BatchHandler(workers=2).process(locators, 'encrypt', options, tmp_path / 'out')

    assert [item.locator for item in items] == locators
    assert [item.status for item in items] == ['done', 'done', 'error', 'done']
    assert items[2].error
    assert items[0].output.endswith('img0_pixel.jpg')
    assert all(item.mode == 'encrypt' for item in items)


def test_block_level_error_is_reported(images, tmp_path):
    options = ProcessingOptions(scheme='BLOCK', block_level=30, block_key='k')

    items = BatchHandler(workers=1).process(images, 'decrypt', options, tmp_path / 'out')

    assert [item.status for item in items] == ['error', 'error', 'error']
    assert 'too small' in items[0].error


def test_batch_output_decrypts(images, tmp_path):
    options = ProcessingOptions(scheme='BLOCK', block_level=4, block_key='k')

    items = BatchHandler(workers=3).process(images[:1], 'encrypt', options, tmp_path / 'out')

    with Image.open(items[0].output) as im:
        assert im.size == (20, 20)


def test_bundle_zip(tmp_path):
    outputs = []
    for i in range(2):
        path = tmp_path / f'res{i}.jpg'
        Image.fromarray(np.zeros((4, 4, 3), dtype=np.uint8)).save(path)
        outputs.append(str(path))

    items = [
        BatchItem(locator='a/cat.png', status='done', scheme='GILBERT', mode='encrypt', output=outputs[0]),
        BatchItem(locator='dog.png', status='error', scheme='GILBERT', mode='encrypt', error='boom'),
        BatchItem(locator='bird.png', status='done', scheme='BLOCK', mode='encrypt', output=outputs[1]),
    ]

    archive = bundle_zip(items, tmp_path / 'zips')

    assert archive.name.startswith('secure_box_')
    with zipfile.ZipFile(archive) as zf:
        assert zf.namelist() == ['encrypted_images/cat_pixel_0.jpg', 'encrypted_images/bird_block_1.jpg']


def test_bundle_zip_nothing_to_pack(tmp_path):
    items = [BatchItem(locator='dog.png', status='error', scheme='GILBERT', mode='encrypt', error='boom')]

    assert bundle_zip(items, tmp_path) is None


def exiting_worker(results_queue, index, *args):
    os._exit(3)


class ExitingHandler(BatchHandler):
    worker = staticmethod(exiting_worker)


def test_same_stem_results_are_kept_apart(tmp_path):
    locators = []
    for folder, (width, height) in [('a', (8, 8)), ('b', (9, 5))]:
        (tmp_path / folder).mkdir()
        path = tmp_path / folder / 'photo.png'
        Image.fromarray(random_pixels(width, height)).save(path)
        locators.append(str(path))
    options = ProcessingOptions(scheme='GILBERT')

    items = BatchHandler(workers=1).process(locators, 'encrypt', options, tmp_path / 'out')

    assert [item.status for item in items] == ['done', 'done']
    assert items[0].output != items[1].output
    with Image.open(items[0].output) as first, Image.open(items[1].output) as second:
        assert first.size == (8, 8)
        assert second.size == (9, 5)


def test_output_names():
    names = output_names(['a/photo.png', 'cat.png', 'b/photo.jpg'], 'BLOCK')

    assert names == ['photo_block_0.jpg', 'cat_block.jpg', 'photo_block_2.jpg']


def test_dead_worker_is_reported(images, tmp_path):
    options = ProcessingOptions(scheme='GILBERT')

    items = ExitingHandler(workers=2, poll_interval=0.2).process(images[:2], 'encrypt', options, tmp_path / 'out')

    assert [item.status for item in items] == ['error', 'error']
    assert items[0].error == 'worker exited with code 3'
