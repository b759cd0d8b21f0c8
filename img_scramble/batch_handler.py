import logging
import queue
import time
import zipfile

from dataclasses import dataclass
from multiprocessing import Process, Queue
from pathlib import Path
from typing import List, Optional

from .exceptions import ScrambleException
from .imgscramble import process_file, result_name
from .util import Mode


logger = logging.getLogger(__name__)


@dataclass
class BatchItem:
    locator: str
    status: str
    scheme: str
    mode: str
    output: Optional[str] = None
    error: Optional[str] = None


def output_names(locators, scheme):
    """File names for batch results, indexed names where stems collide"""
    names = [result_name(locator, scheme) for locator in locators]

    return [result_name(locator, scheme, index) if names.count(name) > 1 else name
            for index, (locator, name) in enumerate(zip(locators, names))]


def process_item(results_queue, index, locator, mode, options, output_dir, quality, name=None):
    """Process single image in child process and put BatchItem on the queue

    One failing image must not stall the batch so every error ends up
    in the item instead of killing the worker.
    """
    item = BatchItem(locator=locator, status='done', scheme=options.scheme, mode=Mode(mode).value)

    try:
        item.output = str(process_file(locator, mode, options, output_dir, quality, name))
    except ScrambleException as e:
        item.status = 'error'
        item.error = str(e)
    except Exception as e:
        logger.exception('unexpected failure while processing %s', locator)
        item.status = 'error'
        item.error = f'{type(e).__name__}: {e}'

    results_queue.put((index, item))


class BatchHandler:
    worker = staticmethod(process_item)

    def __init__(self, workers=4, poll_interval=1.0):
        self.workers = max(1, workers)
        self.poll_interval = poll_interval
        self.queue = Queue()

    def process(self, locators, mode, options, output_dir, quality=None) -> List[BatchItem]:
        """Scramble or unscramble many images, one process per image

        At most `workers` processes run at the same time. Worker which
        dies without reporting (killed by signal) gives an error item.

        Returns:
            list: BatchItem for every locator, in the same order
        """
        results: List[Optional[BatchItem]] = [None] * len(locators)
        names = output_names(locators, options.scheme)
        pending = list(enumerate(locators))
        running = {}

        while pending or running:
            while pending and len(running) < self.workers:
                index, locator = pending.pop(0)
                proc = Process(target=self.worker,
                               args=(self.queue, index, locator, mode, options, output_dir, quality, names[index]))
                proc.start()
                running[index] = proc

            try:
                index, item = self.queue.get(timeout=self.poll_interval)
            except queue.Empty:
                self._collect_dead(running, results, locators, mode, options)
                continue

            self._finish(running, results, index, item, len(locators))

        return results

    def _finish(self, running, results, index, item, total):
        results[index] = item
        running.pop(index).join()

        if item.status == 'done':
            logger.info('[%d/%d] %s -> %s', index + 1, total, item.locator, item.output)
        else:
            logger.warning('[%d/%d] %s failed: %s', index + 1, total, item.locator, item.error)

    def _collect_dead(self, running, results, locators, mode, options):
        dead = [index for index, proc in running.items() if proc.exitcode is not None]
        if not dead:
            return

        # results put just before exit may still be on the queue
        while True:
            try:
                index, item = self.queue.get(timeout=0.1)
            except queue.Empty:
                break
            self._finish(running, results, index, item, len(locators))

        for index in dead:
            if index not in running:
                continue
            item = BatchItem(locator=locators[index], status='error', scheme=options.scheme,
                             mode=Mode(mode).value,
                             error=f'worker exited with code {running[index].exitcode}')
            self._finish(running, results, index, item, len(locators))


def bundle_zip(items, archive_dir):
    """Pack successful results into secure_box_<timestamp>.zip

    Parameters:
        items (list): BatchItem records, failed ones are skipped
        archive_dir (str or Path): Directory for the archive

    Returns:
        Path: Path of the archive or None when there was nothing to pack
    """
    processed = [item for item in items if item.status == 'done' and item.output]
    if not processed:
        return None

    archive_dir = Path(archive_dir)
    archive_dir.mkdir(parents=True, exist_ok=True)
    archive = archive_dir / f'secure_box_{int(time.time() * 1000)}.zip'

    with zipfile.ZipFile(archive, 'w') as zf:
        for idx, item in enumerate(processed):
            zf.write(item.output, f'encrypted_images/{result_name(item.locator, item.scheme, idx)}')

    logger.info('bundled %d images into %s', len(processed), archive)

    return archive
