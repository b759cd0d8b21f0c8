"""Speed Test

Script encrypts and decrypts sample image and prints
time it took for each scheme available.
"""

import sys
import timeit

from img_scramble.imgscramble import encrypt_then_decrypt, schemes


url = sys.argv[1] if len(sys.argv) > 1 else 'sample.png'

for scheme in schemes:
    start = timeit.default_timer()
    encrypt_then_decrypt(url, scheme=scheme)
    elapsed = timeit.default_timer() - start

    print(f'{scheme}  = {elapsed}')
