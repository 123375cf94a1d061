import os
import random
import time


def get_random_int(n_max, n_min=1):
    """Get random integer in [n_min, n_max] range"""
    rand = random.SystemRandom()
    return rand.randint(n_min, n_max)


def get_n_jobs():
    """Get number of supported cores for multiprocessing if enabled"""
    check_env = os.environ.get("ZKSUMCHECK_PARALLEL_CPU")
    if check_env:
        return int(check_env)
    else:
        return -1


def get_parallel_threshold():
    """Get minimum number of hypercube points before summation runs in parallel"""
    check_env = os.environ.get("ZKSUMCHECK_PARALLEL_THRESHOLD")
    if check_env:
        return int(check_env)
    else:
        return 8192


def split_range(size: int, n: int):
    """Split `range(size)` into at most `n` contiguous `(start, stop)` chunks"""
    n = max(1, min(n, size))
    step, extra = divmod(size, n)
    chunks = []
    start = 0
    for i in range(n):
        stop = start + step + (1 if i < extra else 0)
        chunks.append((start, stop))
        start = stop
    return chunks


class Timer:
    def __init__(self, name):
        self.start_time = 0
        self.end_time = 0
        self.name = name

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.time()
        elapsed_time = self.end_time - self.start_time
        print(f"{self.name}: {elapsed_time:.2f} seconds")
