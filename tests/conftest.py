import numpy as np
import pytest


def pixel_for_fine_bucket(fine_id: int) -> int:
    """A pixel whose channels carry exactly the fine bucket's nibbles."""
    red4 = (fine_id >> 8) & 0xF
    green4 = (fine_id >> 4) & 0xF
    blue4 = fine_id & 0xF
    return ((red4 << 1) << 11) | ((green4 << 2) << 5) | (blue4 << 1)


@pytest.fixture
def all_pixels() -> np.ndarray:
    return np.arange(0x10000, dtype=np.uint16)


@pytest.fixture
def one_per_fine_bucket() -> np.ndarray:
    return np.array([pixel_for_fine_bucket(i) for i in range(4096)], dtype=np.uint16)
