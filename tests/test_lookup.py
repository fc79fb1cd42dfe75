import numpy as np
import pytest

from palette_quant.buckets import coarse_index, coarse_indices, fine_index
from palette_quant.constants import UNASSIGNED
from palette_quant.histogram import BucketTable
from palette_quant.lookup import lookup, lookup_many
from palette_quant.synthesis import synthesize_palette


@pytest.fixture
def random_result():
    rng = np.random.default_rng(21)
    table = BucketTable.fine()
    # skewed so a few buckets dominate
    table.accumulate_many(rng.integers(0, 0x10000, 3000, dtype=np.uint16))
    table.accumulate_many(np.repeat(np.arange(0, 0x10000, 997, dtype=np.uint16), 40))
    return synthesize_palette(table)


def test_unassigned_map_gives_general_slots_only(all_pixels):
    empty_map = np.full(4096, UNASSIGNED, dtype=np.int16)
    slots = lookup_many(all_pixels, empty_map)
    assert np.array_equal(slots, (128 + coarse_indices(all_pixels)).astype(np.uint8))
    assert lookup(0xFFFF, empty_map) == 191


def test_lookup_many_matches_lookup(all_pixels, random_result):
    fine_to_slot = random_result.fine_to_slot
    slots = lookup_many(all_pixels, fine_to_slot)
    assert slots.dtype == np.uint8
    assert int(slots.max()) < 192
    for p in all_pixels[::31].tolist():
        assert lookup(p, fine_to_slot) == slots[p]


def test_assigned_buckets_use_their_slot(all_pixels, random_result):
    fine_to_slot = random_result.fine_to_slot
    for p in all_pixels[::53].tolist():
        slot = int(fine_to_slot[fine_index(p)])
        got = lookup(p, fine_to_slot)
        if slot != UNASSIGNED:
            assert got == slot
        else:
            assert got == 128 + coarse_index(p)


def test_pixels_sharing_a_fine_bucket_share_a_slot(random_result):
    # 0x0000 and 0x0841 differ only in dropped low bits
    fine_to_slot = random_result.fine_to_slot
    assert lookup(0x0000, fine_to_slot) == lookup(0x0841, fine_to_slot)


def test_bad_map_shape_rejected():
    with pytest.raises(ValueError):
        lookup(0, np.zeros(64, dtype=np.int16))
    with pytest.raises(ValueError):
        lookup_many([0, 1], np.zeros((64, 64), dtype=np.int16))


def test_plain_list_map_accepted(random_result):
    as_list = random_result.fine_to_slot.tolist()
    for p in (0x0000, 0x1234, 0xFFFF):
        assert lookup(p, as_list) == lookup(p, random_result.fine_to_slot)
    assert np.array_equal(
        lookup_many([0, 0xFFFF], as_list),
        lookup_many([0, 0xFFFF], random_result.fine_to_slot),
    )


def test_non_integer_map_rejected():
    with pytest.raises(TypeError):
        lookup(0, [0.5] * 4096)
    with pytest.raises(ValueError):
        lookup(0, [0] * 10)
