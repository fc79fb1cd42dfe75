import numpy as np

from palette_quant.histogram import BucketTable


def test_fresh_tables_are_zeroed():
    fine = BucketTable.fine()
    coarse = BucketTable.coarse()
    assert fine.size == 4096
    assert coarse.size == 64
    for arr in (fine.counts, fine.red, fine.green, fine.blue):
        assert not arr.any()
    assert fine.total() == 0


def test_total_matches_pixel_count():
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 0x10000, size=10_000, dtype=np.uint16)
    table = BucketTable.fine()
    assert table.accumulate_many(pixels) == 10_000
    assert table.total() == 10_000


def test_single_and_batch_accumulation_agree():
    rng = np.random.default_rng(11)
    pixels = rng.integers(0, 0x10000, size=2_000, dtype=np.uint16)
    one = BucketTable.fine()
    for p in pixels.tolist():
        one.accumulate(p)
    many = BucketTable.fine()
    many.accumulate_many(pixels)
    assert np.array_equal(one.counts, many.counts)
    assert np.array_equal(one.red, many.red)
    assert np.array_equal(one.green, many.green)
    assert np.array_equal(one.blue, many.blue)


def test_black_image_fills_bucket_zero():
    table = BucketTable.fine()
    table.accumulate_many(np.zeros(50, dtype=np.uint16))
    assert int(table.counts[0]) == 50
    assert table.counts[1:].sum() == 0
    assert table.mean_colour(0) == (0, 0, 0)


def test_sums_use_scaled_channels():
    table = BucketTable.fine()
    assert table.accumulate(0xFFFF) == 4095
    table.accumulate(0xFFFF)
    table.accumulate(0xFFFF)
    assert int(table.red[4095]) == 3 * 62
    assert int(table.green[4095]) == 3 * 63
    assert int(table.blue[4095]) == 3 * 62
    assert table.mean_colour(4095) == (62, 63, 62)


def test_means_truncate():
    table = BucketTable.fine()
    # both land in bucket 0: red fields 0 and 1 -> scaled 0 and 2
    table.accumulate(0x0000)
    table.accumulate(0x0800)
    table.accumulate(0x0800)
    assert table.mean_colour(0) == (4 // 3, 0, 0)
    means = table.means()
    assert means.dtype == np.uint8
    assert tuple(means[0].tolist()) == (1, 0, 0)
    assert not means[1:].any()


def test_empty_accumulate_many_is_noop():
    table = BucketTable.fine()
    assert table.accumulate_many([]) == 0
    assert table.total() == 0


def test_copy_is_independent():
    table = BucketTable.fine()
    table.accumulate(0x1234)
    clone = table.copy()
    clone.accumulate(0x1234)
    assert table.total() == 1
    assert clone.total() == 2


def test_fold_adds_selected_buckets():
    fine = BucketTable.fine()
    fine.accumulate_many([0xFFFF, 0xFFFF, 0x0000])
    coarse = BucketTable.coarse()
    coarse.fold(np.array([4095, 0]), fine, np.array([63, 63]))
    assert int(coarse.counts[63]) == 3
    assert int(coarse.red[63]) == 2 * 62
    assert coarse.total() == 3
