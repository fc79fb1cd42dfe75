from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from palette_quant import Quantizer, quantize
from palette_quant.lookup import lookup_many


def _image(seed: int, n: int = 4000) -> np.ndarray:
    rng = np.random.default_rng(seed)
    base = rng.integers(0, 0x10000, 24, dtype=np.uint16)
    return rng.choice(base, size=n)


def test_lookup_before_synthesis_is_an_error():
    q = Quantizer()
    q.accumulate(0x1234)
    assert not q.synthesized
    with pytest.raises(RuntimeError, match="not synthesized"):
        q.lookup(0x1234)
    with pytest.raises(RuntimeError):
        q.index_pixels([0x1234])
    with pytest.raises(RuntimeError):
        _ = q.palette


def test_full_run():
    pixels = _image(1)
    q = Quantizer()
    assert q.accumulate_many(pixels) == pixels.size
    assert q.fine.total() == pixels.size
    result = q.synthesize()
    indices = q.index_pixels(pixels)
    assert indices.shape == pixels.shape
    assert indices.dtype == np.uint8
    assert int(indices.max()) < 192
    # 24 source colours fit in the specific slots
    assert int(indices.max()) < 128
    assert q.palette is result.palette
    assert all(q.lookup(int(p)) == int(i) for p, i in zip(pixels[:200], indices[:200]))


def test_instances_do_not_share_state():
    a = Quantizer()
    b = Quantizer()
    a.accumulate_many([0xFFFF] * 10)
    assert b.fine.total() == 0
    b.accumulate(0x0000)
    ra = a.synthesize()
    rb = b.synthesize()
    assert ra.colour(0) == (62, 63, 62)
    assert rb.colour(0) == (0, 0, 0)


def test_accumulating_after_synthesis_keeps_previous_result():
    q = Quantizer()
    q.accumulate_many([0xF800] * 5)
    first = q.synthesize()
    q.accumulate_many([0x001F] * 50)
    assert q.result is first
    assert q.lookup(0xF800) == 0
    second = q.synthesize()
    assert q.lookup(0x001F) == 0
    assert q.lookup(0xF800) == 1
    assert second is not first


def test_resynthesis_without_new_pixels_is_identical():
    q = Quantizer()
    q.accumulate_many(_image(2))
    first = q.synthesize()
    second = q.synthesize()
    assert np.array_equal(first.palette, second.palette)
    assert np.array_equal(first.fine_to_slot, second.fine_to_slot)


def test_quantize_accepts_plain_sequences():
    palette, indices = quantize([0x0000] * 7)
    assert palette.shape == (192, 3)
    assert indices.tolist() == [0] * 7


def test_quantize_empty_image():
    palette, indices = quantize(np.zeros((0,), dtype=np.uint16))
    assert indices.size == 0
    assert palette.shape == (192, 3)


def test_concurrent_runs_match_sequential():
    images = [_image(seed) for seed in range(6)]
    sequential = [quantize(img) for img in images]
    with ThreadPoolExecutor(max_workers=3) as ex:
        parallel = list(ex.map(quantize, images))
    for (pal_a, idx_a), (pal_b, idx_b) in zip(sequential, parallel):
        assert np.array_equal(pal_a, pal_b)
        assert np.array_equal(idx_a, idx_b)


def test_index_pixels_matches_free_lookup():
    pixels = _image(9)
    q = Quantizer()
    q.accumulate_many(pixels)
    result = q.synthesize()
    assert np.array_equal(q.index_pixels(pixels), lookup_many(pixels, result.fine_to_slot))


def test_debug_logs_synthesis(capsys):
    q = Quantizer(debug=True)
    q.accumulate_many([0x1234, 0x4321])
    q.synthesize()
    out = capsys.readouterr().out
    assert out.startswith("[debug] ")
    assert "Pixels: 2" in out
