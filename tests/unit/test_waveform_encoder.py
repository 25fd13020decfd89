import binascii

import pytest

from voice_tagger.waveform.encoder import encode, max_level, pack, quantize, unpack


def test_quantize_floors_and_clamps():
    assert quantize([0.0, 0.5, 1.0, 1.2, -0.3], 8) == [0, 127, 255, 255, 0]


def test_quantize_six_bit_range():
    assert quantize([0.0, 0.5, 1.0], 6) == [0, 31, 63]


def test_quantize_treats_nan_as_silence():
    assert quantize([float("nan")], 8) == [0]


@pytest.mark.parametrize("bit_depth", [0, 9, -1])
def test_bit_depth_outside_byte_range_rejected(bit_depth):
    with pytest.raises(ValueError):
        max_level(bit_depth)


def test_pack_unpack_round_trip():
    values = [0, 1, 63, 127, 200, 255, 7]

    assert unpack(pack(values)) == values


def test_pack_rejects_values_above_a_byte():
    with pytest.raises(ValueError):
        pack([256])


def test_unpack_rejects_garbage():
    with pytest.raises(binascii.Error):
        unpack("not base64!!")


def test_encode_peak_decodes_to_max_level():
    text = encode([0.25, 1.0, 0.5], 6)

    assert unpack(text)[1] == 63


def test_pack_matches_known_host_string():
    assert pack([0, 75, 86, 63, 37, 26, 24, 14, 14, 16, 7, 0]) == "AEtWPyUaGA4OEAcA"
