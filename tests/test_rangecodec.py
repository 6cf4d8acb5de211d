import io
import random

import pytest

from purelzma.rangecodec import (
    PROB_INIT,
    DirectCodec,
    LimitedByteWriter,
    LimitError,
    RangeDecoder,
    RangeEncoder,
)


def _random_bits(seed, n):
    rng = random.Random(seed)
    return [(rng.random() < 0.8) * 1 for _ in range(n)]


def test_empty_stream_is_five_zero_bytes():
    out = io.BytesIO()
    RangeEncoder(out).close()
    assert out.getvalue() == bytes(5)
    dec = RangeDecoder(io.BytesIO(out.getvalue()))
    assert dec.possibly_at_end()


def test_encode_bits_round_trip():
    bits = _random_bits(1, 5000)
    out = io.BytesIO()
    enc = RangeEncoder(out)
    enc_probs = [PROB_INIT] * 4
    for k, b in enumerate(bits):
        enc.encode_bit(b, enc_probs, k % 4)
    enc.close()
    data = out.getvalue()
    assert data[0] == 0
    assert len(data) < len(bits) // 8

    dec = RangeDecoder(io.BytesIO(data))
    dec_probs = [PROB_INIT] * 4
    decoded = [dec.decode_bit(dec_probs, k % 4) for k in range(len(bits))]
    assert decoded == bits
    assert dec_probs == enc_probs


def test_probability_moves_towards_bit():
    probs = [PROB_INIT]
    enc = RangeEncoder(io.BytesIO())
    enc.encode_bit(0, probs, 0)
    assert probs[0] > PROB_INIT
    probs = [PROB_INIT]
    enc.encode_bit(1, probs, 0)
    assert probs[0] < PROB_INIT


def test_direct_bits_round_trip():
    bits = _random_bits(2, 777)
    out = io.BytesIO()
    enc = RangeEncoder(out)
    for b in bits:
        enc.direct_encode_bit(b)
    enc.close()
    dec = RangeDecoder(io.BytesIO(out.getvalue()))
    assert [dec.direct_decode_bit() for _ in bits] == bits


@pytest.mark.parametrize("bits", [1, 4, 13, 26, 32])
def test_direct_codec_round_trip(bits):
    rng = random.Random(bits)
    values = [rng.getrandbits(bits) for _ in range(50)]
    codec = DirectCodec(bits)
    out = io.BytesIO()
    enc = RangeEncoder(out)
    for v in values:
        codec.encode(enc, v)
    enc.close()
    dec = RangeDecoder(io.BytesIO(out.getvalue()))
    assert [codec.decode(dec) for _ in values] == values


def test_limited_byte_writer():
    out = io.BytesIO()
    w = LimitedByteWriter(out, 2)
    w.write_byte(1)
    w.write_byte(2)
    with pytest.raises(LimitError):
        w.write_byte(3)
    assert out.getvalue() == b"\x01\x02"
    assert w.remaining == 0


def test_decoder_rejects_nonzero_first_byte():
    with pytest.raises(ValueError):
        RangeDecoder(io.BytesIO(b"\x01\x00\x00\x00\x00"))


def test_decoder_rejects_code_not_below_range():
    with pytest.raises(ValueError):
        RangeDecoder(io.BytesIO(b"\x00\xff\xff\xff\xff"))


def test_decoder_short_input():
    with pytest.raises(EOFError):
        RangeDecoder(io.BytesIO(b"\x00\x00"))