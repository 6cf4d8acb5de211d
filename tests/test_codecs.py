import io

import pytest

from purelzma.codecs import (
    LEN_STATES,
    MAX_MATCH_LEN,
    MIN_MATCH_LEN,
    DistCodec,
    LengthCodec,
    LiteralCodec,
    TreeCodec,
    TreeReverseCodec,
    len_state,
)
from purelzma.rangecodec import PROB_INIT, RangeDecoder, RangeEncoder


def _encode(fn) -> RangeDecoder:
    out = io.BytesIO()
    e = RangeEncoder(out)
    fn(e)
    e.close()
    return RangeDecoder(io.BytesIO(out.getvalue()))


@pytest.mark.parametrize("cls", [TreeCodec, TreeReverseCodec])
def test_tree_codecs_round_trip(cls):
    values = [0, 1, 5, 31, 63, 17, 42, 0, 63]
    enc = cls(6)
    dec = enc.copy()

    def write(e):
        for v in values:
            enc.encode(e, v)

    d = _encode(write)
    assert [dec.decode(d) for _ in values] == values


@pytest.mark.parametrize("cls", [TreeCodec, TreeReverseCodec])
def test_tree_codec_initial_probs(cls):
    tc = cls(3)
    assert tc.bits == 3
    assert len(tc.probs) == 1 << 3
    assert all(p == PROB_INIT for p in tc.probs)


@pytest.mark.parametrize("bits", [0, 33])
def test_tree_codec_bits_out_of_range(bits):
    with pytest.raises(ValueError):
        TreeCodec(bits)


def test_tree_codec_copy_is_independent():
    tc = TreeCodec(4)
    clone = tc.copy()
    tc.probs[1] = 1
    assert clone.probs[1] == PROB_INIT


def test_literal_codec_round_trip():
    data = b"Hello, LZMA literal codec!\x00\xff\x80"
    cases = [
        (c, state, match, lit_state)
        for i, c in enumerate(data)
        for state, match, lit_state in [(i % 12, (c ^ i) & 0xFF, i % 8)]
    ]
    enc = LiteralCodec(3, 0)
    dec = LiteralCodec(3, 0)

    def write(e):
        for c, state, match, lit_state in cases:
            enc.encode(e, c, state, match, lit_state)

    d = _encode(write)
    got = bytes(dec.decode(d, state, match, lit_state)
                for _, state, match, lit_state in cases)
    assert got == data


def test_literal_codec_with_matching_byte():
    enc = LiteralCodec(0, 0)
    dec = enc.copy()
    values = [0x41, 0x41, 0x42, 0x00]

    def write(e):
        for v in values:
            enc.encode(e, v, 7, 0x41, 0)

    d = _encode(write)
    assert [dec.decode(d, 7, 0x41, 0) for _ in values] == values


@pytest.mark.parametrize("lc,lp", [(9, 0), (-1, 0), (0, 5), (0, -1)])
def test_literal_codec_params_out_of_range(lc, lp):
    with pytest.raises(ValueError):
        LiteralCodec(lc, lp)


def test_literal_codec_size():
    lc = LiteralCodec(3, 0)
    assert len(lc.probs) == 0x300 << 3


def test_length_codec_round_trip_all_values():
    offsets = list(range(MAX_MATCH_LEN - MIN_MATCH_LEN + 1))
    enc = LengthCodec()
    dec = enc.copy()

    def write(e):
        for i, l in enumerate(offsets):
            enc.encode(e, l, i % 16)

    d = _encode(write)
    assert [dec.decode(d, i % 16) for i in range(len(offsets))] == offsets


def test_length_codec_out_of_range():
    lc = LengthCodec()
    e = RangeEncoder(io.BytesIO())
    with pytest.raises(ValueError):
        lc.encode(e, MAX_MATCH_LEN - MIN_MATCH_LEN + 1, 0)


def test_length_codec_copy_is_independent():
    lc = LengthCodec()
    clone = lc.copy()
    lc.low[0].probs[1] = 1
    lc.choice[0] = 1
    assert clone.low[0].probs[1] == PROB_INIT
    assert clone.choice[0] == PROB_INIT


def test_len_state_clamps():
    assert [len_state(l) for l in range(LEN_STATES)] == list(range(LEN_STATES))
    assert len_state(LEN_STATES) == LEN_STATES - 1
    assert len_state(200) == LEN_STATES - 1


def test_dist_codec_round_trip():
    dists = [0, 1, 2, 3, 4, 5, 7, 100, 1000, 4095, 0x12345,
             1 << 31, 0xFFFFFFFE, 0xFFFFFFFF]
    enc = DistCodec()
    dec = enc.copy()

    def write(e):
        for i, dist in enumerate(dists):
            enc.encode(e, dist, i % 6)

    d = _encode(write)
    assert [dec.decode(d, i % 6) for i in range(len(dists))] == dists


def test_dist_codec_copy_is_independent():
    dc = DistCodec()
    clone = dc.copy()
    dc.align_codec.probs[1] = 1
    dc.pos_model[0].probs[1] = 1
    dc.pos_slot_codecs[0].probs[1] = 1
    assert clone.align_codec.probs[1] == PROB_INIT
    assert clone.pos_model[0].probs[1] == PROB_INIT
    assert clone.pos_slot_codecs[0].probs[1] == PROB_INIT