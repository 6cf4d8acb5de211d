import io
import random

import pytest

from purelzma.bintree import BinTree
from purelzma.decoder import Decoder
from purelzma.decoderdict import MIN_DICT_CAP, DecoderDict
from purelzma.encoder import Encoder
from purelzma.encoderdict import EncoderDict
from purelzma.properties import Properties
from purelzma.rangecodec import LimitedByteWriter, LimitError
from purelzma.state import State

TEST_STRING = """LZMA decoder test example
=========================
! LZMA ! Decoder ! TEST !
=========================
! TEST ! LZMA ! Decoder !
=========================
---- Test Line 1 --------
=========================
---- Test Line 2 --------
=========================
=== End of test file ====
=========================
"""

_WORDS = ["alpha", "beta", "gamma", "delta", "lorem", "ipsum", "dolor",
          "sit", "amet", "river", "stone", "cloud", "the", "and", "of"]


def _random_text(n: int, seed: int = 42) -> bytes:
    rng = random.Random(seed)
    out = []
    total = 0
    while total < n:
        w = rng.choice(_WORDS) + rng.choice([" ", " ", " ", ".\n", ", "])
        out.append(w)
        total += len(w)
    return "".join(out).encode()[:n]


def _make_encoder(writer, props, eos_marker):
    dict_cap = MIN_DICT_CAP
    enc_dict = EncoderDict(dict_cap, dict_cap + 1024, BinTree(dict_cap))
    state = State(props)
    return Encoder(writer, state, enc_dict, eos_marker), state


def _cycle(orig: bytes) -> bytes:
    buf = io.BytesIO()
    w, state = _make_encoder(buf, Properties(2, 0, 2), True)
    assert w.write(orig) == len(orig)
    w.close()
    state.reset()
    r = Decoder(io.BytesIO(buf.getvalue()), state, DecoderDict(MIN_DICT_CAP), -1)
    return r.read()


@pytest.mark.parametrize("n", [0, 1, 10, 100, len(TEST_STRING)])
def test_encoder_cycle_test_string(n):
    orig = TEST_STRING.encode()[:n]
    assert _cycle(orig) == orig


def test_encoder_cycle_random_text():
    orig = _random_text(20000, seed=7)
    assert _cycle(orig) == orig


def test_encoder_cycle_limited_writer():
    txt = _random_text(50000)
    buf = io.BytesIO()
    lbw = LimitedByteWriter(buf, 100)
    w, state = _make_encoder(lbw, Properties(3, 0, 2), False)
    try:
        w.write(txt)
    except LimitError:
        pass
    w.close()
    n = w.compressed()
    assert 0 < n < len(txt)
    assert len(buf.getvalue()) <= 100
    state.reset()
    r = Decoder(io.BytesIO(buf.getvalue()), state, DecoderDict(MIN_DICT_CAP), n)
    got = r.read()
    assert len(got) == n
    assert got == txt[:n]


def test_compress_all_empties_buffer():
    buf = io.BytesIO()
    w, _ = _make_encoder(buf, Properties(3, 0, 2), False)
    w.write(b"abcabcabcabc")
    w.compress(True)
    assert w.dict.buffered() == 0
    assert w.compressed() == 12


def test_compress_keeps_lookahead():
    buf = io.BytesIO()
    w, _ = _make_encoder(buf, Properties(3, 0, 2), False)
    w.write(b"x" * 10)
    w.compress(False)
    assert w.dict.buffered() == 10
    assert w.compressed() == 0


def test_known_size_without_marker():
    orig = TEST_STRING.encode()
    buf = io.BytesIO()
    w, state = _make_encoder(buf, Properties(3, 0, 2), False)
    w.write(orig)
    w.close()
    state.reset()
    r = Decoder(io.BytesIO(buf.getvalue()), state, DecoderDict(MIN_DICT_CAP),
                len(orig))
    assert r.read() == orig
    assert r.eos_marker is False


def test_reopen_resets_compressed_count():
    w, _ = _make_encoder(io.BytesIO(), Properties(3, 0, 2), False)
    w.write(b"hello world")
    w.compress(True)
    assert w.compressed() == 11
    w.reopen(io.BytesIO())
    assert w.compressed() == 0