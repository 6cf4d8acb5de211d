import io
import lzma
import random

import pytest

from purelzma.decoder import DecodeError
from purelzma.decoderdict import DecoderDict
from purelzma.header2 import ChunkError
from purelzma.reader2 import Reader2, UncompressedReader

TEXT = b"".join(
    f"line {i}: the quick brown fox jumps over the lazy dog\n".encode()
    for i in range(300)
)


def _lzma2(data, dict_size=1 << 16):
    return lzma.compress(
        data,
        format=lzma.FORMAT_RAW,
        filters=[{"id": lzma.FILTER_LZMA2, "dict_size": dict_size}],
    )


def _read_all(r, size=-1):
    out = bytearray()
    while True:
        chunk = r.read(size)
        if not chunk:
            return bytes(out)
        if size >= 0:
            assert len(chunk) <= size
        out += chunk


def test_uncompressed_chunk():
    r = Reader2(io.BytesIO(b"\x01\x00\x04hello\x00"))
    assert r.read() == b"hello"
    assert r.eos()
    assert r.read() == b""


def test_multiple_uncompressed_chunks():
    data = b"\x01\x00\x02abc" + b"\x02\x00\x01de" + b"\x00"
    r = Reader2(io.BytesIO(data))
    assert _read_all(r) == b"abcde"
    assert r.eos()


def test_compressed_round_trip():
    r = Reader2(io.BytesIO(_lzma2(TEXT)), dict_cap=1 << 16)
    assert r.read() == TEXT
    assert r.eos()


def test_small_reads():
    r = Reader2(io.BytesIO(_lzma2(TEXT)), dict_cap=4096)
    assert _read_all(r, 7) == TEXT


def test_mixed_data_multiple_chunks():
    noise = random.Random(1).randbytes(70000)
    data = TEXT + noise + TEXT
    r = Reader2(io.BytesIO(_lzma2(data)))
    assert _read_all(r, 5000) == data
    assert r.eos()


def test_truncated_stream():
    compressed = _lzma2(TEXT)
    r = Reader2(io.BytesIO(compressed[: len(compressed) // 2]))
    with pytest.raises(DecodeError):
        _read_all(r)
    assert not r.eos()


def test_missing_eos_chunk():
    r = Reader2(io.BytesIO(b"\x01\x00\x04hello"))
    assert r.read() == b"hello"
    with pytest.raises(DecodeError):
        r.read()
    assert not r.eos()


def test_first_chunk_must_reset_dictionary():
    r = Reader2(io.BytesIO(b"\x02\x00\x00a\x00"))
    with pytest.raises(ChunkError):
        r.read()


def test_error_is_sticky():
    r = Reader2(io.BytesIO(b"\x02\x00\x00a\x00"))
    with pytest.raises(ChunkError):
        r.read()
    with pytest.raises(ChunkError):
        r.read(1)


def test_empty_stream_is_unexpected_eof():
    r = Reader2(io.BytesIO(b""))
    with pytest.raises(DecodeError):
        r.read()


def test_only_eos_chunk():
    r = Reader2(io.BytesIO(b"\x00"))
    assert r.read() == b""
    assert r.eos()


def test_dict_cap_out_of_range():
    with pytest.raises(ValueError):
        Reader2(io.BytesIO(b"\x00"), dict_cap=100)


def test_uncompressed_reader_small_dict():
    ur = UncompressedReader(io.BytesIO(b"abcdefghij"), DecoderDict(4), 10)
    assert ur.read() == b"abcdefghij"
    assert ur.read() == b""


def test_uncompressed_reader_partial_reads():
    ur = UncompressedReader(io.BytesIO(b"abcdefghij"), DecoderDict(4), 10)
    assert _read_all(ur, 3) == b"abcdefghij"


def test_uncompressed_reader_truncated():
    ur = UncompressedReader(io.BytesIO(b"abc"), DecoderDict(16), 5)
    assert ur.read() == b"abc"
    with pytest.raises(DecodeError):
        ur.read()


def test_uncompressed_reader_reopen():
    d = DecoderDict(16)
    ur = UncompressedReader(io.BytesIO(b"abc"), d, 3)
    assert ur.read() == b"abc"
    ur.reopen(io.BytesIO(b"xyz"), 3)
    assert ur.read() == b"xyz"
    assert d.pos() == 6