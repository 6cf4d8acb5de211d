# purelzma

LZMA and LZMA2 stream coding in plain Python, with no compiled extensions and no
third-party dependencies.

## What is in the package

- `purelzma.reader.Reader` reads classic `.lzma` files. These are a 13-byte header
  followed by the compressed stream.
- `purelzma.reader2.Reader2` reads LZMA2 chunk sequences.
- `purelzma.encoder.Encoder` writes raw LZMA streams, which have no header. It uses an
  `purelzma.encoderdict.EncoderDict` and the binary-tree match finder
  `purelzma.bintree.BinTree`.
- `purelzma.decoder.Decoder` reads raw LZMA streams, which have no header.
- Lower-level building blocks:
  - the range coder and `LimitedByteWriter`, in `purelzma.rangecodec`
  - the probability codecs, in `purelzma.codecs`
  - the coder state, in `purelzma.state`
  - the LZMA parameters, in `purelzma.properties`
  - the `.lzma` header, in `purelzma.header`
  - the LZMA2 chunk headers and dictionary capacity codes, in `purelzma.header2`

## Installation

```
pip install purelzma
```

## Reading a `.lzma` file

```python
from purelzma.reader import Reader

with open("archive.lzma", "rb") as f:
    reader = Reader(f)
    data = reader.read()
```

`Reader` reads and checks the header as soon as it is created.

- The `dict_cap` argument sets an upper limit on the dictionary size a header may ask for.
  A value of zero, the default, means 2 GiB − 1 bytes.
- If a header asks for more than `dict_cap`, `DictSizeError` is raised.
- Streams whose stated size is above 2^50 bytes are rejected.
- `reader.header()` returns the header as it was stored in the stream.
- `reader.eos_marker()` tells whether the stream ended with an end-of-stream marker.
- A malformed stream raises `purelzma.decoder.DecodeError`.

## Reading LZMA2 chunks

```python
from purelzma.reader2 import Reader2

with open("chunks.lzma2", "rb") as f:
    data = Reader2(f, dict_cap=8 * 1024 * 1024).read()
```

`read(size)` returns at most `size` bytes. An empty result means the sequence has ended.

`Reader2.eos()` reports whether the sequence ended with an end-of-stream chunk.

## Compressing

The encoder produces a raw stream. To make a `.lzma` file, write a `Header` in front of that
stream.

```python
import io

from purelzma.bintree import BinTree
from purelzma.encoder import Encoder
from purelzma.encoderdict import EncoderDict
from purelzma.header import Header
from purelzma.properties import Properties
from purelzma.reader import Reader
from purelzma.state import State

props = Properties(3, 0, 2)
dict_cap = 1 << 16

out = io.BytesIO()
out.write(Header(props, dict_cap, -1).to_bytes())
encoder = Encoder(out, State(props),
                  EncoderDict(dict_cap, 4096, BinTree(dict_cap)),
                  eos_marker=True)
encoder.write(b"hello hello hello")
encoder.close()

out.seek(0)
assert Reader(out).read() == b"hello hello hello"
```

To cap the size of the output, wrap the writer in
`purelzma.rangecodec.LimitedByteWriter(writer, limit)`. Once that limit is reached,
`Encoder.write` raises `LimitError`. `Encoder.close` still ends the stream properly, and
`Encoder.compressed()` tells how many input bytes made it into the stream.

## Header helpers

```python
from purelzma.header import Header, valid_header
from purelzma.properties import Properties

header = Header(Properties(3, 0, 2), 8 * 1024 * 1024, -1)
raw = header.to_bytes()
assert valid_header(raw)
assert Header.from_bytes(raw) == header
```

## What it does not do

- It has no LZMA2 writer. LZMA2 data can be read but not produced.
- It does not handle the `.xz` container format.
- It has no command-line tool. It is a library only.

## Running the tests

```
pip install -e ".[test]"
pytest
```