import struct
import zlib

import pytest


PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

MESSAGE = "This is where your secret message will be!"
MESSAGE_CRC = 2882656334


def raw_chunk(chunk_type: bytes, data: bytes, crc: int = None) -> bytes:
    """Builds the bytes of a chunk by hand, so tests don't depend on the code under test."""
    if crc is None:
        crc = zlib.crc32(chunk_type + data)
    return struct.pack('>I', len(data)) + chunk_type + data + struct.pack('>I', crc)


def raw_png(*chunks: bytes) -> bytes:
    return PNG_SIGNATURE + b''.join(chunks)


# A 1x1 red RGBA image
IHDR = raw_chunk(b'IHDR', struct.pack('>IIBBBBB', 1, 1, 8, 6, 0, 0, 0))
IDAT = raw_chunk(b'IDAT', zlib.compress(b'\x00\xff\x00\x00\xff'))
IEND = raw_chunk(b'IEND', b'')


@pytest.fixture
def minimal_png() -> bytes:
    return raw_png(IHDR, IDAT, IEND)


@pytest.fixture
def message_chunk() -> bytes:
    return raw_chunk(b'RuSt', MESSAGE.encode('utf-8'), MESSAGE_CRC)


@pytest.fixture
def png_file(tmp_path, minimal_png):
    path = tmp_path / "cover.png"
    path.write_bytes(minimal_png)
    return path
