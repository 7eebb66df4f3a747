import os
import tempfile
from struct import unpack, unpack_from, pack
from typing import Iterable, Optional
from zlib import crc32 as crc

import requests

from .chunk_type import ChunkType
from .pngexceptions import *
from .utils import as_data, is_url, Data as _Data


"""
This is the main pngme module, and contains the structures that make up a PNG file:
the chunks and the ordered chunk container.
"""

# Type aliases for annotations
_Png = "Png"
_Chunk = "PngChunk"

_PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

# length + type + crc
_CHUNK_OVERHEAD = 12

# The PNG specification restricts chunk lengths to 2^31 - 1 bytes
_MAX_CHUNK_LENGTH = (1 << 31) - 1

_HTTP_TIMEOUT = 30


class PngChunk:

    """
    Represents a PNG chunk.
    The structure of a png chunk should be as follow:
            [   length (4 bytes, big-endian) |
                type (4 bytes, ascii)        |
                data (length bytes)          |
                crc (4 bytes, big-endian)    ]

    The crc checksum is calculated with the chunk type and data, but does
    not include the length header.
    A chunk never exists with a wrong checksum: it is checked when decoding and computed when creating one.
    Chunks are immutable.
    """

    def __init__(self, chunkbytes: _Data) -> None:
        """
        Creates a PngChunk from the bytes given in the chunkbytes parameter.
        To create a new chunk from a type and a payload, use :meth:`new`.

        :param chunkbytes: the raw bytes of the chunk.
            If to much data is given everything not in the range specified in the length header will be ignored.
        :raises TypeError: if the data is not of a valid type.
        :raises TruncatedChunkException: if chunkbytes is shorter than what the length header announces.
        :raises ChecksumMismatchException: if the stored CRC does not match the chunk's type and data.
        """
        chunkbytes = as_data(chunkbytes)
        available = len(chunkbytes)
        if available < _CHUNK_OVERHEAD:
            raise TruncatedChunkException(_CHUNK_OVERHEAD, available)
        size = unpack('>I', chunkbytes[:4])[0] + _CHUNK_OVERHEAD
        if available < size:
            raise TruncatedChunkException(size, available)
        self.__bytes = chunkbytes[:size]
        expected = self.compute_crc()
        if expected != self.crc:
            raise ChecksumMismatchException(expected, self.crc)

    @classmethod
    def decode(cls, chunkbytes: _Data) -> _Chunk:
        """
        Same as calling the constructor.
        """
        return cls(chunkbytes)

    @classmethod
    def new(cls, chunk_type: ChunkType, data: _Data) -> _Chunk:
        """
        Builds a chunk from its type and payload, computing its length and CRC.

        :param chunk_type: the type of the new chunk.
        :param data: the payload of the new chunk.
        :raises TypeError: if one of the arguments is not of the right type.
        :raises ValueError: if the payload is too large to fit in a chunk.
        """
        if not isinstance(chunk_type, ChunkType):
            raise TypeError("chunk_type should be a ChunkType, not {}".format(type(chunk_type).__name__))
        data = as_data(data)
        if len(data) > _MAX_CHUNK_LENGTH:
            raise ValueError("A chunk's payload can't be longer than {} bytes".format(_MAX_CHUNK_LENGTH))
        body = chunk_type.bytes + data
        return cls(pack('>I', len(data)) + body + pack('>I', crc(body)))

    @property
    def bytes(self) -> bytes:
        """
        :returns: this chunk's raw content.
        """
        return self.__bytes

    def encode(self) -> bytes:
        return self.__bytes

    @property
    def crc(self) -> int:
        """
        :returns: the chunk's CRC checksum, decoded.
        """
        return unpack('>I', self.__bytes[-4:])[0]

    def compute_crc(self) -> int:
        """
        Compute the CRC checksum for this chunk.
        :returns: the correct CRC checksum for this chunk.
        """
        return crc(self.__bytes[4:-4])

    @property
    def chunk_type(self) -> ChunkType:
        return ChunkType(self.__bytes[4:8])

    @property
    def type(self) -> str:
        """
        :returns: the type of this chunk (E.g. IHDR)
        """
        return self.chunk_type.to_string()

    @property
    def length(self) -> int:
        """
        :returns: the length of this chunk's payload, as stored in its header.
        """
        return unpack('>I', self.__bytes[0:4])[0]

    def __len__(self) -> int:
        return self.length

    @property
    def size(self) -> int:
        """
        :returns: the number of bytes this chunk takes in a file, headers and CRC included.
        """
        return len(self.__bytes)

    @property
    def data(self) -> bytes:
        """
        :returns: this chunk's payload.
        """
        return self.__bytes[8:-4]

    def data_as_text(self) -> str:
        """
        :returns: this chunk's payload, decoded as UTF-8 text.
        :raises InvalidTextException: if the payload is not valid UTF-8.
        """
        try:
            return self.data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise InvalidTextException(e) from e

    def __eq__(self, other) -> bool:
        if not isinstance(other, PngChunk):
            return NotImplemented
        return self.__bytes == other.bytes

    def __hash__(self) -> int:
        return hash(self.__bytes)

    def __str__(self) -> str:
        return "{}, {}, {}".format(self.length, self.type, self.crc)

    def __repr__(self) -> str:
        return "<PngChunk [{}] length={} crc={:#010x}>".format(self.type, self.length, self.crc)


Chunk = PngChunk


class Png:

    """
    Represents a PNG file according to the PNG specification: https://www.w3.org/TR/PNG/.
    A PNG file starts with the PNG signature.
    It then contains a stream of PNG chunks, each starting with a four bytes length,
    followed by a four bytes ascii type and then by a payload of the specified length, followed by a CRC checksum.
    It is mandatory that a PNG file starts with an IHDR chunk and ends with an IEND chunk,
    new chunks are therefore inserted right before the last chunk.
    """

    def __init__(self, filebytes: _Data) -> None:
        """
        Constructs a :class:`Png` object using the given bytes.
        To directly read a PNG file from disc or http, prefer the :func:`open` function.

        :param filebytes: the bytes that make up the PNG.
        :raises TypeError: if filebytes is not of the right type.
        :raises InvalidSignatureException: if the PNG signature is missing.
        :raises ChunkDecodeException: if one of the chunks is truncated or has a wrong checksum.
        """
        filebytes = as_data(filebytes)
        if not read_png_signature(filebytes):
            raise InvalidSignatureException()
        self.__chunks = self.__read_chunks(filebytes)

    @staticmethod
    def __read_chunks(data):
        decoded_chunks = []
        offset = len(_PNG_SIGNATURE)
        end = len(data)
        while offset < end:
            if end - offset >= 4:
                chunk_end = offset + unpack_from('>I', data, offset)[0] + _CHUNK_OVERHEAD
            else:
                chunk_end = end
            try:
                chunk = PngChunk(data[offset:chunk_end])
            except InvalidChunkStructureException as e:
                raise ChunkDecodeException(offset, e) from e
            decoded_chunks.append(chunk)
            offset += chunk.size
        return decoded_chunks

    @classmethod
    def decode(cls, filebytes: _Data) -> _Png:
        """
        Same as calling the constructor.
        """
        return cls(filebytes)

    @classmethod
    def from_chunks(cls, chunks: Iterable[PngChunk]) -> _Png:
        """
        Builds an image out of already existing chunks.

        :param chunks: the chunks of the image, in order.
        :raises TypeError: if one of the chunks is not a :class:`PngChunk`.
        """
        chunks = list(chunks)
        for chunk in chunks:
            _check_chunk(chunk)
        png = cls.__new__(cls)
        png.__chunks = chunks
        return png

    @property
    def chunks(self) -> tuple:
        """
        :returns: the PNG chunks that make up this image.
        """
        return tuple(self.__chunks)

    @property
    def bytes(self) -> bytes:
        """
        :returns: the raw bytes that make up the PNG file.
        """
        b = bytearray(_PNG_SIGNATURE)
        for chunk in self.__chunks:
            b += chunk.bytes
        return bytes(b)

    def encode(self) -> bytes:
        return self.bytes

    def save(self, file_name: str) -> None:
        """
        Save this PNG to a file on disc.
        The bytes are written to a temporary file next to the target, which then replaces it,
        so an existing file is never left half written.

        :param file_name: name to save the file as. Will be overwritten if is already exists.
        """
        directory = os.path.dirname(os.path.abspath(file_name))
        fd, temp_name = tempfile.mkstemp(prefix='.pngme-', suffix='.tmp', dir=directory)
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(self.bytes)
            os.chmod(temp_name, _file_mode(file_name))
            os.replace(temp_name, file_name)
        except BaseException:
            os.unlink(temp_name)
            raise

    def append_chunk(self, chunk: PngChunk) -> None:
        """
        Adds the chunk just before the last chunk of the image, which should be IEND.
        If the image has no chunk at all, the chunk simply becomes the first one.

        :param chunk: the chunk to add to the image.
        :raises TypeError: if chunk is not a :class:`PngChunk`.
        """
        _check_chunk(chunk)
        if self.__chunks:
            self.__chunks.insert(len(self.__chunks) - 1, chunk)
        else:
            self.__chunks.append(chunk)

    def remove_chunk(self, name: str) -> PngChunk:
        """
        Removes the first chunk of the given type from the image.

        :param name: the chunk type to look for (e.g. tEXt).
        :returns: the removed chunk.
        :raises ChunkNotFoundException: if this image does not contain a chunk of that type.
        """
        for index, chunk in enumerate(self.__chunks):
            if chunk.type == name:
                return self.__chunks.pop(index)
        raise ChunkNotFoundException(name)

    def chunk_by_type(self, name: str) -> Optional[PngChunk]:
        """
        :param name: the chunk type to look for (e.g. IHDR).
        :returns: the first chunk of the given type in this image, or None if there is none.
        """
        for chunk in self.__chunks:
            if chunk.type == name:
                return chunk
        return None

    def get_chunks_by_type(self, name: str) -> tuple:
        """
        :param name: the chunk type to look for (e.g. IDAT).
        :returns: all the chunks of the given type in this image.
        """
        return tuple(filter(lambda c: c.type == name, self.__chunks))

    def __len__(self) -> int:
        return len(self.__chunks)

    def __str__(self) -> str:
        lines = ["Png with {} chunks:".format(len(self.__chunks))]
        address = len(_PNG_SIGNATURE)
        for index, chunk in enumerate(self.__chunks):
            lines.append("  #{} @{}: {}".format(index, address, chunk))
            address += chunk.size
        return "\n".join(lines)

    def __repr__(self) -> str:
        return "<Png chunks=[{}]>".format(", ".join(c.type for c in self.__chunks))


def _check_chunk(chunk):
    if not isinstance(chunk, PngChunk):
        raise TypeError("Expected a PngChunk, not {}".format(type(chunk).__name__))


def _file_mode(file_name):
    """
    :returns: the permissions of file_name if it exists, the ones a new file would get otherwise.
    """
    try:
        return os.stat(file_name).st_mode & 0o7777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


_builtin_open = open


def open(location: str) -> Png:
    """
    :returns: a Png object, reading from the given file name. Http and Https links are supported as well.
    :raises requests.HTTPError: if the image could not be downloaded.
    """
    if is_url(location):
        response = requests.get(location, timeout=_HTTP_TIMEOUT)
        response.raise_for_status()
        data = response.content
    else:
        with _builtin_open(location, 'rb') as f:
            data = f.read()
    return Png(data)


def read_png_signature(data: _Data) -> bool:
    return data[0:8] == _PNG_SIGNATURE
