class PngException(Exception):
    """Base class for every error raised by pngme."""
    def __init__(self, txt):
        super(PngException, self).__init__(txt)

class InvalidChunkTypeException(PngException):
    """Raised when a chunk type string is not made of exactly 4 ascii letters."""
    def __init__(self, value):
        self.value = value
        super(InvalidChunkTypeException, self).__init__(
            "invalid chunk type {!r}: expected 4 ascii letters".format(value)
        )

class InvalidChunkStructureException(PngException):
    """Raised when a chunk's internal structure is invalid."""
    def __init__(self, txt):
        super(InvalidChunkStructureException, self).__init__(txt)

class ChecksumMismatchException(InvalidChunkStructureException):
    """Raised when the CRC stored in a chunk does not match its content."""
    def __init__(self, expected, found):
        self.expected = expected
        self.found = found
        super(ChecksumMismatchException, self).__init__(
            "checksum mismatch: computed {:#010x}, chunk says {:#010x}".format(expected, found)
        )

class TruncatedChunkException(InvalidChunkStructureException):
    """Raised when there are less bytes available than a chunk needs."""
    def __init__(self, needed, available):
        self.needed = needed
        self.available = available
        super(TruncatedChunkException, self).__init__(
            "truncated chunk: needs {} bytes but only {} are available".format(needed, available)
        )

class InvalidPngStructureException(PngException):
    """Raised when a png structure is invalid."""
    def __init__(self, txt):
        super(InvalidPngStructureException, self).__init__(txt)

class InvalidSignatureException(InvalidPngStructureException):
    """Raised when a file does not start with the PNG signature."""
    def __init__(self):
        super(InvalidSignatureException, self).__init__("missing PNG signature")

class ChunkDecodeException(InvalidPngStructureException):
    """Raised when one of the chunks of a png could not be decoded."""
    def __init__(self, offset, reason):
        self.offset = offset
        self.reason = reason
        super(ChunkDecodeException, self).__init__(
            "failed to decode chunk at offset {}: {}".format(offset, reason)
        )

class InvalidTextException(PngException):
    """Raised when a chunk's payload is read as text but is not valid UTF-8."""
    def __init__(self, reason):
        self.reason = reason
        super(InvalidTextException, self).__init__(
            "chunk data is not valid UTF-8: {}".format(reason)
        )

class ChunkNotFoundException(PngException):
    """Raised when no chunk of the requested type exists in an image."""
    def __init__(self, chunk_type):
        self.chunk_type = chunk_type
        super(ChunkNotFoundException, self).__init__(
            "chunk does not exist: {}".format(chunk_type)
        )
