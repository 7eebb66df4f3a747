from .pngexceptions import InvalidChunkTypeException
from .utils import as_data, Data as _Data


"""
Chunk types are the four letters names given to every PNG chunk (e.g. IHDR, tEXt).
The case of each letter is a property bit of the chunk, see https://www.w3.org/TR/PNG/#5Chunk-naming-conventions.
"""

_ChunkType = "ChunkType"


def _is_letter(byte: int) -> bool:
    return 65 <= byte <= 90 or 97 <= byte <= 122


def _is_upper(byte: int) -> bool:
    return 65 <= byte <= 90


def _is_lower(byte: int) -> bool:
    return 97 <= byte <= 122


class ChunkType:

    """
    The four bytes type code of a PNG chunk.
    Each byte should be an ascii letter, and the case of each of them carries a meaning:
        1st letter: uppercase if the chunk is critical, lowercase if it is ancillary
        2nd letter: uppercase if the chunk is public, lowercase if it is private
        3rd letter: reserved, has to be uppercase in a valid chunk type
        4th letter: lowercase if the chunk is safe to copy by editors that do not understand it

    Chunk types are immutable and compare byte to byte.
    """

    __slots__ = ('__bytes',)

    def __init__(self, type_bytes: _Data) -> None:
        """
        Constructs a chunk type from its raw bytes, without checking they are ascii letters.
        Use :meth:`is_valid` to check the result, or :meth:`from_str` to parse a user supplied string.

        :param type_bytes: exactly 4 bytes.
        :raises TypeError: if type_bytes is not byte-like.
        :raises ValueError: if type_bytes is not 4 bytes long.
        """
        type_bytes = as_data(type_bytes)
        if len(type_bytes) != 4:
            raise ValueError("A chunk type has to be 4 bytes long, got {}".format(len(type_bytes)))
        self.__bytes = type_bytes

    @classmethod
    def from_bytes(cls, type_bytes: _Data) -> _ChunkType:
        """
        Same as calling the constructor. No validation is done on the bytes themselves.
        """
        return cls(type_bytes)

    @classmethod
    def from_str(cls, name: str) -> _ChunkType:
        """
        Parses a chunk type from its name (e.g. 'RuSt').

        :param name: a string of exactly 4 ascii letters.
        :returns: the corresponding chunk type.
        :raises InvalidChunkTypeException: if name is not made of exactly 4 ascii letters.
        """
        if not isinstance(name, str):
            raise TypeError("A chunk type name should be a string, not {}".format(type(name).__name__))
        try:
            raw = name.encode('ascii')
        except UnicodeEncodeError:
            raise InvalidChunkTypeException(name) from None
        if len(raw) != 4 or not all(_is_letter(b) for b in raw):
            raise InvalidChunkTypeException(name)
        return cls(raw)

    @property
    def bytes(self) -> bytes:
        """
        :returns: the 4 raw bytes of this chunk type.
        """
        return self.__bytes

    def to_bytes(self) -> bytes:
        return self.__bytes

    def to_string(self) -> str:
        # latin-1 maps every byte to one character, so this never fails even for invalid types
        return self.__bytes.decode('latin-1')

    def is_valid(self) -> bool:
        """
        :returns: True if all the bytes are ascii letters and the reserved bit is valid.
        """
        b = self.__bytes
        return _is_letter(b[0]) and _is_letter(b[1]) and self.is_reserved_bit_valid() and _is_letter(b[3])

    def is_critical(self) -> bool:
        """
        :returns: whether this chunk type is critical (first letter uppercase).
            A decoder coming across an unknown critical chunk cannot display the image.
        """
        return _is_upper(self.__bytes[0])

    def is_public(self) -> bool:
        """
        :returns: whether this chunk type is part of the public PNG specification (second letter uppercase).
        """
        return _is_upper(self.__bytes[1])

    def is_reserved_bit_valid(self) -> bool:
        """
        :returns: whether the reserved bit is unset (third letter uppercase).
        """
        return _is_upper(self.__bytes[2])

    def is_safe_to_copy(self) -> bool:
        """
        :returns: whether editors may copy this chunk even if they don't understand it (fourth letter lowercase).
        """
        return _is_lower(self.__bytes[3])

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChunkType):
            return NotImplemented
        return self.__bytes == other.bytes

    def __hash__(self) -> int:
        return hash(self.__bytes)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return "ChunkType({!r})".format(self.__bytes)
