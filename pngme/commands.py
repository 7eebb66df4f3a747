import logging

from .chunk_type import ChunkType
from .png import Png, PngChunk, open as open_png
from .pngexceptions import ChunkNotFoundException, PngException
from .utils import is_url


"""
The operations behind each command line action.
They work on file names (or urls when only reading) and leave printing to the caller.
"""

logger = logging.getLogger(__name__)


def _load(location: str) -> Png:
    logger.debug("Reading %s", location)
    png = open_png(location)
    logger.debug("Decoded %d chunks from %s", len(png), location)
    return png


def _check_writable(location: str) -> None:
    # Remote images can only be read
    if is_url(location):
        raise PngException("cannot write to {}, please give an output file".format(location))


def _write(png: Png, location: str) -> None:
    logger.debug("Writing %d chunks to %s", len(png), location)
    png.save(location)


def encode(file_path: str, chunk_type: str, message: str, output_file: str = None) -> PngChunk:
    """
    Hides a message in a new chunk, placed right before the IEND chunk.

    :param file_path: the image to read.
    :param chunk_type: the type of the new chunk (e.g. 'RuSt').
    :param message: the text to hide.
        Characters that could not be decoded from the command line are stored as their original bytes.
    :param output_file: where to save the new image. The input file is overwritten if this is None.
    :returns: the chunk that was added.
    """
    parsed_type = ChunkType.from_str(chunk_type)
    if not parsed_type.is_valid():
        logger.warning("%s has its reserved bit set, some decoders will reject it", chunk_type)
    destination = output_file if output_file is not None else file_path
    _check_writable(destination)
    try:
        data = message.encode('utf-8', errors='surrogateescape')
    except UnicodeEncodeError as e:
        raise PngException("the message can't be stored as UTF-8: {}".format(e)) from e
    png = _load(file_path)
    chunk = PngChunk.new(parsed_type, data)
    png.append_chunk(chunk)
    _write(png, destination)
    logger.info("Hid %d bytes in a %s chunk of %s", chunk.length, chunk.type, destination)
    return chunk


def decode(file_path: str, chunk_type: str) -> str:
    """
    :returns: the message hidden in the first chunk of the given type.
    :raises ChunkNotFoundException: if the image has no such chunk.
    :raises InvalidTextException: if the chunk does not contain UTF-8 text.
    """
    name = str(ChunkType.from_str(chunk_type))
    chunk = _load(file_path).chunk_by_type(name)
    if chunk is None:
        raise ChunkNotFoundException(name)
    return chunk.data_as_text()


def remove(file_path: str, chunk_type: str) -> PngChunk:
    """
    Removes the first chunk of the given type and saves the image in place.

    :returns: the removed chunk.
    :raises ChunkNotFoundException: if the image has no such chunk, in which case the file is left untouched.
    """
    name = str(ChunkType.from_str(chunk_type))
    _check_writable(file_path)
    png = _load(file_path)
    chunk = png.remove_chunk(name)
    _write(png, file_path)
    logger.info("Removed a %s chunk of %d bytes from %s", name, chunk.length, file_path)
    return chunk


def print_chunks(file_path: str) -> str:
    """
    :returns: a human readable listing of the chunks of an image.
    """
    return str(_load(file_path))
