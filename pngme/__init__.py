"""
pngme hides messages inside PNG files, in chunks of their own.
"""

from .chunk_type import ChunkType
from .png import Png, PngChunk, Chunk, open, read_png_signature
from .pngexceptions import *

__version__ = "1.0.0"
