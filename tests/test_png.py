import os

import pytest
import requests

import pngme
from pngme import (
    ChunkType,
    Png,
    PngChunk,
    ChecksumMismatchException,
    ChunkDecodeException,
    ChunkNotFoundException,
    InvalidPngStructureException,
    InvalidSignatureException,
    TruncatedChunkException,
)
from conftest import IDAT, IEND, IHDR, PNG_SIGNATURE, raw_chunk, raw_png


def secret_chunk(name='RuSt', text='secret'):
    return PngChunk.new(ChunkType.from_str(name), text.encode())


class TestPngDecoding:
    def test_chunks(self, minimal_png):
        png = Png(minimal_png)
        assert [c.type for c in png.chunks] == ['IHDR', 'IDAT', 'IEND']
        assert len(png) == 3

    def test_round_trip(self, minimal_png):
        png = Png.decode(minimal_png)
        assert png.encode() == minimal_png
        assert Png(png.bytes).chunks == png.chunks

    def test_signature_only(self):
        assert Png(PNG_SIGNATURE).chunks == ()

    def test_bad_signature(self, minimal_png):
        with pytest.raises(InvalidSignatureException):
            Png(b'\x88' + minimal_png[1:])

    def test_empty_file(self):
        with pytest.raises(InvalidSignatureException):
            Png(b'')

    def test_signature_error_is_a_structure_error(self):
        with pytest.raises(InvalidPngStructureException):
            Png(b'GIF89a')

    def test_corrupted_chunk(self, minimal_png):
        corrupted = bytearray(minimal_png)
        corrupted[-6] ^= 0x01  # inside the IEND type
        with pytest.raises(ChunkDecodeException) as info:
            Png(bytes(corrupted))
        assert info.value.offset == len(PNG_SIGNATURE) + len(IHDR) + len(IDAT)
        assert isinstance(info.value.reason, ChecksumMismatchException)
        assert info.value.__cause__ is info.value.reason

    def test_truncated_file(self, minimal_png):
        with pytest.raises(ChunkDecodeException) as info:
            Png(minimal_png[:-2])
        assert isinstance(info.value.reason, TruncatedChunkException)

    def test_trailing_garbage(self, minimal_png):
        with pytest.raises(ChunkDecodeException) as info:
            Png(minimal_png + b'\x00\x01')
        assert info.value.offset == len(minimal_png)

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            Png(PNG_SIGNATURE.decode('latin-1'))

    def test_read_png_signature(self, minimal_png):
        assert pngme.read_png_signature(minimal_png)
        assert not pngme.read_png_signature(b'\x89PNG')


class TestPngEditing:
    def test_append_goes_before_iend(self, minimal_png):
        png = Png(minimal_png)
        chunk = secret_chunk()
        png.append_chunk(chunk)
        assert [c.type for c in png.chunks] == ['IHDR', 'IDAT', 'RuSt', 'IEND']
        assert png.chunks[2] is chunk

    def test_append_twice_keeps_order(self, minimal_png):
        png = Png(minimal_png)
        png.append_chunk(secret_chunk('RuSt'))
        png.append_chunk(secret_chunk('abCd'))
        assert [c.type for c in png.chunks] == ['IHDR', 'IDAT', 'RuSt', 'abCd', 'IEND']

    def test_append_to_empty_image(self):
        png = Png(PNG_SIGNATURE)
        chunk = secret_chunk()
        png.append_chunk(chunk)
        assert png.chunks == (chunk,)

    def test_append_requires_a_chunk(self, minimal_png):
        with pytest.raises(TypeError):
            Png(minimal_png).append_chunk(b'not a chunk')

    def test_append_then_remove(self, minimal_png):
        png = Png(minimal_png)
        chunk = secret_chunk()
        png.append_chunk(chunk)
        assert png.remove_chunk('RuSt') == chunk
        assert len(png) == 3
        assert png.bytes == minimal_png

    def test_remove_first_match_only(self, minimal_png):
        png = Png(minimal_png)
        first = secret_chunk(text='first')
        second = secret_chunk(text='second')
        png.append_chunk(first)
        png.append_chunk(second)
        assert png.remove_chunk('RuSt') == first
        assert png.chunk_by_type('RuSt') == second

    def test_remove_missing(self, minimal_png):
        png = Png(minimal_png)
        with pytest.raises(ChunkNotFoundException) as info:
            png.remove_chunk('RuSt')
        assert info.value.chunk_type == 'RuSt'
        assert png.bytes == minimal_png

    def test_chunks_is_read_only(self, minimal_png):
        png = Png(minimal_png)
        with pytest.raises(AttributeError):
            png.chunks.append(secret_chunk())
        assert len(png) == 3


class TestPngQueries:
    def test_chunk_by_type(self, minimal_png):
        png = Png(minimal_png)
        assert png.chunk_by_type('IHDR').bytes == IHDR
        assert png.chunk_by_type('RuSt') is None

    def test_chunk_by_type_is_case_sensitive(self, minimal_png):
        assert Png(minimal_png).chunk_by_type('ihdr') is None

    def test_get_chunks_by_type(self):
        idat2 = raw_chunk(b'IDAT', b'more')
        png = Png(raw_png(IHDR, IDAT, idat2, IEND))
        assert [c.bytes for c in png.get_chunks_by_type('IDAT')] == [IDAT, idat2]
        assert png.get_chunks_by_type('PLTE') == ()

    def test_from_chunks(self, minimal_png):
        chunks = Png(minimal_png).chunks
        assert Png.from_chunks(chunks).bytes == minimal_png

    def test_from_chunks_checks_types(self):
        with pytest.raises(TypeError):
            Png.from_chunks([IHDR])

    def test_str_lists_every_chunk(self, minimal_png):
        text = str(Png(minimal_png))
        lines = text.splitlines()
        assert lines[0] == 'Png with 3 chunks:'
        assert lines[1].startswith('  #0 @8: 13, IHDR, ')
        assert 'IEND' in lines[3]

    def test_repr(self, minimal_png):
        assert repr(Png(minimal_png)) == '<Png chunks=[IHDR, IDAT, IEND]>'


class TestPngFiles:
    def test_save_and_open(self, tmp_path, minimal_png):
        png = Png(minimal_png)
        png.append_chunk(secret_chunk())
        path = tmp_path / 'out.png'
        png.save(str(path))
        assert pngme.open(str(path)).bytes == png.bytes

    def test_open_url(self, monkeypatch, minimal_png):
        calls = []

        class FakeResponse:
            content = minimal_png

            def raise_for_status(self):
                pass

        def fake_get(url, **kwargs):
            calls.append(url)
            return FakeResponse()

        monkeypatch.setattr(pngme.png.requests, 'get', fake_get)
        png = pngme.open('https://example.com/cover.png')
        assert calls == ['https://example.com/cover.png']
        assert png.bytes == minimal_png

    def test_open_url_http_error(self, monkeypatch):
        class NotFoundResponse:
            content = b'<html>not found</html>'

            def raise_for_status(self):
                raise requests.HTTPError('404 Client Error')

        monkeypatch.setattr(pngme.png.requests, 'get', lambda url, **kwargs: NotFoundResponse())
        with pytest.raises(requests.HTTPError):
            pngme.open('https://example.com/missing.png')

    def test_save_replaces_existing_file(self, png_file, minimal_png):
        png = Png(minimal_png)
        png.append_chunk(secret_chunk())
        png.save(str(png_file))
        assert png_file.read_bytes() == png.bytes
        assert os.listdir(str(png_file.parent)) == [png_file.name]

    def test_save_keeps_permissions(self, png_file, minimal_png):
        os.chmod(str(png_file), 0o640)
        Png(minimal_png).save(str(png_file))
        assert os.stat(str(png_file)).st_mode & 0o777 == 0o640

    def test_failed_save_keeps_original(self, monkeypatch, png_file, minimal_png):
        def broken_replace(src, dst):
            raise OSError('No space left on device')

        png = Png(minimal_png)
        png.append_chunk(secret_chunk())
        monkeypatch.setattr(pngme.png.os, 'replace', broken_replace)
        with pytest.raises(OSError):
            png.save(str(png_file))
        assert png_file.read_bytes() == minimal_png
        assert os.listdir(str(png_file.parent)) == [png_file.name]
