import httpx
import pytest

from voice_tagger.audio.ingest import AudioFetcher, IngestLimits
from voice_tagger.errors import ByteSourceError, DecodeError


def _fetcher(max_bytes: int = 64) -> AudioFetcher:
    return AudioFetcher(limits=IngestLimits(max_bytes=max_bytes, fetch_timeout=1.0))


@pytest.mark.asyncio
async def test_reads_raw_bytes():
    assert await _fetcher().read(bytearray(b"12345")) == b"12345"


@pytest.mark.asyncio
async def test_reads_path(tmp_path):
    path = tmp_path / "clip.ogg"
    path.write_bytes(b"oggdata")

    assert await _fetcher().read(str(path)) == b"oggdata"
    assert await _fetcher().read(path) == b"oggdata"


@pytest.mark.asyncio
async def test_missing_path_raises(tmp_path):
    with pytest.raises(ByteSourceError):
        await _fetcher().read(tmp_path / "missing.ogg")


@pytest.mark.asyncio
async def test_reads_sync_and_async_readers():
    async def _reader():
        return b"async"

    assert await _fetcher().read(lambda: b"sync") == b"sync"
    assert await _fetcher().read(_reader) == b"async"


@pytest.mark.asyncio
async def test_failing_reader_raises_decode_error():
    def _reader():
        raise OSError("gone")

    with pytest.raises(DecodeError):
        await _fetcher().read(_reader)


@pytest.mark.asyncio
async def test_enforces_size_limit():
    with pytest.raises(ByteSourceError):
        await _fetcher(max_bytes=3).read(b"1234")


@pytest.mark.asyncio
@pytest.mark.parametrize("source", [None, 12, object()])
async def test_unsupported_sources_raise(source):
    with pytest.raises(ByteSourceError):
        await _fetcher().read(source)


def _served(handler, max_bytes: int = 64) -> AudioFetcher:
    return AudioFetcher(
        limits=IngestLimits(max_bytes=max_bytes, fetch_timeout=1.0),
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_fetches_url():
    seen = []

    def _handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, content=b"mp3bytes")

    data = await _served(_handler).read("https://cdn.example/a.mp3")

    assert data == b"mp3bytes"
    assert seen == ["https://cdn.example/a.mp3"]


@pytest.mark.asyncio
async def test_url_errors_become_byte_source_errors():
    with pytest.raises(ByteSourceError):
        await _served(lambda request: httpx.Response(404)).read("https://cdn.example/a.mp3")


@pytest.mark.asyncio
async def test_url_transport_failure(mocker):
    mocker.patch("httpx.AsyncClient.stream", side_effect=httpx.ConnectError("boom"))

    with pytest.raises(ByteSourceError):
        await _fetcher().read("http://cdn.example/a.mp3")


@pytest.mark.asyncio
async def test_malformed_url_becomes_byte_source_error():
    with pytest.raises(ByteSourceError):
        await _fetcher().read("http://[::1/a.mp3")


@pytest.mark.asyncio
async def test_path_with_nul_byte_becomes_byte_source_error():
    with pytest.raises(ByteSourceError):
        await _fetcher().read("a\x00b.mp3")


@pytest.mark.asyncio
async def test_oversize_content_length_rejected_before_body():
    started = []

    async def _body():
        started.append(True)
        yield b"x" * 16

    def _handler(request):
        return httpx.Response(200, headers={"Content-Length": "4096"}, content=_body())

    with pytest.raises(ByteSourceError):
        await _served(_handler).read("https://cdn.example/a.mp3")
    assert started == []


@pytest.mark.asyncio
async def test_unbounded_stream_aborted_past_limit():
    sent = []

    async def _endless():
        while True:
            sent.append(32)
            yield b"x" * 32

    def _handler(request):
        return httpx.Response(200, content=_endless())

    with pytest.raises(ByteSourceError):
        await _served(_handler, max_bytes=100).read("https://cdn.example/a.mp3")
    assert sum(sent) <= 128


@pytest.mark.asyncio
async def test_declared_size_checked_before_reading():
    def _reader():
        raise AssertionError("reader must not run")

    with pytest.raises(ByteSourceError):
        await _fetcher(max_bytes=3).read(_reader, declared_size=10)
