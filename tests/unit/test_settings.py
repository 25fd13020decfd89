import pytest

from voice_tagger.settings import load_settings


def test_defaults(monkeypatch):
    for name in ("VT_BUCKET_COUNT", "VT_BIT_DEPTH", "VT_AMPLITUDE", "VT_FALLBACK_WAVEFORM", "VT_TOGGLE_BACKEND"):
        monkeypatch.delenv(name, raising=False)

    cfg = load_settings()

    assert cfg.waveform.bucket_count == 100
    assert cfg.waveform.bit_depth == 8
    assert cfg.waveform.amplitude == "mean_abs"
    assert cfg.waveform.fallback_duration_seconds == 60.0
    assert cfg.waveform.fallback_waveform is None
    assert cfg.toggles.backend == "memory"
    assert cfg.redis.in_queue == "voice_tagger.in"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("VT_BUCKET_COUNT", "128")
    monkeypatch.setenv("VT_BIT_DEPTH", "6")
    monkeypatch.setenv("VT_AMPLITUDE", " RMS ")
    monkeypatch.setenv("VT_REDIS_PORT", "6380")
    monkeypatch.setenv("VT_ALL_AS_VOICE", "on")

    cfg = load_settings()

    assert cfg.waveform.bucket_count == 128
    assert cfg.waveform.bit_depth == 6
    assert cfg.waveform.amplitude == "rms"
    assert cfg.redis.port == 6380
    assert cfg.toggles.all_as_voice is True


def test_malformed_numbers_use_defaults(monkeypatch):
    monkeypatch.setenv("VT_BUCKET_COUNT", "lots")
    monkeypatch.setenv("VT_FETCH_TIMEOUT", "soon")

    cfg = load_settings()

    assert cfg.waveform.bucket_count == 100
    assert cfg.ingest.fetch_timeout == 10.0


@pytest.mark.parametrize("value", ["0", "-3"])
def test_non_positive_bucket_count_fails_at_load(monkeypatch, value):
    monkeypatch.setenv("VT_BUCKET_COUNT", value)

    with pytest.raises(ValueError):
        load_settings()


def test_out_of_range_bit_depth_fails_at_load(monkeypatch):
    monkeypatch.setenv("VT_BIT_DEPTH", "12")

    with pytest.raises(ValueError):
        load_settings()


def test_worker_concurrency(monkeypatch):
    monkeypatch.delenv("VT_CONCURRENCY", raising=False)
    assert load_settings().service.concurrency == 2

    monkeypatch.setenv("VT_CONCURRENCY", "6")
    assert load_settings().service.concurrency == 6

    monkeypatch.setenv("VT_CONCURRENCY", "0")
    assert load_settings().service.concurrency == 1
