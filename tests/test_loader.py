import pytest
import requests

from stormdmg import loader
from stormdmg.config import AnalysisConfig
from stormdmg.errors import LoadError


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.payload), chunk_size):
            yield self.payload[i:i + chunk_size]


def test_read_storm_csv_keeps_only_required_columns(scenario_csv):
    df = loader.read_storm_csv(scenario_csv)
    assert sorted(df.columns) == sorted(loader.REQUIRED_FIELDS)
    assert list(df["PROPDMGEXP"]) == ["K", "M", ""]
    assert list(df["CROPDMGEXP"]) == ["", "", "B"]


def test_read_compressed_csv(tmp_path, scenario_df):
    path = tmp_path / "StormData.csv.bz2"
    scenario_df.to_csv(path, index=False)
    df = loader.read_storm_csv(path)
    assert len(df) == 3
    assert list(df["EVTYPE"]) == ["TORNADO", "TORNADO", "FLOOD"]


def test_digit_codes_stay_text(tmp_path):
    path = tmp_path / "s.csv"
    path.write_text(
        "REFNUM,EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP\n"
        "1,HAIL,0,0,5,0,1,+\n"
    )
    df = loader.read_storm_csv(path)
    assert df["PROPDMGEXP"][0] == "0"
    assert df["CROPDMGEXP"][0] == "+"


def test_missing_file_raises_load_error(tmp_path):
    with pytest.raises(LoadError):
        loader.read_storm_csv(tmp_path / "nope.csv")


def test_corrupt_compressed_file_raises_load_error(tmp_path):
    path = tmp_path / "bad.csv.bz2"
    path.write_bytes(b"not bzip2 at all")
    with pytest.raises(LoadError):
        loader.read_storm_csv(path)


def test_fetch_uses_cache(tmp_path, monkeypatch):
    cached = tmp_path / "StormData.csv.bz2"
    cached.write_bytes(b"cached")

    def boom(*a, **kw):
        raise AssertionError("should not download")

    monkeypatch.setattr(loader.requests, "get", boom)
    assert loader.fetch_dataset("http://example.invalid/x", tmp_path) == cached


def test_fetch_downloads_and_caches(tmp_path, monkeypatch):
    calls = []

    def fake_get(url, stream, timeout):
        calls.append(url)
        return FakeResponse(b"REFNUM\n1\n")

    monkeypatch.setattr(loader.requests, "get", fake_get)
    path = loader.fetch_dataset("http://example.invalid/x", tmp_path / "cache", "s.csv")
    assert path.read_bytes() == b"REFNUM\n1\n"
    assert not (tmp_path / "cache" / "s.csv.part").exists()
    loader.fetch_dataset("http://example.invalid/x", tmp_path / "cache", "s.csv")
    assert len(calls) == 1
    loader.fetch_dataset("http://example.invalid/x", tmp_path / "cache", "s.csv", force=True)
    assert len(calls) == 2


@pytest.mark.parametrize("failure", [
    lambda *a, **kw: FakeResponse(b"", status=404),
    lambda *a, **kw: (_ for _ in ()).throw(requests.ConnectionError("offline")),
])
def test_fetch_failure_raises_load_error(tmp_path, monkeypatch, failure):
    monkeypatch.setattr(loader.requests, "get", failure)
    with pytest.raises(LoadError):
        loader.fetch_dataset("http://example.invalid/x", tmp_path, "s.csv")
    assert not (tmp_path / "s.csv").exists()
    assert not (tmp_path / "s.csv.part").exists()


def test_load_storm_data_prefers_local_path(scenario_csv, monkeypatch):
    monkeypatch.setattr(loader, "fetch_dataset", lambda *a, **kw: pytest.fail("download attempted"))
    df = loader.load_storm_data(AnalysisConfig(data_path=str(scenario_csv)))
    assert len(df) == 3
