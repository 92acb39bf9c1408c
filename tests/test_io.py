"""Tests for archive handling, downloads, the listing serializer and provenance helpers."""

from __future__ import annotations

import zipfile

import pandas as pd
import pytest
import requests
import yaml

from suburb_listing.core.errors import ArchiveError, DownloadError, SerializationError
from suburb_listing.io import (
    IngestRecord,
    download_file,
    extract_archive,
    read_listing_yaml,
    upsert_ingest_summary,
    write_listing_yaml,
)


def _listing(**overrides) -> pd.DataFrame:
    data = {
        "title": ["Brunswick", "Carlton"],
        "Code": ["SAL20002", "SAL20003"],
        "Total population": [24900, 16000],
        "Median weekly rent": ["$450", None],
        "Median weekly family income": ["$2700", "$1650"],
        "Most popular commute method": ["🚂 Train", ""],
    }
    data.update(overrides)
    df = pd.DataFrame(data)
    df["Total population"] = df["Total population"].astype("int64")
    return df


def test_listing_round_trip(tmp_path):
    path = tmp_path / "listing" / "suburbs.yml"
    df = _listing()
    assert write_listing_yaml(df, path) == 2

    records = read_listing_yaml(path)
    expected = [
        {k: (None if pd.isna(v) else v) for k, v in row.items()}
        for row in df.to_dict(orient="records")
    ]
    assert records == expected
    assert [list(r) for r in records] == [list(df.columns)] * 2


def test_listing_file_is_row_oriented_with_field_order(tmp_path):
    path = tmp_path / "suburbs.yml"
    write_listing_yaml(_listing(), path)

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert isinstance(raw, list)
    assert list(raw[0]) == [
        "title",
        "Code",
        "Total population",
        "Median weekly rent",
        "Median weekly family income",
        "Most popular commute method",
    ]
    assert raw[1]["Median weekly rent"] is None
    assert isinstance(raw[0]["Total population"], int)
    assert "🚂 Train" in path.read_text(encoding="utf-8")


def test_invalid_record_publishes_nothing(tmp_path):
    path = tmp_path / "suburbs.yml"
    path.write_text("previous: listing\n", encoding="utf-8")

    with pytest.raises(SerializationError) as exc:
        write_listing_yaml(_listing(**{"Total population": [-1, 5]}), path)

    assert exc.value.stage == "serialize"
    assert path.read_text(encoding="utf-8") == "previous: listing\n"
    assert list(tmp_path.iterdir()) == [path]


def test_read_listing_rejects_non_sequence(tmp_path):
    path = tmp_path / "suburbs.yml"
    path.write_text("title: nope\n", encoding="utf-8")
    with pytest.raises(SerializationError):
        read_listing_yaml(path)


def _zip(path, members: dict[str, str]):
    with zipfile.ZipFile(path, "w") as zf:
        for name, text in members.items():
            zf.writestr(name, text)
    return path


def test_extract_archive_renames_directory(tmp_path):
    archive = _zip(
        tmp_path / "pack.zip",
        {"Long Name For VIC/G01.csv": "a\n1\n", "Metadata/geo.txt": "x"},
    )
    dest = tmp_path / "datapack"
    (dest / "tables").mkdir(parents=True)
    (dest / "tables" / "stale.csv").write_text("old", encoding="utf-8")

    extract_archive(archive, dest, rename={"Long Name For VIC": "tables"})

    assert (dest / "tables" / "G01.csv").read_text(encoding="utf-8") == "a\n1\n"
    assert not (dest / "tables" / "stale.csv").exists()
    assert not (dest / "Long Name For VIC").exists()
    assert (dest / "Metadata" / "geo.txt").exists()


def test_extract_archive_missing_rename_source(tmp_path):
    archive = _zip(tmp_path / "pack.zip", {"other/G01.csv": "a"})
    with pytest.raises(ArchiveError) as exc:
        extract_archive(archive, tmp_path / "out", rename={"Long Name For VIC": "tables"})
    assert exc.value.stage == "fetch"


def test_extract_archive_rejects_bad_zip(tmp_path):
    archive = tmp_path / "pack.zip"
    archive.write_bytes(b"<html>not a zip</html>")
    with pytest.raises(ArchiveError):
        extract_archive(archive, tmp_path / "out")


def test_extract_archive_rejects_path_traversal(tmp_path):
    archive = _zip(tmp_path / "pack.zip", {"../escape.txt": "x"})
    with pytest.raises(ArchiveError):
        extract_archive(archive, tmp_path / "out")
    assert not (tmp_path / "escape.txt").exists()


class _FakeResponse:
    def __init__(self, body: bytes, status: int = 200):
        self.body = body
        self.status = status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.exceptions.HTTPError(f"{self.status} error")

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i : i + chunk_size]


def test_download_file_writes_body(tmp_path, monkeypatch):
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs))
        return _FakeResponse(b"zip-bytes")

    monkeypatch.setattr(requests, "get", fake_get)
    out = download_file("https://example.test/pack.zip", tmp_path / "raw" / "pack.zip", timeout_s=5)

    assert out.read_bytes() == b"zip-bytes"
    assert calls[0][1]["timeout"] == 5
    assert calls[0][1]["stream"] is True


def test_download_file_http_error(tmp_path, monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, **kw: _FakeResponse(b"", status=404))
    out = tmp_path / "pack.zip"
    with pytest.raises(DownloadError) as exc:
        download_file("https://example.test/pack.zip", out)
    assert exc.value.stage == "fetch"
    assert not out.exists()
    assert not (tmp_path / "pack.zip.part").exists()


def test_download_file_network_error(tmp_path, monkeypatch):
    def boom(url, **kw):
        raise requests.exceptions.ConnectionError("offline")

    monkeypatch.setattr(requests, "get", boom)
    with pytest.raises(DownloadError):
        download_file("https://example.test/pack.zip", tmp_path / "pack.zip")


def test_upsert_ingest_summary_replaces_by_dataset(tmp_path):
    summary = tmp_path / "_meta" / "ingest_summary.csv"
    first = IngestRecord("suburb_listing", "published", "listing/a.yml", 3, 6, 10, "g01")
    other = IngestRecord("abs_gcp_datapack", "raw", "data/raw/x.zip", 9, None, 100, "url")
    upsert_ingest_summary([first, other], summary)
    upsert_ingest_summary([IngestRecord("suburb_listing", "published", "listing/a.yml", 100, 6, 99, "g01")], summary)

    df = pd.read_csv(summary)
    assert df["dataset"].tolist() == ["abs_gcp_datapack", "suburb_listing"]
    assert df.set_index("dataset").loc["suburb_listing", "rows"] == 100
