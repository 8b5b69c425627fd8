import csv
import json
import os

import pytest

from registry.sources import SourceIndex
from reporting.export import export_csv, export_json, export_json_chunks
from resolution.models import PackageRecord, PlatformSupport, PlatformSupportStatus

SUPPORTED = PlatformSupportStatus.SUPPORTED
PURE = PlatformSupportStatus.PURE_PYTHON
UNAVAILABLE = PlatformSupportStatus.UNAVAILABLE


def make_record(name="pkg", android=PURE, ios=PURE, android_version=None, ios_version=None, **kwargs):
    return PackageRecord(
        name=name,
        android=PlatformSupport(android, android_version),
        ios=PlatformSupport(ios, ios_version),
        **kwargs,
    )


def test_json_fields(tmp_path):
    rec = make_record(
        "numpy",
        android=SUPPORTED,
        ios=SUPPORTED,
        ios_version="2.1.0",
        source=SourceIndex.PYSWIFT,
        version="2.2.0",
    )
    out = tmp_path / "out.json"
    export_json([rec], str(out))

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data == [{
        "name": "numpy",
        "android": "supported",
        "ios": "supported",
        "iosVersion": "2.1.0",
        "version": "2.2.0",
        "source": "pyswift",
        "category": "both-platforms",
    }]


def test_json_dependencies_only_when_checked(tmp_path):
    plain = make_record("six")
    checked = make_record("flask").with_dependencies(["jinja2", "werkzeug"], True)
    out = tmp_path / "deps.json"
    export_json([plain, checked], str(out))

    data = json.loads(out.read_text(encoding="utf-8"))
    assert "dependencies" not in data[0]
    assert data[1]["dependencies"] == ["jinja2", "werkzeug"]
    assert data[1]["allDepsSupported"] is True
    assert data[1]["category"] == "pure-python"


def test_csv_headers_and_defaults(tmp_path):
    out = tmp_path / "out.csv"
    export_csv([make_record("lib", android=UNAVAILABLE, ios=SUPPORTED, ios_version="1.0")], str(out))

    rows = list(csv.reader(out.open("r", encoding="utf-8")))
    assert rows[0] == [
        "name", "android", "ios", "androidVersion", "iosVersion", "version", "source", "category",
    ]
    assert rows[1] == ["lib", "not_available", "supported", "", "1.0", "", "pypi", "ios-only"]


def test_csv_with_dependency_columns(tmp_path):
    rec = make_record("flask").with_dependencies(["jinja2", "werkzeug"], False)
    out = tmp_path / "deps.csv"
    export_csv([rec], str(out))

    rows = list(csv.reader(out.open("r", encoding="utf-8")))
    assert rows[0][-2:] == ["dependencies", "allDepsSupported"]
    assert rows[1][-2:] == ["jinja2;werkzeug", "False"]


def test_json_chunks(tmp_path):
    records = [make_record(f"pkg{i}") for i in range(5)]
    paths = export_json_chunks(records, str(tmp_path), chunk_size=2)

    chunks_dir = tmp_path / "json-chunks"
    assert [os.path.basename(p) for p in paths] == [
        "chunk-1-of-3.json", "chunk-2-of-3.json", "chunk-3-of-3.json",
    ]
    last = json.loads((chunks_dir / "chunk-3-of-3.json").read_text(encoding="utf-8"))
    assert [r["name"] for r in last] == ["pkg4"]

    index = json.loads((chunks_dir / "index.json").read_text(encoding="utf-8"))
    assert index["total_packages"] == 5
    assert index["total_chunks"] == 3
    assert index["chunks"][1] == {
        "filename": "chunk-2-of-3.json", "start_index": 2, "end_index": 3, "count": 2,
    }


def test_unwritable_path_exits(tmp_path):
    target = tmp_path / "missing-dir" / "out.json"
    with pytest.raises(SystemExit) as excinfo:
        export_json([make_record()], str(target))
    assert excinfo.value.code == 1
