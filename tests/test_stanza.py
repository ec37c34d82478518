"""Tests for control stanza parsing."""

import logging

import pytest

from aptmirror.errors import StanzaError
from aptmirror.models import PackageRecord
from aptmirror.stanza import build_record, iter_stanzas, merge_records, parse_stanzas


class TestParseStanzas:
    """Tests for parse_stanzas."""

    def test_two_stanzas(self, packages_text: str):
        curl, wget = parse_stanzas(packages_text)

        assert curl.name == "curl"
        assert curl.architecture == "amd64"
        assert curl.version == "7.68.0-1ubuntu2"
        assert curl.depends.startswith("libc6 (>= 2.17), libcurl4")
        assert curl.filename == "pool/main/c/curl/curl_7.68.0-1ubuntu2_amd64.deb"
        assert curl.size == 161112
        assert curl.md5sum == "8e1bba23cad9b6b7aa7bd4ab4d5de1a7"
        assert curl.sha1 == "7de3c1b7d9a2b0f8bbd9d06d6cd31c25e49a4a5b"
        assert curl.sha256.startswith("c2a6a1c3")
        assert curl.suggests == ""

        assert wget.name == "wget"
        assert wget.suggests == "ca-certificates"
        assert wget.md5sum is None
        assert wget.sha256 is None

    def test_minimal_stanza_has_defaults(self):
        records = parse_stanzas("Package: curl\nVersion: 7.68.0\n\n")

        assert records == [PackageRecord(name="curl", version="7.68.0")]
        record = records[0]
        assert record.architecture == ""
        assert record.depends == ""
        assert record.size == 0
        assert record.md5sum is None

    def test_unrecognized_fields_are_ignored(self):
        (record,) = parse_stanzas("Package: curl\nX-Custom: yes\nDescription: a tool\n")

        assert record.model_dump(exclude_defaults=True) == {"name": "curl"}

    def test_trailing_stanza_without_blank_line(self):
        records = parse_stanzas("Package: a\n\nPackage: b\nVersion: 2")

        assert [r.name for r in records] == ["a", "b"]
        assert records[1].version == "2"

    def test_extra_blank_lines_between_stanzas(self):
        records = parse_stanzas("\n\nPackage: a\n\n\n  \nPackage: b\n\n\n")

        assert [r.name for r in records] == ["a", "b"]

    def test_duplicates_are_kept_in_order(self):
        records = parse_stanzas("Package: a\nVersion: 1\n\nPackage: a\nVersion: 2\n")

        assert [r.version for r in records] == ["1", "2"]

    def test_value_containing_separator(self):
        (record,) = parse_stanzas("Package: a\nDepends: foo (>= 1:2.0): odd\n")

        assert record.depends == "foo (>= 1:2.0): odd"

    def test_folded_depends_is_joined(self):
        (record,) = parse_stanzas("Package: a\nDepends: libc6,\n libfoo\n")

        assert record.dependency_names() == ["libc6", "libfoo"]

    def test_empty_input(self):
        assert parse_stanzas("") == []


class TestInvalidStanzas:
    """Invalid stanzas are skipped by default and raise in strict mode."""

    def test_missing_package_is_skipped(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING):
            records = parse_stanzas("Version: 1\n\nPackage: b\n")

        assert [r.name for r in records] == ["b"]
        assert "no Package field" in caplog.text

    def test_bad_size_is_skipped(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING):
            records = parse_stanzas("Package: a\nSize: huge\n\nPackage: b\nSize: 10\n")

        assert [(r.name, r.size) for r in records] == [("b", 10)]
        assert "Invalid Size 'huge'" in caplog.text

    def test_negative_size_is_invalid(self):
        with pytest.raises(StanzaError):
            build_record(["Package: a", "Size: -1"])

    def test_structurally_invalid_line(self):
        with pytest.raises(StanzaError, match="line 3"):
            parse_stanzas("Package: a\n\nthis is not a field\n", strict=True)

    def test_strict_mode_raises(self):
        with pytest.raises(StanzaError, match="no Package field"):
            list(iter_stanzas("Package: a\n\nVersion: 1\n", strict=True))


def test_merge_records_last_wins():
    records = parse_stanzas("Package: a\nVersion: 1\n\nPackage: b\n\nPackage: a\nVersion: 2\n")

    table = merge_records(records)

    assert list(table) == ["a", "b"]
    assert table["a"].version == "2"


def test_merge_records_into_existing_table():
    table = {"a": PackageRecord(name="a", version="1")}

    merge_records([PackageRecord(name="a", version="3")], table)

    assert table["a"].version == "3"


def test_dependency_names():
    record = PackageRecord(name="a", depends="libc6 (>= 2.17), libssl1.1 | libssl3, zlib1g:any")

    assert record.dependency_names() == ["libc6", "libssl1.1", "libssl3", "zlib1g"]
