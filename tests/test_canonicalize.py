"""Tests for snapshot/canonicalize.py."""

import unicodedata

import pytest

from arcsight.exceptions import CanonicalizationError, ErrorCode
from arcsight.snapshot import RawFile, canonical_path, canonicalize, normalize_content, repo_fingerprint


class TestCanonicalPath:
    def test_backslashes_become_slashes(self):
        assert canonical_path("src\\lib\\a.ts") == "src/lib/a.ts"

    def test_duplicate_slashes_and_dots_collapse(self):
        assert canonical_path("./src//lib/./a.ts") == "src/lib/a.ts"

    def test_parent_segments_collapse(self):
        assert canonical_path("src/lib/../a.ts") == "src/a.ts"

    def test_leading_slash_dropped(self):
        assert canonical_path("/src/a.ts") == "src/a.ts"

    def test_case_preserved(self):
        assert canonical_path("Src/A.ts") == "Src/A.ts"

    def test_escaping_root_rejected(self):
        with pytest.raises(CanonicalizationError) as exc_info:
            canonical_path("../outside.ts")
        assert exc_info.value.code == ErrorCode.CANONICALIZATION_COLLISION

    def test_empty_path_rejected(self):
        with pytest.raises(CanonicalizationError):
            canonical_path("./")

    def test_path_is_nfc(self):
        decomposed = unicodedata.normalize("NFD", "src/café.ts")
        assert canonical_path(decomposed) == "src/café.ts"


class TestNormalizeContent:
    def test_crlf_and_cr_become_lf(self):
        content, is_text = normalize_content(b"a\r\nb\rc\n")
        assert is_text
        assert content == b"a\nb\nc\n"

    def test_bom_dropped(self):
        content, is_text = normalize_content(b"\xef\xbb\xbfimport './a'\n")
        assert is_text
        assert content == b"import './a'\n"

    def test_text_is_nfc(self):
        raw = unicodedata.normalize("NFD", "café").encode("utf-8")
        content, _ = normalize_content(raw)
        assert content == "café".encode("utf-8")

    def test_nul_byte_means_binary(self):
        raw = b"\x89PNG\r\n\x00\x00"
        assert normalize_content(raw) == (raw, False)

    def test_invalid_utf8_means_binary(self):
        raw = b"\xff\xfe\r\n"
        assert normalize_content(raw) == (raw, False)


class TestCanonicalize:
    def test_sorted_by_path(self):
        snapshot = canonicalize([RawFile("b.ts", b""), RawFile("a.ts", b""), RawFile("B.ts", b"")])
        assert snapshot.paths == ("B.ts", "a.ts", "b.ts")

    def test_collision_raises(self):
        with pytest.raises(CanonicalizationError) as exc_info:
            canonicalize([RawFile("src/a.ts", b"1"), RawFile("src//a.ts", b"2")])
        assert exc_info.value.context["canonical"] == "src/a.ts"

    def test_get_uses_canonical_path(self):
        snapshot = canonicalize([RawFile("src\\a.ts", b"x"), RawFile("src/b.ts", b"y")])
        assert snapshot.get("src/a.ts").content == b"x"
        assert snapshot.get("src/c.ts") is None

    def test_input_order_does_not_matter(self):
        files = [RawFile("a.ts", b"1"), RawFile("b.ts", b"2"), RawFile("c/d.ts", b"3")]
        assert canonicalize(files) == canonicalize(reversed(files))


class TestRepoFingerprint:
    def test_stable_across_input_order_and_newlines(self):
        one = canonicalize([RawFile("a.ts", b"x\r\n"), RawFile("b.ts", b"y")])
        two = canonicalize([RawFile("b.ts", b"y"), RawFile("a.ts", b"x\n")])
        assert repo_fingerprint(one) == repo_fingerprint(two)

    def test_content_changes_fingerprint(self):
        one = canonicalize([RawFile("a.ts", b"x")])
        two = canonicalize([RawFile("a.ts", b"y")])
        assert repo_fingerprint(one) != repo_fingerprint(two)

    def test_path_content_boundary_is_unambiguous(self):
        one = canonicalize([RawFile("ab", b"c")])
        two = canonicalize([RawFile("a", b"bc")])
        assert repo_fingerprint(one) != repo_fingerprint(two)

    def test_format(self):
        fingerprint = repo_fingerprint(canonicalize([]))
        assert fingerprint.startswith("sha256:")
        assert len(fingerprint) == len("sha256:") + 64
