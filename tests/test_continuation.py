"""Tests for tourist.continuation module."""

from __future__ import annotations

import pytest

from tourist.continuation import get_retry_urls
from tourist.paths import OutputPaths

URLS = ["https://a.test/", "https://b.test/", "https://c.test/"]


def _complete(root, url):
    paths = OutputPaths.for_url(root, url)
    paths.output_dir.mkdir(parents=True)
    paths.aft_screenshot.write_bytes(b"aft")
    paths.full_screenshot.write_bytes(b"full")
    return paths


class TestGetRetryUrls:
    def test_nothing_crawled(self, tmp_path):
        assert get_retry_urls(URLS, tmp_path) == URLS

    def test_skips_complete_urls_in_order(self, tmp_path):
        _complete(tmp_path, URLS[1])
        assert get_retry_urls(URLS, tmp_path) == [URLS[0], URLS[2]]

    def test_partial_output_is_retried(self, tmp_path):
        paths = _complete(tmp_path, URLS[0])
        paths.full_screenshot.unlink()
        assert get_retry_urls(URLS[:1], tmp_path) == URLS[:1]

    def test_directory_only_is_retried(self, tmp_path):
        OutputPaths.for_url(tmp_path, URLS[0]).output_dir.mkdir()
        assert get_retry_urls(URLS[:1], tmp_path) == URLS[:1]

    def test_empty_files_count_as_present(self, tmp_path):
        paths = _complete(tmp_path, URLS[2])
        paths.aft_screenshot.write_bytes(b"")
        assert get_retry_urls(URLS, tmp_path) == URLS[:2]

    def test_all_complete(self, tmp_path):
        for url in URLS:
            _complete(tmp_path, url)
        assert get_retry_urls(URLS, tmp_path) == []

    def test_read_only_probe(self, tmp_path):
        get_retry_urls(URLS, tmp_path)
        assert list(tmp_path.iterdir()) == []

    def test_invalid_url(self, tmp_path):
        with pytest.raises(ValueError):
            get_retry_urls(["nohost"], tmp_path)
