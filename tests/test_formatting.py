# Tests for browser/formatting.py
# Created: 2026-03-03

import pytest

from davbrowse.browser.formatting import filter_visible, format_size, is_media_file
from davbrowse.webdav.models import DirectoryEntry

VIDEO = frozenset({"mp4", "mkv"})


class TestFormatSize:
    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, ""),
            (-3, ""),
            (1, "1 B"),
            (1023, "1023 B"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (1048576, "1.0 MB"),
            (1572864, "1.5 MB"),
            (1073741824, "1.0 GB"),
            (1024**4, "1.0 TB"),
            (5 * 1024**5, "5120.0 TB"),
        ],
    )
    def test_units(self, size, expected):
        assert format_size(size) == expected


class TestMediaFilter:
    def test_is_media_file_case_insensitive(self):
        assert is_media_file("Movie.MKV", VIDEO)
        assert not is_media_file("notes.txt", VIDEO)
        assert not is_media_file("README", VIDEO)

    def test_filter_keeps_dirs_and_videos_sorted(self):
        entries = [
            DirectoryEntry(name="b.mp4", href="/b.mp4"),
            DirectoryEntry(name="notes.txt", href="/notes.txt"),
            DirectoryEntry(name="Shows", href="/Shows/", is_directory=True),
            DirectoryEntry(name="a.MKV", href="/a.MKV"),
        ]
        visible = filter_visible(entries, VIDEO)
        assert [e.name for e in visible] == ["Shows", "a.MKV", "b.mp4"]
        assert all(e.is_video for e in visible if not e.is_directory)

    def test_directory_named_like_video_is_not_video(self):
        entries = [DirectoryEntry(name="clips.mp4", href="/clips.mp4/", is_directory=True)]
        (entry,) = filter_visible(entries, VIDEO)
        assert entry.is_video is False

    def test_empty_extension_set_hides_files(self):
        entries = [DirectoryEntry(name="a.mp4", href="/a.mp4", is_video=True)]
        assert filter_visible(entries, frozenset()) == []

    def test_extension_from_href_when_name_has_none(self):
        entries = [DirectoryEntry(name="Holiday", href="/v/holiday.mp4")]
        (entry,) = filter_visible(entries, VIDEO)
        assert entry.is_video
