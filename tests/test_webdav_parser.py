"""Tests for the multi-status parsers.

Created: 2026-03-02
Every contract test runs against both the ElementTree and the regex parser.
"""

import pytest

from davbrowse.webdav.models import DirectoryEntry
from davbrowse.webdav.parser import (
    RegexResponseParser,
    XmlResponseParser,
    collation_key,
    create_parser,
    derive_name,
    is_self_entry,
    parse_size,
    sort_entries,
)
from davbrowse.webdav.protocol import ResponseParser

VIDEO = frozenset({"mp4", "mkv"})


def response(
    href,
    displayname=None,
    collection=False,
    length=None,
    resourcetype=True,
    prefix="d",
    content_type=None,
):
    p = prefix
    props = []
    if displayname is not None:
        props.append(f"<{p}:displayname>{displayname}</{p}:displayname>")
    if length is not None:
        props.append(f"<{p}:getcontentlength>{length}</{p}:getcontentlength>")
    if content_type is not None:
        props.append(f"<{p}:getcontenttype>{content_type}</{p}:getcontenttype>")
    if resourcetype:
        if collection:
            props.append(f"<{p}:resourcetype><{p}:collection/></{p}:resourcetype>")
        else:
            props.append(f"<{p}:resourcetype/>")
    return (
        f"<{p}:response><{p}:href>{href}</{p}:href>"
        f"<{p}:propstat><{p}:prop>{''.join(props)}</{p}:prop>"
        f"<{p}:status>HTTP/1.1 200 OK</{p}:status></{p}:propstat></{p}:response>"
    )


def multistatus(*responses, prefix="d"):
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<{prefix}:multistatus xmlns:{prefix}="DAV:">' + "".join(responses) + f"</{prefix}:multistatus>"
    )


@pytest.fixture(params=["xml", "regex"])
def parser(request):
    return create_parser(request.param)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_self_entry_ignores_trailing_slash_and_encoding(self):
        assert is_self_entry("/dav/My%20Films/", "/dav/My Films")
        assert is_self_entry("/dav/", "/dav")
        assert not is_self_entry("/dav/a/", "/dav/")

    def test_self_entry_with_absolute_href(self):
        assert is_self_entry("http://x/dav/Movies/", "/dav/Movies/")

    def test_derive_name_prefers_display_name(self):
        assert derive_name("Holiday", "/dav/h.mp4") == "Holiday"

    def test_derive_name_from_href(self):
        assert derive_name("", "/dav/My%20Films/") == "My Films"
        assert derive_name("", "/dav/a%C3%A9.mkv") == "aé.mkv"

    @pytest.mark.parametrize(
        "value,expected",
        [("1048576", 1048576), (" 42 ", 42), ("", 0), (None, 0), ("abc", 0), ("-5", 0), ("12.7", 12)],
    )
    def test_parse_size(self, value, expected):
        assert parse_size(value) == expected

    def test_collation_is_case_and_accent_aware(self):
        names = ["b", "B", "á", "a", "A"]
        assert sorted(names, key=collation_key) == ["a", "A", "á", "b", "B"]

    def test_sort_puts_directories_first(self):
        entries = [
            DirectoryEntry(name="zeta.mp4", href="/z"),
            DirectoryEntry(name="Beta", href="/b/", is_directory=True),
            DirectoryEntry(name="alpha.mp4", href="/a"),
            DirectoryEntry(name="alpha", href="/al/", is_directory=True),
        ]
        names = [e.name for e in sort_entries(entries)]
        assert names == ["alpha", "Beta", "alpha.mp4", "zeta.mp4"]

    def test_create_parser_unknown(self):
        with pytest.raises(ValueError):
            create_parser("sax")

    def test_both_satisfy_protocol(self):
        assert isinstance(XmlResponseParser(), ResponseParser)
        assert isinstance(RegexResponseParser(), ResponseParser)


# ---------------------------------------------------------------------------
# Shared contract
# ---------------------------------------------------------------------------


class TestParserContract:
    def test_scenario_movie_and_folder(self, parser):
        body = multistatus(
            response("/webdav/", collection=True),
            response("/webdav/movie.MP4", length="1048576"),
            response("/webdav/Shows/", collection=True),
        )
        entries = parser.parse(body, "/webdav/", VIDEO)

        assert [(e.name, e.is_directory, e.is_video, e.size) for e in entries] == [
            ("Shows", True, False, 0),
            ("movie.MP4", False, True, 1048576),
        ]

    def test_only_self_yields_empty(self, parser):
        body = multistatus(response("/dav/Movies/", collection=True))
        assert parser.parse(body, "/dav/Movies", VIDEO) == []

    def test_self_entry_percent_encoded(self, parser):
        body = multistatus(
            response("/dav/My%20Films/", collection=True),
            response("/dav/My%20Films/a.mp4"),
        )
        entries = parser.parse(body, "/dav/My Films/", VIDEO)
        assert [e.name for e in entries] == ["a.mp4"]

    @pytest.mark.parametrize("prefix", ["d", "D", "lp1"])
    def test_namespace_prefixes(self, prefix):
        body = multistatus(
            response("/x/a.mkv", prefix=prefix, length="10"),
            response("/x/sub/", prefix=prefix, collection=True),
            prefix=prefix,
        )
        for name in ("xml", "regex"):
            entries = create_parser(name).parse(body, "/x/", VIDEO)
            assert [(e.name, e.is_directory, e.size) for e in entries] == [
                ("sub", True, 0),
                ("a.mkv", False, 10),
            ]

    def test_default_namespace(self, parser):
        body = (
            '<multistatus xmlns="DAV:"><response><href>/x/a.mp4</href>'
            "<propstat><prop><getcontentlength>5</getcontentlength><resourcetype/></prop>"
            "</propstat></response></multistatus>"
        )
        entries = parser.parse(body, "/x/", VIDEO)
        assert [(e.name, e.size, e.is_video) for e in entries] == [("a.mp4", 5, True)]

    def test_round_trip_fields(self, parser):
        names = [f"clip{i}.mp4" for i in range(5)]
        body = multistatus(
            *[
                response(f"/v/{n}", displayname=n, length=str(100 + i), content_type="video/mp4")
                for i, n in enumerate(names)
            ]
        )
        entries = parser.parse(body, "/v/", VIDEO)

        assert len(entries) == 5
        for i, entry in enumerate(entries):
            assert entry.name == names[i]
            assert entry.href == f"/v/{names[i]}"
            assert entry.size == 100 + i
            assert entry.content_type == "video/mp4"
            assert entry.is_video and not entry.is_directory

    def test_display_name_used(self, parser):
        body = multistatus(response("/v/abc123", displayname="Holiday Video.mp4"))
        (entry,) = parser.parse(body, "/v/", VIDEO)
        assert entry.name == "Holiday Video.mp4"
        assert entry.is_video

    def test_empty_display_name_falls_back_to_href(self, parser):
        body = multistatus(response("/v/Road%20Trip.mkv", displayname=""))
        (entry,) = parser.parse(body, "/v/", VIDEO)
        assert entry.name == "Road Trip.mkv"

    def test_directory_never_video(self, parser):
        body = multistatus(response("/v/trailer.mp4/", collection=True, length="99"))
        (entry,) = parser.parse(body, "/v/", VIDEO)
        assert entry.is_directory
        assert entry.is_video is False
        assert entry.size == 0

    @pytest.mark.parametrize("length", ["", "n/a", "-1"])
    def test_bad_content_length_is_zero(self, parser, length):
        body = multistatus(response("/v/a.mp4", length=length))
        (entry,) = parser.parse(body, "/v/", VIDEO)
        assert entry.size == 0

    def test_missing_href_skipped(self, parser):
        body = multistatus(response(""), response("/v/ok.mp4"))
        assert [e.name for e in parser.parse(body, "/v/", VIDEO)] == ["ok.mp4"]

    def test_trailing_slash_without_resourcetype_is_collection(self, parser):
        body = multistatus(
            response("/v/folder/", resourcetype=False),
            response("/v/file.mp4", resourcetype=False),
        )
        entries = parser.parse(body, "/v/", VIDEO)
        assert [(e.name, e.is_directory) for e in entries] == [("folder", True), ("file.mp4", False)]

    def test_explicit_resourcetype_wins_over_slash(self, parser):
        body = multistatus(response("/v/odd/", resourcetype=True, collection=False))
        (entry,) = parser.parse(body, "/v/", VIDEO)
        assert entry.is_directory is False

    def test_properties_split_across_propstats(self, parser):
        body = multistatus(
            "<d:response><d:href>/v/a.mkv</d:href>"
            "<d:propstat><d:prop><d:displayname/><d:getcontenttype/></d:prop>"
            "<d:status>HTTP/1.1 404 Not Found</d:status></d:propstat>"
            "<d:propstat><d:prop><d:displayname>Film</d:displayname>"
            "<d:getcontentlength>2048</d:getcontentlength><d:resourcetype/></d:prop>"
            "<d:status>HTTP/1.1 200 OK</d:status></d:propstat></d:response>"
        )
        (entry,) = parser.parse(body, "/v/", VIDEO)
        assert entry.name == "Film"
        assert entry.size == 2048

    def test_entities_decoded(self, parser):
        body = multistatus(response("/v/Tom%20%26%20Jerry.mp4", displayname="Tom &amp; Jerry.mp4"))
        (entry,) = parser.parse(body, "/v/", VIDEO)
        assert entry.name == "Tom & Jerry.mp4"

    def test_unparsable_body_is_empty(self, parser):
        assert parser.parse("this is not xml", "/", VIDEO) == []
        assert parser.parse("", "/", VIDEO) == []

    def test_one_malformed_entry_keeps_the_rest(self, parser):
        # Raw "&" makes the document ill-formed as XML
        body = multistatus(
            response("/v/", collection=True),
            response("/v/good.mp4", length="10"),
            response("/v/Tom%20%26%20Jerry.mp4", displayname="Tom & Jerry.mp4"),
        )
        names = [e.name for e in parser.parse(body, "/v/", VIDEO)]
        assert names == ["good.mp4", "Tom & Jerry.mp4"]

    def test_sorted_output(self, parser):
        body = multistatus(
            response("/v/b.mp4"),
            response("/v/Zed/", collection=True),
            response("/v/A.mp4"),
            response("/v/alpha/", collection=True),
        )
        names = [e.name for e in parser.parse(body, "/v/", VIDEO)]
        assert names == ["alpha", "Zed", "A.mp4", "b.mp4"]

    def test_non_media_files_kept_but_not_video(self, parser):
        body = multistatus(response("/v/notes.txt", length="3"))
        (entry,) = parser.parse(body, "/v/", VIDEO)
        assert entry.is_video is False
        assert entry.size == 3


class TestParsersAgree:
    def test_same_output_for_mixed_body(self):
        body = multistatus(
            response("/s/", collection=True, prefix="D"),
            response("/s/Ünïcode%20Dir/", collection=True, prefix="D"),
            response("/s/x.MKV", displayname="X", length="7", prefix="D"),
            response("/s/y.avi", length="oops", prefix="D"),
            response("/s/z/", resourcetype=False, prefix="D"),
            response("", prefix="D"),
            prefix="D",
        )
        xml = XmlResponseParser().parse(body, "/s/", VIDEO)
        regex = RegexResponseParser().parse(body, "/s/", VIDEO)
        assert xml == regex
        assert len(xml) == 4
