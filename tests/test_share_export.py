"""Tests for share links and file exports."""

import json
from urllib.parse import unquote

import pytest

from brandbible.models import (
    GeneratedLogos,
    GenerationRun,
    ImageResult,
    SocialMediaKitAssets,
)
from brandbible.utils.export import (
    collect_image_downloads,
    export_brand_voice,
    export_fonts,
    export_palette,
    export_social_posts,
)
from brandbible.utils.share import build_share_url, mission_from_query, mission_from_url


@pytest.mark.parametrize(
    "mission",
    [
        "Sell eco-friendly socks",
        "Bread & butter, fresh daily",
        "Café für alle: 100% bio?",
        "Line one\nline two #hashtag",
    ],
)
def test_share_link_preserves_mission(mission):
    url = build_share_url("https://brand.example/app", mission)

    assert url.startswith("https://brand.example/app?mission=")
    assert mission_from_url(url) == mission


def test_share_link_replaces_existing_query():
    url = build_share_url("https://brand.example/?mission=old&x=1#top", "new")

    assert url == "https://brand.example/?mission=new"


def test_share_link_encodes_spaces_as_percent_20():
    assert build_share_url("http://localhost:8000/", "a b") == "http://localhost:8000/?mission=a%20b"


@pytest.mark.parametrize("query", ["", "?", "?foo=bar", "mission=", "?mission=%20"])
def test_missing_mission_decodes_to_none(query):
    assert mission_from_query(query) is None


def test_palette_export(sample_bible):
    exported = export_palette(sample_bible.palette)

    assert exported.filename == "color-palette.json"
    assert exported.media_type == "text/json"
    assert json.loads(exported.content)[0] == {
        "hex": "#2E5E4E", "name": "Forest Floor", "usage": "Primary",
    }
    assert exported.content.startswith("[\n  {")


def test_fonts_export(sample_bible):
    exported = export_fonts(sample_bible.fonts)

    assert exported.filename == "font-pairings.json"
    assert json.loads(exported.content)["header"] == "Fraunces"


def test_brand_voice_export_is_verbatim():
    exported = export_brand_voice("## Voice\n- **We are:** warm")

    assert exported.filename == "brand-voice.md"
    assert exported.media_type == "text/markdown"
    assert exported.content == "## Voice\n- **We are:** warm"


def test_social_posts_export_numbers_ideas():
    exported = export_social_posts(["Ask a question", "Show the workshop"])

    assert exported.filename == "social-media-posts.txt"
    assert exported.content == (
        "Post Idea 1:\nAsk a question\n\n---\n\nPost Idea 2:\nShow the workshop"
    )


def test_data_uri_round_trips_content():
    exported = export_social_posts(["Café & co"])
    prefix = "data:text/plain;charset=utf-8,"

    uri = exported.to_data_uri()

    assert uri.startswith(prefix)
    assert unquote(uri[len(prefix):]) == exported.content


def test_image_downloads_use_fixed_filenames():
    image = ImageResult(data="QUJD")
    run = GenerationRun(
        run_id=1,
        mission="m",
        logos=GeneratedLogos(primary=image, secondary=[image, image], favicon=image),
        mood_board=[image, image],
        social_kit=SocialMediaKitAssets(
            banner=image,
            website_banner=None,
            post_templates=[None, image, image],
        ),
    )

    downloads = collect_image_downloads(run)

    assert [d["filename"] for d in downloads] == [
        "primary-logo.png",
        "secondary-mark-1.png",
        "secondary-mark-2.png",
        "favicon.png",
        "moodboard-image-1.png",
        "moodboard-image-2.png",
        "profile-picture.png",
        "social-media-banner.png",
        "post-template-2.png",
        "post-template-3.png",
    ]
    assert downloads[0]["href"] == "data:image/jpeg;base64,QUJD"


def test_failed_run_has_no_downloads():
    assert collect_image_downloads(GenerationRun(run_id=1, mission="m")) == []
