import pytest

from guardbot.application.content_filter import has_restricted_media, is_link_content
from guardbot.application.models import MediaKind


@pytest.mark.parametrize(
    "text",
    [
        "https://example.com",
        "смотри http://spam.test/page",
        "t.me/channel",
        "заходи на www.example.org",
        "HTTPS://EXAMPLE.COM",
    ],
)
def test_links_are_detected(text):
    assert is_link_content(text)


@pytest.mark.parametrize("text", ["", "привет", "example.com", "http:/broken", "tme/x"])
def test_plain_text_is_not_link(text):
    assert not is_link_content(text)


def test_restricted_media():
    assert has_restricted_media({MediaKind.PHOTO})
    assert has_restricted_media([MediaKind.STICKER, MediaKind.VOICE])
    assert not has_restricted_media(frozenset())
