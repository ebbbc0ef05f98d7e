"""Unit tests for the Discogs SDK parsers and client."""
import pytest

from groove_sdk.discogs import DiscogsAPI, extract_tracklist
from groove_sdk.discogs.parsers import parse_release, parse_search_result
from groove_sdk.errors import DiscogsAPIError
from tests.mocks.fake_http import FakeSession


RELEASE = {
    "id": 249504,
    "title": "OK Computer",
    "year": 1997,
    "artists": [{"name": "Radiohead"}],
    "labels": [{"name": "Parlophone"}, {"name": "Capitol"}],
    "thumb": "https://img/thumb.jpg",
    "tracklist": [
        {"position": "", "title": "Side A", "type_": "heading"},
        {"position": "A1", "title": "Airbag", "duration": "4:44", "type_": "track"},
        {"position": "A2", "title": "Paranoid Android", "duration": "6:23", "type_": "track"},
        {"position": "A3", "title": "", "type_": "track"},
    ],
}


def test_parse_release_and_extract_tracklist():
    release = parse_release(RELEASE)
    tracks = extract_tracklist(release)

    assert release.label == "Parlophone"
    assert release.artists == ("Radiohead",)
    assert [t.position for t in tracks] == ["A1", "A2"]
    assert tracks[0].to_dict() == {"position": "A1", "title": "Airbag", "duration": "4:44"}


def test_parse_search_result_handles_string_year():
    result = parse_search_result({"id": 1, "title": "Radiohead - OK Computer", "year": "1997"})

    assert result.year == 1997
    assert parse_search_result({"title": "no id"}) is None


@pytest.mark.asyncio
async def test_search_sends_token_and_user_agent():
    session = FakeSession([(200, {"results": [{"id": 249504, "title": "Radiohead - OK Computer"}]})])
    api = DiscogsAPI(user_token="secret", user_agent="GrooveTest/1.0", session=session)

    results = await api.search("Radiohead - OK Computer")

    assert [r.id for r in results] == [249504]
    call = session.last()
    assert call["url"].endswith("/database/search")
    assert call["params"]["q"] == "Radiohead - OK Computer"
    assert call["params"]["type"] == "release"
    assert call["headers"]["Authorization"] == "Discogs token=secret"
    assert call["headers"]["User-Agent"] == "GrooveTest/1.0"


@pytest.mark.asyncio
async def test_get_release_returns_none_on_404_and_raises_otherwise():
    session = FakeSession([(404, "missing"), (500, "boom")])
    api = DiscogsAPI(user_token="secret", user_agent="GrooveTest/1.0", session=session)

    assert await api.get_release(1) is None
    with pytest.raises(DiscogsAPIError):
        await api.get_release(2)
