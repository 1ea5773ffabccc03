import httpx
import pytest

from imdb_tv.models import MediaScrapeOptions, MediaType
from imdb_tv.services.scrapers import episode_list
from imdb_tv.services.scrapers.episode_list import get_episode_list, parse_episode_list

EPDATE_HTML = """
<html><body><div id="tn15content">
<h3>Psych</h3>
<table>
<tr><th>#</th><th>Episode</th><th>UserRating</th><th>UserVotes</th></tr>
<tr><td align="right">1.1</td><td><a href="/title/tt0680052/">Pilot</a></td>
    <td align="right">8.2</td><td align="right">1,523</td></tr>
<tr><td align="right">1.2</td><td><a href="/title/tt0680053/">Spellingg Bee</a></td>
    <td align="right">7.9</td><td align="right">n/a</td></tr>
<tr><td align="right">2.1</td><td><a href="/title/tt0680054/">American Duos</a></td>
    <td align="right">-</td><td align="right">900</td></tr>
<tr><td colspan="4">Season summary</td></tr>
<tr><td align="right">1.3</td><td><a href="/title/tt0680055/">Speak Now</a></td></tr>
<tr><td align="right">1.4</td><td>Unaired pilot</td><td>5.0</td><td>10</td></tr>
</table>
<table><tr><td>10.12</td><td><a href="/title/ttbroken/">No id</a></td></tr></table>
</div></body></html>
"""


def test_parse_episode_list_single_valid_row(soup_of):
    html = (
        "<table><tr><td>1.1</td><td><a href='/title/tt0680052/'>Pilot</a></td>"
        "<td>8.2</td><td>1523</td></tr></table>"
    )
    episodes = parse_episode_list(soup_of(html))
    assert len(episodes) == 1
    entry = episodes[0]
    assert (entry.season_number, entry.episode_number) == (1, 1)
    assert entry.title == "Pilot"
    assert entry.get_id("imdb") == "tt0680052"
    assert len(entry.ratings) == 1
    assert entry.ratings[0].rating == pytest.approx(8.2)
    assert entry.ratings[0].votes == 1523


def test_parse_episode_list_keeps_document_order_and_skips_other_rows(soup_of):
    episodes = parse_episode_list(soup_of(EPDATE_HTML))
    assert [(e.season_number, e.episode_number) for e in episodes] == [
        (1, 1),
        (1, 2),
        (2, 1),
        (1, 3),
        (10, 12),
    ]
    assert [e.title for e in episodes] == [
        "Pilot",
        "Spellingg Bee",
        "American Duos",
        "Speak Now",
        "No id",
    ]


def test_parse_episode_list_vote_count_failure_keeps_rating(soup_of):
    episodes = parse_episode_list(soup_of(EPDATE_HTML))
    second = episodes[1]
    assert second.ratings[0].rating == pytest.approx(7.9)
    assert second.ratings[0].votes == 0


def test_parse_episode_list_unparseable_rating_is_recorded_as_skipped(soup_of):
    episodes = parse_episode_list(soup_of(EPDATE_HTML))
    third = episodes[2]
    assert third.ratings == []
    assert [s.field for s in third.skipped_fields] == ["rating"]
    assert not third.skipped_fields[0].ok


def test_parse_episode_list_without_rating_columns(soup_of):
    episodes = parse_episode_list(soup_of(EPDATE_HTML))
    fourth = episodes[3]
    assert fourth.ratings == []
    assert fourth.skipped_fields == []


def test_parse_episode_list_entry_without_identifier_is_kept(soup_of):
    episodes = parse_episode_list(soup_of(EPDATE_HTML))
    last = episodes[-1]
    assert last.ids == {}
    assert last.title == "No id"


def test_parse_episode_list_row_without_title_link_is_skipped(soup_of, caplog):
    episodes = parse_episode_list(soup_of(EPDATE_HTML))
    assert all(e.title != "Unaired pilot" for e in episodes)
    assert "failed parsing" in caplog.text


def test_parse_episode_list_empty_document(soup_of):
    assert parse_episode_list(soup_of("<html><body><p>1.1</p></body></html>")) == []


def test_parse_episode_list_unexpected_row_error_does_not_abort(soup_of, mocker):
    original = episode_list._parse_row
    calls = {"n": 0}

    def flaky(row, provider_id):
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("boom")
        return original(row, provider_id)

    mocker.patch.object(episode_list, "_parse_row", side_effect=flaky)
    html = (
        "<table><tr><td>1.1</td><td><a href='/title/tt0680052/'>Pilot</a></td></tr>"
        "<tr><td>1.2</td><td><a href='/title/tt0680053/'>Second</a></td></tr></table>"
    )
    episodes = parse_episode_list(soup_of(html))
    assert [e.title for e in episodes] == ["Second"]


@pytest.mark.asyncio
async def test_get_episode_list_blank_id_short_circuits(site, make_documents):
    documents = make_documents()
    options = MediaScrapeOptions(type=MediaType.TV_EPISODE, imdb_id="  ")
    assert await get_episode_list(options, documents, site) == []
    assert documents.calls == []


@pytest.mark.asyncio
async def test_get_episode_list_fetches_epdate_page(site, make_documents):
    url = "https://www.imdb.com/title/tt0491738/epdate"
    documents = make_documents({url: EPDATE_HTML})
    options = MediaScrapeOptions(
        type=MediaType.TV_EPISODE, imdb_id="tt0491738", language="de", country="DE"
    )
    episodes = await get_episode_list(options, documents, site)
    assert len(episodes) == 5
    assert documents.calls == [(url, "de-de,de;q=0.9,en-us;q=0.8,en;q=0.7")]


@pytest.mark.asyncio
async def test_get_episode_list_fetch_error_propagates(site, mocker):
    documents = mocker.Mock()
    documents.fetch = mocker.AsyncMock(side_effect=httpx.ConnectError("down"))
    options = MediaScrapeOptions(type=MediaType.TV_EPISODE, imdb_id="tt0491738")
    with pytest.raises(httpx.ConnectError):
        await get_episode_list(options, documents, site)
