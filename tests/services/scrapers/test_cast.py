from bs4 import BeautifulSoup

from imdb_tv.models import CastType
from imdb_tv.services.scrapers.cast import parse_actor_rows, parse_cast_member


def _rows(html: str):
    soup = BeautifulSoup(f"<table>{html}</table>", "lxml")
    return soup.find_all("tr")


def test_parse_cast_member_old_markup():
    (row,) = _rows(
        '<tr><td class="hs"><img src="https://m.media-amazon.com/images/M/abc._V1_SY44_.jpg"></td>'
        '<td class="nm"><a href="/name/nm0680983/?ref_=x">James Roday</a></td>'
        '<td class="ddd"> ... </td>'
        '<td class="char"><a href="/character/ch1/">Shawn Spencer</a> (120 episodes, 2006-2014)</td></tr>'
    )
    member = parse_cast_member(row, "https://www.imdb.com")
    assert member.name == "James Roday"
    assert member.character == "Shawn Spencer"
    assert member.image_url == "https://m.media-amazon.com/images/M/abc.jpg"
    assert member.profile_url == "https://www.imdb.com/name/nm0680983/"


def test_parse_cast_member_itemprop_markup():
    (row,) = _rows(
        '<tr><td><img loadlate="https://m.media-amazon.com/images/M/xyz@@._V1_UX32_.jpg"></td>'
        '<td itemprop="actor"><a href="/name/nm0001/"><span itemprop="name">Dulé Hill</span></a></td>'
        '<td class="character"><div>Burton Guster</div></td></tr>'
    )
    member = parse_cast_member(row)
    assert member.name == "Dulé Hill"
    assert member.character == "Burton Guster"
    assert member.image_url == "https://m.media-amazon.com/images/M/xyz@@.jpg"
    assert member.profile_url == "/name/nm0001/"


def test_parse_cast_member_placeholder_image_dropped():
    (row,) = _rows(
        '<tr><td><img src="https://www.imdb.com/images/nopicture/32x44/name.gif"></td>'
        '<td class="nm"><a href="/name/nm2/">Someone</a></td></tr>'
    )
    member = parse_cast_member(row)
    assert member.image_url == ""
    assert member.character == ""


def test_parse_actor_rows_requires_name_and_character():
    rows = _rows(
        '<tr><td class="nm"><a href="/name/nm1/">Jane Doe</a></td><td class="char"></td></tr>'
        '<tr><td class="nm"><a href="/name/nm1/">Jane Doe</a></td><td class="char">Herself</td></tr>'
        '<tr><td class="nm"></td><td class="char">Nobody</td></tr>'
    )
    actors = parse_actor_rows(rows)
    assert len(actors) == 1
    assert actors[0].name == "Jane Doe"
    assert actors[0].character == "Herself"
    assert actors[0].type == CastType.ACTOR
