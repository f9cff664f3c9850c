from fasel.extractor import (
    MarkupExtractor,
    absolute_url,
    background_image,
    clean_title,
)

BASE = "https://www.faselhds.xyz"


def extractor():
    return MarkupExtractor(BASE)


# --- helpers ---

def test_absolute_url_rewrites_relative_paths():
    assert absolute_url("/a", BASE) == f"{BASE}/a"
    assert absolute_url("movies/b", BASE) == f"{BASE}/movies/b"
    assert absolute_url("//cdn.example/x.jpg", BASE) == "https://cdn.example/x.jpg"
    assert absolute_url("http://site/b", BASE) == "http://site/b"
    assert absolute_url("", BASE) == ""
    assert absolute_url(None, BASE) == ""


def test_clean_title_strips_movie_prefix_and_translated_suffix():
    assert clean_title("  فيلم   The Matrix  مترجم ") == "The Matrix"
    assert clean_title("مسلسل Dark مدبلج") == "مسلسل Dark"
    assert clean_title("فيلمي") == "فيلمي"


def test_background_image():
    assert background_image("background-image: url('/wp/p.jpg');") == "/wp/p.jpg"
    assert background_image('color:red; background-image:url("https://x/y.png")') == "https://x/y.png"
    assert background_image("color: red") == ""


# --- search view ---

POST_CARDS = """
<div class="postDiv"><a href="/a"><img src="/img/a.jpg"><div class="h1">Movie A</div></a></div>
<div class="postDiv"><a href="http://site/b"><img data-src="https://cdn.example/b.jpg" src="/lazy.gif">
  <div class="h1">فيلم Movie B مترجم</div></a></div>
<div class="postDiv"><a><div class="h1">No link</div></a></div>
<div class="postDiv"><a href="/c"><div class="h1">   </div></a></div>
<div class="postDiv"><a href="/a"><div class="h1">Movie A again</div></a></div>
"""


def test_post_cards_keep_well_formed_cards_only():
    hits = extractor().search_results(POST_CARDS)

    assert [h.model_dump() for h in hits] == [
        {"title": "Movie A", "href": f"{BASE}/a", "image": f"{BASE}/img/a.jpg"},
        {"title": "Movie B", "href": "http://site/b", "image": "https://cdn.example/b.jpg"},
    ]


def test_grid_columns_with_background_images():
    markup = """
    <div class="row">
      <div class="col-xl-2 col-lg-3">
        <div class="imgdiv-class" style="background-image: url('/wp/x.jpg');"></div>
        <a href="/x" title="X Title"></a>
      </div>
      <div class="col-xl-2"><a href="/y"><h3>Y</h3></a><img src="https://img.example/y.png"></div>
      <div class="col-xl-2"><span>no anchor</span></div>
    </div>
    """
    hits = extractor().search_results(markup)

    assert [(h.title, h.href, h.image) for h in hits] == [
        ("X Title", f"{BASE}/x", f"{BASE}/wp/x.jpg"),
        ("Y", f"{BASE}/y", "https://img.example/y.png"),
    ]


def test_anchor_triples_as_last_resort():
    markup = '<ul><li><a href="/z"><span><img src="/z.jpg"></span><h3>Zed &amp; Co</h3></a></li></ul>'
    hits = extractor().search_results(markup)

    assert len(hits) == 1
    assert hits[0].title == "Zed & Co"
    assert hits[0].href == f"{BASE}/z"
    assert hits[0].image == f"{BASE}/z.jpg"


def test_search_without_cards_is_empty():
    assert extractor().search_results("<html><body><p>لا توجد نتائج</p></body></html>") == []
    assert extractor().search_results("") == []


# --- detail view ---

DETAIL_PAGE = """
<html><head><meta property="og:image" content="/poster.jpg"></head><body>
<div class="h1">فيلم Inception مترجم</div>
<div class="singleDesc"><p> A thief who steals
   secrets. </p></div>
<div id="singleList">
  <div class="col-xl-6"><i class="far fa-calendar-alt"></i> موعد الصدور : <a>2010</a></div>
  <div class="col-xl-6"><i class="far fa-folder"></i> تصنيف الفيلم : <a>أكشن</a></div>
  <div class="col-xl-6"><i class="far fa-clock"></i> مدة الفيلم : 148 دقيقة</div>
</div>
</body></html>
"""


def test_details_fields():
    record = extractor().details(DETAIL_PAGE)

    assert record.title == "Inception"
    assert record.description == "A thief who steals secrets."
    assert record.image == f"{BASE}/poster.jpg"
    assert record.airdate == "2010"
    assert record.aliases == "تصنيف الفيلم : أكشن | مدة الفيلم : 148 دقيقة"


def test_details_missing_elements_are_empty_strings():
    record = extractor().details("<html><body><span>nothing</span></body></html>")

    assert record.model_dump() == {
        "title": "",
        "description": "",
        "image": "",
        "airdate": "",
        "aliases": "",
    }


def test_details_description_falls_back_to_meta():
    markup = '<head><meta name="description" content="Short  summary"></head><p>Body text</p>'
    assert extractor().details(markup).description == "Short summary"


def test_airdate_needs_four_digits():
    markup = '<span><i class="far fa-calendar-alt"></i> قريبا</span>'
    assert extractor().details(markup).airdate == ""


# --- episode view ---

def test_episodes_exact_text_only_in_ascending_order():
    markup = """
    <div class="epAll">
      <a href="/ep/3">الحلقة 3</a>
      <a href="/ep/2">الحلقة2</a>
      <a href="/ep/1">  الحلقة 1  </a>
      <a href="/ep/3-special">الحلقة 3 خاصة</a>
      <a href="/ep/4">مشاهدة الحلقة 4</a>
      <a href="/ep/x">الحلقة</a>
    </div>
    """
    episodes = extractor().episodes(markup)

    assert [(e.number, e.href) for e in episodes] == [
        ("1", f"{BASE}/ep/1"),
        ("2", f"{BASE}/ep/2"),
        ("3", f"{BASE}/ep/3"),
    ]


def test_episodes_strictly_ascending_for_unordered_pages():
    markup = "".join(f'<a href="/e{n}">الحلقة {n}</a>' for n in (10, 2, 9, 2, 1))
    numbers = [int(e.number) for e in extractor().episodes(markup)]

    assert numbers == [1, 2, 9, 10]


def test_episode_cards_fallback_uses_heading_text():
    markup = """
    <div class="epDivHome"><a href="/s1/pilot"><img src="/p.jpg"></a><h4> Pilot </h4></div>
    <div class="epDivHome"><a href="/s1/finale"></a><h4>Finale</h4></div>
    <div class="epDivHome"><a href="/s1/none"></a></div>
    """
    episodes = extractor().episodes(markup)

    assert [(e.number, e.href) for e in episodes] == [
        ("Pilot", f"{BASE}/s1/pilot"),
        ("Finale", f"{BASE}/s1/finale"),
    ]


def test_episodes_missing_markup_is_empty():
    assert extractor().episodes("<div>فيلم</div>") == []


# --- player / server views ---

SERVER_TABS = """
<ul class="tabs-ul">
  <li class="active">Intro</li>
  <li onclick="player_iframe.location.href = '/video_player?player_token=abc'">سيرفر 1</li>
  <li onclick="player_iframe.location.href = 'https://mirror.example/video_player?x=2'">سيرفر 2</li>
</ul>
"""


def test_player_url_from_first_server_tab():
    assert extractor().player_url(SERVER_TABS) == f"{BASE}/video_player?player_token=abc"


def test_player_url_from_location_assignment():
    markup = """<ul class="tabs-ul"><li onclick="location.href = 'https://www.faselhds.xyz/embed/77'">1</li></ul>"""
    assert extractor().player_url(markup) == f"{BASE}/embed/77"


def test_player_url_missing():
    assert extractor().player_url("<ul class='tabs-ul'><li>1</li></ul>") == ""


def test_file_token_preferred_over_video_tag():
    markup = """
    <video src="https://cdn.example/fallback.mp4"></video>
    <script>jwplayer("p").setup({ file: "https://cdn.example/hls/master.m3u8", autostart: true });</script>
    """
    sources = extractor().player_sources(markup)

    assert [(s.url, s.is_m3u8, s.quality) for s in sources] == [
        ("https://cdn.example/hls/master.m3u8", True, "auto"),
    ]


def test_video_fallback_skips_blob_sources():
    markup = '<video src="blob:https://www.faselhds.xyz/9f1c"><source src="https://cdn.example/movie.mp4"></video>'
    sources = extractor().player_sources(markup)

    assert len(sources) == 1
    assert sources[0].url == "https://cdn.example/movie.mp4"
    assert sources[0].is_m3u8 is False


def test_blob_only_player_yields_nothing():
    assert extractor().player_sources('<video src="blob:https://x/1"></video>') == []


def test_has_player_token():
    ex = extractor()
    assert ex.has_player_token('file: "https://a/b.m3u8"')
    assert not ex.has_player_token('file: "https://a/b.mp4"')
    assert not ex.has_player_token("")


def test_non_web_schemes_are_not_urls():
    assert absolute_url("data:image/gif;base64,R0lGOD", BASE) == ""
    assert absolute_url("javascript:void(0)", BASE) == ""
    assert absolute_url("blob:https://www.faselhds.xyz/9f1c", BASE) == ""
    assert absolute_url("#", BASE) == ""
    assert absolute_url("#comments", BASE) == ""


def test_placeholder_images_and_script_links_in_cards():
    markup = """
    <div class="postDiv"><a href="/real"><img src="data:image/gif;base64,R0lGOD"><div class="h1">Real</div></a></div>
    <div class="postDiv"><a href="javascript:void(0)"><img src="/x.jpg"><div class="h1">Fake</div></a></div>
    """
    hits = extractor().search_results(markup)

    assert [h.model_dump() for h in hits] == [
        {"title": "Real", "href": f"{BASE}/real", "image": ""},
    ]


def test_script_links_are_not_episodes():
    markup = '<a href="javascript:void(0)">الحلقة 2</a><a href="/ep/1">الحلقة 1</a>'

    assert [(e.number, e.href) for e in extractor().episodes(markup)] == [("1", f"{BASE}/ep/1")]


def test_airdate_skips_calendar_icons_without_year():
    markup = """
    <header><span><i class="far fa-calendar-alt"></i> اليوم</span></header>
    <div id="singleList">
      <div class="col-xl-6"><i class="far fa-calendar-alt"></i> موعد الصدور : <a>2010</a></div>
    </div>
    """
    assert extractor().details(markup).airdate == "2010"


def test_airdate_ignores_other_calendar_icons():
    markup = '<span><i class="far fa-calendar-check"></i> 1999</span>'
    assert extractor().details(markup).airdate == ""
