import pytest

from recipe_keeper.app.services.url_parsing.document import DocumentParseError, json_path, parse_document
from recipe_keeper.app.services.url_parsing.extractors import (
    extract_credits,
    extract_image,
    extract_ingredients,
    extract_instructions,
    extract_prep_time,
    extract_site_categories,
    extract_title,
    extract_video,
    flatten_sections,
    normalize_embed_url,
    run_chain,
)
from recipe_keeper.app.services.url_parsing.models import IngredientSection

SOURCE_URL = "https://site.com/recipes/cake"


def doc_for(body: str, head: str = ""):
    return parse_document(f"<html><head>{head}</head><body>{body}</body></html>")


def test_parse_document_rejects_unusable_markup():
    for markup in (None, "", "   ", "just some text without tags"):
        with pytest.raises(DocumentParseError):
            parse_document(markup)


def test_json_path_misses_return_none():
    data = {"a": {"b": [{"c": 1}]}}
    assert json_path(data, ["a", "b", 0, "c"]) == 1
    assert json_path(data, ["a", "x"]) is None
    assert json_path(data, ["a", "b", 3]) is None
    assert json_path(None, ["a"]) is None


def test_run_chain_treats_errors_as_misses():
    def broken(doc):
        raise RuntimeError("boom")

    def empty(doc):
        return []

    def found(doc):
        return "value"

    assert run_chain(doc_for("<p>x</p>"), (broken, empty, found)) == "value"
    assert run_chain(doc_for("<p>x</p>"), (broken, empty)) is None


def test_title_prefers_meta_then_heading_then_document_title():
    head = '<meta property="og:title" content="Lemon Tart | Bakery Blog"><title>Other</title>'
    assert extract_title(doc_for("<h1>Heading</h1>", head)) == "Lemon Tart"
    assert extract_title(doc_for("<h1>Heading #yum</h1>", "<title>Other</title>")) == "Heading"
    assert extract_title(doc_for("<p>x</p>", "<title>Pancakes - YouTube</title>")) == "Pancakes"
    assert extract_title(doc_for('<img class="wp-post-image" src="a.jpg" alt="Fig Jam">')) == "Fig Jam"
    assert extract_title(doc_for("<p>x</p>")) is None


def test_image_uses_largest_srcset_candidate():
    doc = doc_for(
        '<div class="image-container">'
        '<img srcset="/img/small.jpg 300w, /img/large.jpg 1200w" src="/img/small.jpg">'
        "</div>"
    )
    assert extract_image(doc, SOURCE_URL) == "https://site.com/img/large.jpg"


def test_image_resolves_relative_url():
    doc = doc_for('<article><img src="../img/x.jpg"></article>')
    assert extract_image(doc, SOURCE_URL) == "https://site.com/img/x.jpg"


def test_image_skips_placeholder_candidates():
    doc = doc_for(
        '<div class="image-container"><img src="https://site.com/placeholder.png"></div>'
        '<article><img src="https://site.com/real.jpg"></article>'
    )
    assert extract_image(doc, SOURCE_URL) == "https://site.com/real.jpg"


def test_image_falls_back_to_placeholder():
    assert extract_image(doc_for("<p>no images</p>"), SOURCE_URL) == "/placeholder.svg"
    assert extract_image(doc_for('<article><img src="img/x.jpg"></article>'), "") == "/placeholder.svg"


def test_flatten_sections():
    sections = [
        IngredientSection(title="Ingredients", items=["2 eggs", "1 cup flour"]),
        IngredientSection(title="For the glaze", items=["100 g sugar"]),
        IngredientSection(title="Empty", items=[]),
    ]
    assert flatten_sections(sections) == ["2 eggs", "1 cup flour", "For the glaze:", "100 g sugar"]


def test_ingredients_from_structured_container_with_groups():
    doc = doc_for(
        '<div class="ingredients">'
        '<div class="ingredients-group"><ul><li>200 g flour</li><li>2 eggs</li></ul></div>'
        '<div class="ingredients-group"><h4>For the glaze</h4><ul><li>100 g sugar</li></ul></div>'
        '<div class="pan-size">24 cm round pan</div>'
        "</div>"
    )
    assert extract_ingredients(doc) == [
        "200 g flour",
        "2 eggs",
        "For the glaze:",
        "100 g sugar",
        "Pan size:",
        "24 cm round pan",
    ]


def test_ingredients_between_markers_in_paragraphs():
    doc = doc_for(
        "<article>"
        "<p>Ingredients:<br>2 cups flour<br>1 cup sugar</p>"
        "<p>3 eggs</p>"
        "<p>Preparation steps</p>"
        "<p>Mix everything.</p>"
        "</article>"
    )
    assert extract_ingredients(doc) == ["2 cups flour", "1 cup sugar", "3 eggs"]


@pytest.mark.parametrize("heading", ["Preparation:", "Instructions:", "How to make", "הוראות הכנה:"])
def test_ingredients_in_paragraphs_stop_at_preparation_heading(heading):
    doc = doc_for(
        "<article>"
        "<p>Ingredients:<br>2 eggs<br>1 cup flour</p>"
        f"<p>{heading}</p>"
        "<p>Mix and bake for 20 minutes.</p>"
        "</article>"
    )
    assert extract_ingredients(doc) == ["2 eggs", "1 cup flour"]


def test_ingredients_from_rtl_paragraphs():
    doc = doc_for(
        '<div dir="rtl">'
        "<p>מצרכים</p>"
        "<p>2 כוסות קמח</p>"
        "<p>לציפוי:</p>"
        "<p>100 גרם שוקולד</p>"
        "<p>הכנתם? שתפו אותנו</p>"
        "<p>אופן ההכנה</p>"
        "<p>מערבבים הכל</p>"
        "</div>"
    )
    assert extract_ingredients(doc) == ["2 כוסות קמח", "לציפוי:", "100 גרם שוקולד"]


def test_meta_description_split():
    head = (
        '<meta name="description" content="Ingredients: 2 eggs, 1 cup milk '
        'Preparation: 1. Whisk the eggs 2. Add milk">'
    )
    doc = doc_for("<p>x</p>", head)
    assert extract_ingredients(doc) == ["2 eggs", "1 cup milk"]
    assert extract_instructions(doc) == ["Whisk the eggs", "Add milk"]


def test_instructions_after_marker_skip_video_links():
    doc = doc_for(
        "<article>"
        "<h2>Ingredients</h2><ul><li>1 egg</li></ul>"
        "<h2>Preparation</h2>"
        "<p>Beat the egg.</p>"
        '<p>Watch on <a href="https://www.youtube.com/watch?v=abc123xyz">YouTube</a></p>'
        "<ol><li>Fry it.</li></ol>"
        "</article>"
    )
    assert extract_instructions(doc) == ["Beat the egg.", "Fry it."]


def test_instructions_from_container_strip_numbers_and_duplicates():
    doc = doc_for(
        '<ol class="instructions">'
        "<li>1. Preheat the oven.</li>"
        "<li>2) Mix the batter.</li>"
        "<li>Mix the batter.</li>"
        "</ol>"
    )
    assert extract_instructions(doc) == ["Preheat the oven.", "Mix the batter."]


def test_instructions_from_list_after_how_to_prepare():
    doc = doc_for("<div><h3>How to prepare</h3><ol><li>Cut.</li><li>Serve.</li></ol></div>")
    assert extract_instructions(doc) == ["Cut.", "Serve."]


def test_video_embed_from_iframe_is_normalized():
    youtube = doc_for('<iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ?rel=0"></iframe>')
    embed = extract_video(youtube)
    assert embed.platform == "youtube"
    assert embed.url == "https://www.youtube.com/embed/dQw4w9WgXcQ"

    tiktok = doc_for('<blockquote class="tiktok-embed" data-video-id="7234567890123456789"></blockquote>')
    assert extract_video(tiktok).url == "https://www.tiktok.com/embed/v2/7234567890123456789"


def test_video_link_is_passed_through():
    doc = doc_for('<a href="https://youtube.com/@channel">Channel</a><a href="https://youtu.be/dQw4w9WgXcQ">Watch</a>')
    embed = extract_video(doc)
    assert embed.platform == "youtube"
    assert embed.url == "https://youtu.be/dQw4w9WgXcQ"
    assert extract_video(doc_for("<p>no video</p>")) is None


def test_normalize_embed_url():
    assert normalize_embed_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ").url == (
        "https://www.youtube.com/embed/dQw4w9WgXcQ"
    )
    assert normalize_embed_url("https://www.tiktok.com/@chef/video/7234567890123456789").url == (
        "https://www.tiktok.com/embed/v2/7234567890123456789"
    )
    assert normalize_embed_url("https://vimeo.com/1234") is None
    assert normalize_embed_url(None) is None


def test_normalize_youtube_playlist_embed():
    playlist = "https://www.youtube.com/embed/videoseries?list=PLx0sYbCqOb8TBPRdmBHs5Iftvv9TPboYG"
    assert normalize_embed_url(playlist).url == playlist
    assert normalize_embed_url("https://www.youtube.com/playlist?list=PLx0sYbCqOb8TBPRdmBHs5Iftvv9TPboYG").url == (
        playlist
    )
    assert normalize_embed_url("https://www.youtube.com/embed/videoseries") is None


def test_credits_and_author():
    head = (
        '<script type="application/ld+json">'
        '{"@type": "Recipe", "author": {"@type": "Person", "name": "Noa Cohen"}}'
        "</script>"
    )
    doc = doc_for('<p class="credits">Photo: Tal Ben</p>', head)
    assert extract_credits(doc) == ("Noa Cohen", "Photo: Tal Ben")

    doc = doc_for('<span class="author">Avi</span>', '<meta name="author" content="Dana Levi">')
    assert extract_credits(doc) == ("Dana Levi", None)
    assert extract_credits(doc_for("<p>x</p>")) == (None, None)


def test_site_categories_structured_data_first():
    head = (
        '<script type="application/ld+json">'
        '{"@graph": [{"@type": "Article", "articleSection": "Cakes", "keywords": "lemon, baking"}]}'
        "</script>"
    )
    doc = doc_for('<div class="breadcrumbs"><a href="/">Home</a></div>', head)
    assert extract_site_categories(doc) == ["Cakes", "lemon", "baking"]

    doc = doc_for('<div class="breadcrumbs"><a href="/">Home</a><a href="/c">Desserts</a></div>')
    assert extract_site_categories(doc) == ["Home", "Desserts"]
    assert extract_site_categories(doc_for("<p>x</p>")) == []


def test_prep_time():
    assert extract_prep_time(doc_for('<span class="prep-time">45 minutes</span>')) == "45 minutes"
    assert extract_prep_time(doc_for('<meta itemprop="totalTime" content="PT1H">')) == "PT1H"
    assert extract_prep_time(doc_for("<p>x</p>")) is None
