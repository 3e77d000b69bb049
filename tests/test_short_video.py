import json

from recipe_keeper.app.services.url_parsing.document import parse_document
from recipe_keeper.app.services.url_parsing.extractors.short_video import (
    caption_title,
    extract_short_video_content,
    split_caption,
)
from recipe_keeper.app.services.url_parsing.models import RawPayload
from recipe_keeper.app.services.url_parsing.recipe_parser import parse_payload, parse_short_video_recipe

VIDEO_ID = "7234567890123456789"
VIDEO_URL = f"https://www.tiktok.com/@chef/video/{VIDEO_ID}"
EMBED_URL = f"https://www.tiktok.com/embed/v2/{VIDEO_ID}"

CAPTION = (
    "Chocolate mug cake #dessert #quick\n"
    "Ingredients:\n"
    "- 4 tbsp flour\n"
    "- 2 tbsp cocoa\n"
    "Preparation:\n"
    "Mix everything in a mug\n"
    "Microwave for 90 seconds"
)


def rehydration_page(desc: str = CAPTION) -> str:
    state = {
        "__DEFAULT_SCOPE__": {
            "webapp.video-detail": {
                "itemInfo": {
                    "itemStruct": {
                        "id": VIDEO_ID,
                        "desc": desc,
                        "author": {"uniqueId": "chef", "nickname": "Chef Dana"},
                    }
                }
            }
        }
    }
    return (
        "<html><head></head><body>"
        f'<script id="__UNIVERSAL_DATA_FOR_REHYDRATION__" type="application/json">{json.dumps(state)}</script>'
        "</body></html>"
    )


def test_split_caption_with_markers():
    ingredients, instructions = split_caption(CAPTION)
    assert ingredients == ["4 tbsp flour", "2 tbsp cocoa"]
    assert instructions == ["Mix everything in a mug", "Microwave for 90 seconds"]


def test_split_caption_plain_sections():
    ingredients, instructions = split_caption("Ingredients:\n2 eggs\n1 cup flour\nPreparation:\nMix and bake")
    assert ingredients == ["2 eggs", "1 cup flour"]
    assert instructions == ["Mix and bake"]


def test_split_caption_with_hebrew_markers():
    ingredients, instructions = split_caption("עוגת שוקולד\nמצרכים:\n2 ביצים\nאופן הכנה:\nמערבבים")
    assert ingredients == ["2 ביצים"]
    assert instructions == ["מערבבים"]


def test_split_caption_ignores_marker_words_inside_steps():
    ingredients, instructions = split_caption("Ingredients:\n1 egg\nPreparation:\nMix the ingredients well")
    assert ingredients == ["1 egg"]
    assert instructions == ["Mix the ingredients well"]


def test_split_caption_by_line_shape():
    ingredients, instructions = split_caption(
        "2 cups flour\n1 cup milk\n- 1 egg\nWhisk everything together until smooth\nCook on a hot pan"
    )
    assert ingredients == ["2 cups flour", "1 cup milk", "1 egg"]
    assert instructions == ["Whisk everything together until smooth", "Cook on a hot pan"]


def test_split_caption_empty():
    assert split_caption(None) == ([], [])
    assert split_caption("") == ([], [])


def test_caption_title():
    assert caption_title("#fyp\nBanana bread #baking\nmore") == "Banana bread"
    assert caption_title(None) == ""


def test_state_blob_content():
    content = extract_short_video_content(parse_document(rehydration_page()), VIDEO_URL)
    assert content.title == "Chocolate mug cake"
    assert content.video_id == VIDEO_ID
    assert content.embed_url == EMBED_URL
    assert content.author == "Chef Dana"


def test_sigi_state_blob():
    state = {"ItemModule": {VIDEO_ID: {"id": VIDEO_ID, "desc": "Lentil soup\nIngredients:\n1 cup lentils"}}}
    markup = f'<html><body><script id="SIGI_STATE" type="application/json">{json.dumps(state)}</script></body></html>'
    content = extract_short_video_content(parse_document(markup), "https://vm.tiktok.com/ZMabc/")
    assert content.title == "Lentil soup"
    assert content.embed_url == EMBED_URL


def test_meta_fallback_uses_video_id_from_url():
    markup = (
        "<html><head>"
        '<meta property="og:title" content="Quick salad | TikTok">'
        '<meta property="og:description" content="Quick salad">'
        "</head><body></body></html>"
    )
    content = extract_short_video_content(parse_document(markup), VIDEO_URL)
    assert content.title == "Quick salad"
    assert content.embed_url == EMBED_URL
    assert extract_short_video_content(parse_document(markup), "https://example.com/post") is None


def test_short_video_recipe_from_state():
    raw = RawPayload(source_url=VIDEO_URL, markup=rehydration_page())
    recipe = parse_payload(raw, VIDEO_URL)
    assert recipe.title == "Chocolate mug cake"
    assert recipe.ingredients == ["4 tbsp flour", "2 tbsp cocoa"]
    assert recipe.instructions == ["Mix everything in a mug", "Microwave for 90 seconds"]
    assert recipe.tiktok_url == EMBED_URL
    assert recipe.youtube_url is None
    assert recipe.author == "Chef Dana"
    assert recipe.category == "cakes"
    assert recipe.source == "tiktok.com"
    assert recipe.source_url == VIDEO_URL
    assert recipe.image == "/placeholder.svg"
    assert recipe.site_categories == ["TikTok"]


def test_short_video_recipe_without_payload_keeps_embed():
    recipe = parse_short_video_recipe(None, VIDEO_URL)
    assert recipe.title == "New Recipe"
    assert recipe.ingredients == []
    assert recipe.tiktok_url == EMBED_URL
    assert recipe.source == "tiktok.com"


def test_short_video_recipe_without_content_is_default():
    raw = RawPayload(source_url="https://example.com/x", markup="<html><body><p>Hi</p></body></html>")
    recipe = parse_short_video_recipe(raw, "https://example.com/x")
    assert recipe.title == "New Recipe"
    assert recipe.tiktok_url is None
    assert recipe.site_categories == []


def test_state_marker_without_state_falls_back_to_generic():
    markup = '<html><body><script>var x = {"itemStruct": 1};</script><h1>Blog Cake</h1></body></html>'
    raw = RawPayload(source_url="https://blog.example.com/post", markup=markup)
    recipe = parse_payload(raw, raw.source_url)
    assert recipe.title == "Blog Cake"
    assert recipe.tiktok_url is None
    assert recipe.source == "blog.example.com"
