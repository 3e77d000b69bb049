"""Embedded video detection and embed URL normalization."""

import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

from recipe_keeper.app.services.url_parsing.document import ParsedDocument
from recipe_keeper.app.services.url_parsing.extractors.chain import run_chain
from recipe_keeper.app.services.url_parsing.models import VideoEmbed

YOUTUBE_EMBED_TEMPLATE = "https://www.youtube.com/embed/{video_id}"
YOUTUBE_PLAYLIST_EMBED_TEMPLATE = "https://www.youtube.com/embed/videoseries?list={playlist_id}"
TIKTOK_EMBED_TEMPLATE = "https://www.tiktok.com/embed/v2/{video_id}"

_YOUTUBE_DOMAINS = ("youtube.com", "youtube-nocookie.com", "youtu.be")
_TIKTOK_DOMAINS = ("tiktok.com",)
_YOUTUBE_PATH_RE = re.compile(r"/(?:embed|shorts|v|live)/(?!videoseries\b)([A-Za-z0-9_-]{6,})")
_YOUTUBE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{6,}$")
_TIKTOK_PATH_RE = re.compile(r"/(?:video|embed(?:/v2)?|v)/(\d+)")


def video_platform(url: Optional[str]) -> Optional[str]:
    """Platform name for a URL on a known video domain."""
    try:
        host = (urlparse(url or "").hostname or "").lower()
    except ValueError:
        return None
    if any(host == domain or host.endswith("." + domain) for domain in _YOUTUBE_DOMAINS):
        return "youtube"
    if any(host == domain or host.endswith("." + domain) for domain in _TIKTOK_DOMAINS):
        return "tiktok"
    return None


def youtube_video_id(url: str) -> Optional[str]:
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if host.endswith("youtu.be"):
        candidate = parsed.path.strip("/").split("/")[0]
        return candidate if _YOUTUBE_ID_RE.match(candidate) else None
    match = _YOUTUBE_PATH_RE.search(parsed.path)
    if match:
        return match.group(1)
    values = parse_qs(parsed.query).get("v")
    if values and _YOUTUBE_ID_RE.match(values[0]):
        return values[0]
    return None


def youtube_playlist_id(url: str) -> Optional[str]:
    """Playlist id of a playlist or videoseries URL."""
    parsed = urlparse(url)
    if parsed.path.rstrip("/") not in {"/embed/videoseries", "/playlist"}:
        return None
    values = parse_qs(parsed.query).get("list")
    if values and _YOUTUBE_ID_RE.match(values[0]):
        return values[0]
    return None


def tiktok_video_id(url: str) -> Optional[str]:
    match = _TIKTOK_PATH_RE.search(urlparse(url).path)
    return match.group(1) if match else None


def tiktok_embed_url(video_id: str) -> str:
    return TIKTOK_EMBED_TEMPLATE.format(video_id=video_id)


def normalize_embed_url(url: Optional[str]) -> Optional[VideoEmbed]:
    """Canonical embed URL for a YouTube/TikTok URL, None when unrecognized."""
    if not url:
        return None
    if url.startswith("//"):
        url = "https:" + url
    platform = video_platform(url)
    try:
        if platform == "youtube":
            video_id = youtube_video_id(url)
            if video_id:
                return VideoEmbed(platform=platform, url=YOUTUBE_EMBED_TEMPLATE.format(video_id=video_id))
            playlist_id = youtube_playlist_id(url)
            if playlist_id:
                return VideoEmbed(
                    platform=platform, url=YOUTUBE_PLAYLIST_EMBED_TEMPLATE.format(playlist_id=playlist_id)
                )
        elif platform == "tiktok":
            video_id = tiktok_video_id(url)
            if video_id:
                return VideoEmbed(platform=platform, url=tiktok_embed_url(video_id))
    except ValueError:
        return None
    return None


def _embed_from_player(doc: ParsedDocument) -> Optional[VideoEmbed]:
    for frame in doc.select("iframe[src], iframe[data-src], embed[src]"):
        src = frame.get("src") or frame.get("data-src")
        embed = normalize_embed_url(src)
        if embed:
            return embed
    for quote in doc.select("blockquote.tiktok-embed[data-video-id]"):
        video_id = (quote.get("data-video-id") or "").strip()
        if video_id.isdigit():
            return VideoEmbed(platform="tiktok", url=tiktok_embed_url(video_id))
    return None


def _embed_from_link(doc: ParsedDocument) -> Optional[VideoEmbed]:
    # Links are passed through as-is, but only when they point at a video.
    for link in doc.select("a[href]"):
        href = link["href"].strip()
        if normalize_embed_url(href):
            return VideoEmbed(platform=video_platform(href), url=href)
    return None


VIDEO_HEURISTICS = (
    _embed_from_player,
    _embed_from_link,
)


def extract_video(doc: ParsedDocument) -> Optional[VideoEmbed]:
    return run_chain(doc, VIDEO_HEURISTICS, field="video")
