from typing import Any, Dict, List, Optional

from groove_sdk.discogs.models import DiscogsRelease, DiscogsSearchResult, DiscogsTrack


def _year(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value or None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip()) or None
    return None


def _names(entries: Any) -> tuple:
    return tuple(
        str(entry["name"]).strip()
        for entry in entries or ()
        if isinstance(entry, dict) and entry.get("name")
    )


def parse_track(obj: Dict[str, Any]) -> DiscogsTrack:
    return DiscogsTrack(
        position=str(obj.get("position") or "").strip(),
        title=str(obj.get("title") or "").strip(),
        duration=obj.get("duration") or None,
        type_=obj.get("type_"),
    )


def parse_search_result(obj: Dict[str, Any]) -> Optional[DiscogsSearchResult]:
    if not isinstance(obj, dict) or obj.get("id") is None:
        return None
    return DiscogsSearchResult(
        id=int(obj["id"]),
        title=str(obj.get("title") or ""),
        year=_year(obj.get("year")),
        thumb=obj.get("thumb") or None,
        cover_image=obj.get("cover_image") or None,
        resource_url=obj.get("resource_url"),
    )


def parse_release(obj: Dict[str, Any]) -> DiscogsRelease:
    return DiscogsRelease(
        id=int(obj["id"]),
        title=str(obj.get("title") or ""),
        year=_year(obj.get("year")),
        artists=_names(obj.get("artists")),
        labels=_names(obj.get("labels")),
        tracklist=tuple(
            parse_track(track) for track in obj.get("tracklist") or () if isinstance(track, dict)
        ),
        thumb=obj.get("thumb") or None,
    )


def extract_tracklist(release: DiscogsRelease) -> List[DiscogsTrack]:
    """Playable tracks only: headings and tracks without a title or position are dropped."""
    return [
        track
        for track in release.tracklist
        if track.type_ != "heading" and track.title and track.position
    ]
