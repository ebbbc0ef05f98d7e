"""Discogs payload models."""
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class DiscogsTrack:
    position: str
    title: str
    duration: Optional[str] = None
    type_: Optional[str] = None

    def to_dict(self) -> dict:
        track = {"position": self.position, "title": self.title}
        if self.duration:
            track["duration"] = self.duration
        return track


@dataclass(frozen=True)
class DiscogsSearchResult:
    id: int
    title: str
    year: Optional[int] = None
    thumb: Optional[str] = None
    cover_image: Optional[str] = None
    resource_url: Optional[str] = None


@dataclass(frozen=True)
class DiscogsRelease:
    id: int
    title: str
    year: Optional[int] = None
    artists: Tuple[str, ...] = ()
    labels: Tuple[str, ...] = ()
    tracklist: Tuple[DiscogsTrack, ...] = ()
    thumb: Optional[str] = None

    @property
    def label(self) -> Optional[str]:
        return self.labels[0] if self.labels else None
