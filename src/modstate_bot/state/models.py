"""Records of the Insurgency: Sandstorm ``state.json`` mod schema.

``to_dict`` emits the game's key names in the order the game writes them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

STATE_FILENAME = "state.json"


@dataclass(frozen=True)
class StateAvatar:
    thumb_50x50: Any
    thumb_100x100: Any
    filename: Any
    original: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "thumb_50x50": self.thumb_50x50,
            "thumb_100x100": self.thumb_100x100,
            "filename": self.filename,
            "original": self.original,
        }


@dataclass(frozen=True)
class StateSubmitter:
    id: Any
    name_id: Any
    username: Any
    date_online: Any
    avatar: StateAvatar
    timezone: str
    language: str
    profile_url: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "iD": self.id,
            "nameId": self.name_id,
            "username": self.username,
            "dateOnline": self.date_online,
            "avatar": self.avatar.to_dict(),
            "timezone": self.timezone,
            "language": self.language,
            "profileUrl": self.profile_url,
        }


@dataclass(frozen=True)
class StateLogo:
    thumb_640x360: Any
    thumb_1280x720: Any
    thumb_320x180: Any
    filename: Any
    original: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "thumb_640x360": self.thumb_640x360,
            "thumb_1280x720": self.thumb_1280x720,
            "thumb_320x180": self.thumb_320x180,
            "filename": self.filename,
            "original": self.original,
        }


@dataclass(frozen=True)
class StateMedia:
    youtube: tuple[Any, ...]
    sketchfab: tuple[Any, ...]
    images: tuple[Any, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "youtube": list(self.youtube),
            "sketchfab": list(self.sketchfab),
            "images": list(self.images),
        }


@dataclass(frozen=True)
class StateDownload:
    binary_url: Any
    date_expires: Any

    def to_dict(self) -> dict[str, Any]:
        return {"binaryUrl": self.binary_url, "dateExpires": self.date_expires}


@dataclass(frozen=True)
class StateModfile:
    id: Any
    mod_id: Any
    date_added: Any
    date_scanned: Any
    virus_status: str
    virus_positive: bool
    virus_total_hash: str
    file_size: int
    md5: Any
    filename: Any
    version: Any
    changelog: Any
    metadata_blob: Any
    download: StateDownload

    def to_dict(self) -> dict[str, Any]:
        return {
            "iD": self.id,
            "modId": self.mod_id,
            "dateAdded": self.date_added,
            "dateScanned": self.date_scanned,
            "virusStatus": self.virus_status,
            "virusPositive": self.virus_positive,
            "virusTotalHash": self.virus_total_hash,
            "fileSize": self.file_size,
            "filehash": {"md5": self.md5},
            "filename": self.filename,
            "version": self.version,
            "changelog": self.changelog,
            "metadataBlob": self.metadata_blob,
            "download": self.download.to_dict(),
        }


@dataclass(frozen=True)
class StateStats:
    mod_id: Any
    popularity_rank_position: Any
    popularity_rank_total_mods: Any
    downloads_total: Any
    subscribers_total: Any
    ratings_total: Any
    ratings_positive: Any
    ratings_negative: Any
    ratings_percentage_positive: Any
    ratings_weighted_aggregate: str
    ratings_display_text: Any
    date_expires: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "modId": self.mod_id,
            "popularityRankPosition": self.popularity_rank_position,
            "popularityRankTotalMods": self.popularity_rank_total_mods,
            "downloadsTotal": self.downloads_total,
            "subscribersTotal": self.subscribers_total,
            "ratingsTotal": self.ratings_total,
            "ratingsPositive": self.ratings_positive,
            "ratingsNegative": self.ratings_negative,
            "ratingsPercentagePositive": self.ratings_percentage_positive,
            "ratingsWeightedAggregate": self.ratings_weighted_aggregate,
            "ratingsDisplayText": self.ratings_display_text,
            "dateExpires": self.date_expires,
        }


@dataclass(frozen=True)
class StateTag:
    name: Any
    date_added: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "dateAdded": self.date_added}


@dataclass(frozen=True)
class ModState:
    """One mod entry as the game client reads it from ``state.json``."""

    id: Any
    game_id: Any
    status: str
    visible: str
    submitted_by: StateSubmitter
    date_added: Any
    date_updated: Any
    maturity_option: str
    logo: StateLogo
    homepage_url: str
    name: Any
    name_id: Any
    summary: Any
    description: Any
    description_plaintext: Any
    metadata_blob: str
    profile_url: Any
    media: StateMedia
    modfile: StateModfile
    stats: StateStats
    metadata_kvp: tuple[Any, ...]
    tags: tuple[StateTag, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "iD": self.id,
            "gameId": self.game_id,
            "status": self.status,
            "visible": self.visible,
            "submittedBy": self.submitted_by.to_dict(),
            "dateAdded": self.date_added,
            "dateUpdated": self.date_updated,
            "maturityOption": self.maturity_option,
            "logo": self.logo.to_dict(),
            "homepageUrl": self.homepage_url,
            "name": self.name,
            "nameId": self.name_id,
            "summary": self.summary,
            "description": self.description,
            "description_Plaintext": self.description_plaintext,
            "metadataBlob": self.metadata_blob,
            "profileUrl": self.profile_url,
            "media": self.media.to_dict(),
            "modfile": self.modfile.to_dict(),
            "stats": self.stats.to_dict(),
            "metadataKvp": list(self.metadata_kvp),
            "tags": [tag.to_dict() for tag in self.tags],
        }
