"""Typed views of the mod.io API objects used by the bot.

Only the fields the state.json mapping reads are modelled. Decoding validates
that every nested object the mapping dereferences is present, so downstream
code never sees a partially shaped record. Leaf values are kept as the API
sent them (``None`` when absent).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .errors import MalformedUpstreamRecordError


@dataclass(frozen=True)
class ModioAvatar:
    filename: Any = None
    original: Any = None
    thumb_50x50: Any = None
    thumb_100x100: Any = None


@dataclass(frozen=True)
class ModioUser:
    id: Any
    name_id: Any
    username: Any
    date_online: Any
    avatar: ModioAvatar
    profile_url: Any


@dataclass(frozen=True)
class ModioLogo:
    filename: Any = None
    original: Any = None
    thumb_320x180: Any = None
    thumb_640x360: Any = None
    thumb_1280x720: Any = None


@dataclass(frozen=True)
class ModioMedia:
    images: Optional[list[Any]] = None


@dataclass(frozen=True)
class ModioFilehash:
    md5: Any = None


@dataclass(frozen=True)
class ModioDownload:
    binary_url: Any = None
    date_expires: Any = None


@dataclass(frozen=True)
class ModioModfile:
    id: Any
    mod_id: Any
    date_added: Any
    date_scanned: Any
    virus_status: Any
    virus_positive: Any
    filehash: ModioFilehash
    filename: Any
    version: Any
    changelog: Any
    metadata_blob: Any
    download: ModioDownload


@dataclass(frozen=True)
class ModioStats:
    mod_id: Any
    popularity_rank_position: Any
    popularity_rank_total_mods: Any
    downloads_total: Any
    subscribers_total: Any
    ratings_total: Any
    ratings_positive: Any
    ratings_negative: Any
    ratings_percentage_positive: Any
    ratings_weighted_aggregate: Any
    ratings_display_text: Any
    date_expires: Any


@dataclass(frozen=True)
class ModioTag:
    name: Any


@dataclass(frozen=True)
class ModioMod:
    id: Any
    game_id: Any
    status: Any
    visible: Any
    submitted_by: ModioUser
    date_added: Any
    date_updated: Any
    logo: ModioLogo
    name: Any
    name_id: Any
    summary: Any
    description: Any
    description_plaintext: Any
    profile_url: Any
    media: ModioMedia
    modfile: ModioModfile
    stats: ModioStats
    tags: tuple[ModioTag, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ModioModSummary:
    """One entry of a mod search result."""

    id: Any
    name: Any
    summary: Any


def _require_object(parent: Mapping[str, Any], key: str, path: str) -> Mapping[str, Any]:
    value = parent.get(key)
    if not isinstance(value, Mapping):
        raise MalformedUpstreamRecordError(path)
    return value


def _decode_avatar(raw: Mapping[str, Any]) -> ModioAvatar:
    return ModioAvatar(
        filename=raw.get("filename"),
        original=raw.get("original"),
        thumb_50x50=raw.get("thumb_50x50"),
        thumb_100x100=raw.get("thumb_100x100"),
    )


def _decode_user(raw: Mapping[str, Any]) -> ModioUser:
    return ModioUser(
        id=raw.get("id"),
        name_id=raw.get("name_id"),
        username=raw.get("username"),
        date_online=raw.get("date_online"),
        avatar=_decode_avatar(_require_object(raw, "avatar", "submitted_by.avatar")),
        profile_url=raw.get("profile_url"),
    )


def _decode_logo(raw: Mapping[str, Any]) -> ModioLogo:
    return ModioLogo(
        filename=raw.get("filename"),
        original=raw.get("original"),
        thumb_320x180=raw.get("thumb_320x180"),
        thumb_640x360=raw.get("thumb_640x360"),
        thumb_1280x720=raw.get("thumb_1280x720"),
    )


def _decode_media(raw: Any) -> ModioMedia:
    if not isinstance(raw, Mapping):
        return ModioMedia()
    images = raw.get("images")
    return ModioMedia(images=list(images) if isinstance(images, list) else None)


def _decode_modfile(raw: Mapping[str, Any]) -> ModioModfile:
    filehash = _require_object(raw, "filehash", "modfile.filehash")
    download = _require_object(raw, "download", "modfile.download")
    return ModioModfile(
        id=raw.get("id"),
        mod_id=raw.get("mod_id"),
        date_added=raw.get("date_added"),
        date_scanned=raw.get("date_scanned"),
        virus_status=raw.get("virus_status"),
        virus_positive=raw.get("virus_positive"),
        filehash=ModioFilehash(md5=filehash.get("md5")),
        filename=raw.get("filename"),
        version=raw.get("version"),
        changelog=raw.get("changelog"),
        metadata_blob=raw.get("metadata_blob"),
        download=ModioDownload(
            binary_url=download.get("binary_url"),
            date_expires=download.get("date_expires"),
        ),
    )


def _decode_stats(raw: Mapping[str, Any]) -> ModioStats:
    return ModioStats(
        mod_id=raw.get("mod_id"),
        popularity_rank_position=raw.get("popularity_rank_position"),
        popularity_rank_total_mods=raw.get("popularity_rank_total_mods"),
        downloads_total=raw.get("downloads_total"),
        subscribers_total=raw.get("subscribers_total"),
        ratings_total=raw.get("ratings_total"),
        ratings_positive=raw.get("ratings_positive"),
        ratings_negative=raw.get("ratings_negative"),
        ratings_percentage_positive=raw.get("ratings_percentage_positive"),
        ratings_weighted_aggregate=raw.get("ratings_weighted_aggregate"),
        ratings_display_text=raw.get("ratings_display_text"),
        date_expires=raw.get("date_expires"),
    )


def _decode_tags(raw: Any) -> tuple[ModioTag, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise MalformedUpstreamRecordError("tags", detail="not a list")
    tags: list[ModioTag] = []
    for index, item in enumerate(raw):
        if not isinstance(item, Mapping):
            raise MalformedUpstreamRecordError(f"tags[{index}]")
        tags.append(ModioTag(name=item.get("name")))
    return tuple(tags)


def decode_mod(payload: Any) -> ModioMod:
    """Decode a mod.io ``Mod Object``, raising ``MalformedUpstreamRecordError``
    with the dotted path of the first missing nested object."""
    if not isinstance(payload, Mapping):
        raise MalformedUpstreamRecordError("$")
    submitted_by = _require_object(payload, "submitted_by", "submitted_by")
    logo = _require_object(payload, "logo", "logo")
    modfile = _require_object(payload, "modfile", "modfile")
    stats = _require_object(payload, "stats", "stats")
    return ModioMod(
        id=payload.get("id"),
        game_id=payload.get("game_id"),
        status=payload.get("status"),
        visible=payload.get("visible"),
        submitted_by=_decode_user(submitted_by),
        date_added=payload.get("date_added"),
        date_updated=payload.get("date_updated"),
        logo=_decode_logo(logo),
        name=payload.get("name"),
        name_id=payload.get("name_id"),
        summary=payload.get("summary"),
        description=payload.get("description"),
        description_plaintext=payload.get("description_plaintext"),
        profile_url=payload.get("profile_url"),
        media=_decode_media(payload.get("media")),
        modfile=_decode_modfile(modfile),
        stats=_decode_stats(stats),
        tags=_decode_tags(payload.get("tags")),
    )


def decode_search_results(payload: Any) -> list[ModioModSummary]:
    """Decode the ``data`` list of a mod search response, keeping its order."""
    if not isinstance(payload, Mapping):
        raise MalformedUpstreamRecordError("$")
    data = payload.get("data")
    if not isinstance(data, list):
        raise MalformedUpstreamRecordError("data", detail="not a list")
    results: list[ModioModSummary] = []
    for index, item in enumerate(data):
        if not isinstance(item, Mapping):
            raise MalformedUpstreamRecordError(f"data[{index}]")
        results.append(
            ModioModSummary(
                id=item.get("id"),
                name=item.get("name"),
                summary=item.get("summary"),
            )
        )
    return results
