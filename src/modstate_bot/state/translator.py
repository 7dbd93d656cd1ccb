"""Map mod.io mod records onto the game's ``state.json`` schema.

Mapping rules:

- ``status`` 1 is "Accepted", any other value "Pending".
- ``visible`` 1 is "Public", any other value "Hidden".
- ``modfile.virus_status`` 1 is "ScanComplete", any other value "NotScanned".
- ``modfile.virus_positive`` 0 is ``False``; anything else, including a
  missing or non-numeric value, is ``True``.
- ``stats.ratings_weighted_aggregate`` becomes a string with exactly 20
  fractional digits.
- Tags keep only their name and get ``dateAdded = 0``.
- Fields the game expects but mod.io does not provide get fixed placeholders.
"""

from __future__ import annotations

import json
import math
from typing import Any

from ..integrations.modio.models import (
    ModioMod,
    ModioModfile,
    ModioStats,
    ModioUser,
    decode_mod,
)
from .models import (
    ModState,
    StateAvatar,
    StateDownload,
    StateLogo,
    StateMedia,
    StateModfile,
    StateStats,
    StateSubmitter,
    StateTag,
)

STATUS_ACCEPTED = "Accepted"
STATUS_PENDING = "Pending"
VISIBILITY_PUBLIC = "Public"
VISIBILITY_HIDDEN = "Hidden"
VIRUS_SCAN_COMPLETE = "ScanComplete"
VIRUS_NOT_SCANNED = "NotScanned"
MATURITY_NONE = "None"
RATING_DECIMALS = 20


def _is_code(value: Any, code: int) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value == code


def status_label(value: Any) -> str:
    return STATUS_ACCEPTED if _is_code(value, 1) else STATUS_PENDING


def visibility_label(value: Any) -> str:
    return VISIBILITY_PUBLIC if _is_code(value, 1) else VISIBILITY_HIDDEN


def virus_status_label(value: Any) -> str:
    return VIRUS_SCAN_COMPLETE if _is_code(value, 1) else VIRUS_NOT_SCANNED


def virus_positive_flag(value: Any) -> bool:
    # Unknown scan state counts as positive.
    return not _is_code(value, 0)


def format_weighted_aggregate(value: Any) -> str:
    """Render a rating as a fixed-point string with 20 fractional digits."""
    if value is None or (isinstance(value, str) and not value.strip()):
        number = 0.0
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return "NaN"
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    return format(number, f".{RATING_DECIMALS}f")


def _translate_submitter(user: ModioUser) -> StateSubmitter:
    return StateSubmitter(
        id=user.id,
        name_id=user.name_id,
        username=user.username,
        date_online=user.date_online,
        avatar=StateAvatar(
            thumb_50x50=user.avatar.thumb_50x50,
            thumb_100x100=user.avatar.thumb_100x100,
            filename=user.avatar.filename,
            original=user.avatar.original,
        ),
        timezone="",
        language="",
        profile_url=user.profile_url,
    )


def _translate_modfile(modfile: ModioModfile) -> StateModfile:
    return StateModfile(
        id=modfile.id,
        mod_id=modfile.mod_id,
        date_added=modfile.date_added,
        date_scanned=modfile.date_scanned,
        virus_status=virus_status_label(modfile.virus_status),
        virus_positive=virus_positive_flag(modfile.virus_positive),
        virus_total_hash="",
        file_size=0,
        md5=modfile.filehash.md5,
        filename=modfile.filename,
        version=modfile.version,
        changelog=modfile.changelog,
        metadata_blob=modfile.metadata_blob,
        download=StateDownload(
            binary_url=modfile.download.binary_url,
            date_expires=modfile.download.date_expires,
        ),
    )


def _translate_stats(stats: ModioStats) -> StateStats:
    return StateStats(
        mod_id=stats.mod_id,
        popularity_rank_position=stats.popularity_rank_position,
        popularity_rank_total_mods=stats.popularity_rank_total_mods,
        downloads_total=stats.downloads_total,
        subscribers_total=stats.subscribers_total,
        ratings_total=stats.ratings_total,
        ratings_positive=stats.ratings_positive,
        ratings_negative=stats.ratings_negative,
        ratings_percentage_positive=stats.ratings_percentage_positive,
        ratings_weighted_aggregate=format_weighted_aggregate(
            stats.ratings_weighted_aggregate
        ),
        ratings_display_text=stats.ratings_display_text,
        date_expires=stats.date_expires,
    )


def translate(record: ModioMod) -> ModState:
    return ModState(
        id=record.id,
        game_id=record.game_id,
        status=status_label(record.status),
        visible=visibility_label(record.visible),
        submitted_by=_translate_submitter(record.submitted_by),
        date_added=record.date_added,
        date_updated=record.date_updated,
        maturity_option=MATURITY_NONE,
        logo=StateLogo(
            thumb_640x360=record.logo.thumb_640x360,
            thumb_1280x720=record.logo.thumb_1280x720,
            thumb_320x180=record.logo.thumb_320x180,
            filename=record.logo.filename,
            original=record.logo.original,
        ),
        homepage_url="",
        name=record.name,
        name_id=record.name_id,
        summary=record.summary,
        description=record.description,
        description_plaintext=record.description_plaintext,
        metadata_blob="",
        profile_url=record.profile_url,
        media=StateMedia(
            youtube=(),
            sketchfab=(),
            images=tuple(record.media.images or ()),
        ),
        modfile=_translate_modfile(record.modfile),
        stats=_translate_stats(record.stats),
        metadata_kvp=(),
        tags=tuple(StateTag(name=tag.name) for tag in record.tags),
    )


def translate_payload(payload: Any) -> ModState:
    """Decode a raw mod.io mod object and translate it."""
    return translate(decode_mod(payload))


def render_state_json(state: ModState) -> bytes:
    return json.dumps(state.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")
