# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Accept header negotiation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)


class MediaTypeNegotiator(Protocol):
    def get_best(self, accept_header: str, offered_types: Sequence[str]) -> Optional[str]: ...


@dataclass(frozen=True)
class MediaRange:
    type: str
    subtype: str
    quality: float
    params: Tuple[Tuple[str, str], ...] = ()

    @property
    def specificity(self) -> int:
        if self.type == "*":
            return 0
        if self.subtype == "*":
            return 1
        return 2 + len(self.params)

    def matches(self, media_type: str, params: Tuple[Tuple[str, str], ...] = ()) -> bool:
        main, _, sub = media_type.partition("/")
        if self.type != "*" and self.type != main:
            return False
        if self.subtype != "*" and self.subtype != sub:
            return False
        return all(item in params for item in self.params)


def parse_media_type(value: str) -> Tuple[str, Tuple[Tuple[str, str], ...]]:
    """Split ``type/subtype; k=v`` into a lower-cased type and its parameters."""

    pieces = [piece.strip() for piece in value.split(";")]
    media_type = pieces[0].lower()
    params = []
    for piece in pieces[1:]:
        key, sep, val = piece.partition("=")
        if sep:
            params.append((key.strip().lower(), val.strip().strip('"')))
    return media_type, tuple(params)


def parse_accept(header: str) -> List[MediaRange]:
    ranges: List[MediaRange] = []
    for item in header.split(","):
        item = item.strip()
        if not item:
            continue
        media_type, params = parse_media_type(item)
        if media_type == "*":
            media_type = "*/*"
        main, sep, sub = media_type.partition("/")
        if not sep or not main or not sub:
            logger.debug("Ignoring malformed media range %r", item)
            continue

        quality = 1.0
        extra = []
        for key, value in params:
            if key == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
                quality = min(max(quality, 0.0), 1.0)
            else:
                extra.append((key, value))
        ranges.append(MediaRange(main, sub, quality, tuple(extra)))
    return ranges


class AcceptNegotiator:
    """Pick the offered media type the client prefers most.

    Each offered type takes the quality of the most specific Accept range that
    matches it. The highest quality above zero wins; ties go to the type
    offered first.
    """

    def get_best(self, accept_header: str, offered_types: Sequence[str]) -> Optional[str]:
        ranges = parse_accept(accept_header or "")
        if not ranges:
            return None

        best: Optional[str] = None
        best_quality = 0.0
        for offered in offered_types:
            media_type, params = parse_media_type(offered)
            matching = [r for r in ranges if r.matches(media_type, params)]
            if not matching:
                continue
            chosen = max(matching, key=lambda r: r.specificity)
            if chosen.quality > best_quality:
                best, best_quality = offered, chosen.quality
        return best


__all__ = ["AcceptNegotiator", "MediaRange", "MediaTypeNegotiator", "parse_accept", "parse_media_type"]
