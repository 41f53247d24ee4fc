from typing import Dict, List

import structlog

from ..schemas.avatar import Avatar
from ..schemas.size import SizeRecommendation
from .recommender import recommend


logger = structlog.get_logger("tryon.avatars")


class AvatarNotFound(LookupError):
    pass


class MeasurementsUnavailable(ValueError):
    """The avatar exists but was generated without body measurements."""


class AvatarStore:
    """In-memory avatars keyed by id. Owned by the app, handed out via a dependency."""

    def __init__(self) -> None:
        self._avatars: Dict[str, Avatar] = {}

    def save(self, avatar: Avatar) -> Avatar:
        self._avatars[avatar.id] = avatar
        return avatar

    def get(self, avatar_id: str) -> Avatar | None:
        return self._avatars.get(avatar_id)

    def __len__(self) -> int:
        return len(self._avatars)


def recommendations_for_avatar(store: AvatarStore, avatar_id: str) -> List[SizeRecommendation]:
    avatar = store.get(avatar_id)
    if avatar is None:
        raise AvatarNotFound(avatar_id)
    if avatar.measurements is None:
        raise MeasurementsUnavailable(avatar_id)

    recs = recommend(avatar.measurements)
    logger.info(
        "size_recommendations",
        avatar_id=avatar_id,
        sizes={r.category: r.recommended_size for r in recs},
    )
    return recs
