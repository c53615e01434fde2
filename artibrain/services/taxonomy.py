"""
Category and tag service.

Both kinds behave the same: public listings with visible-post counts and
role-gated create/rename/delete. One class serves both, parameterized by
model and resource kind.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Type, Union

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from artibrain.kernel.errors import CONFLICT, FORBIDDEN, INVALID_REQUEST, NOT_FOUND, Failure
from artibrain.kernel.events.event_store import EventStore
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.models.event_log import EventType
from artibrain.kernel.models.post import Post
from artibrain.kernel.models.taxonomy import Category, Tag, post_categories, post_tags
from artibrain.kernel.permissions.policy import Action, ResourceKind, authorize_principal
from artibrain.logging_config import get_logger
from artibrain.orchestration.publication import public_visibility_clause
from artibrain.schemas.taxonomy import TaxonomyCreate, TaxonomyUpdate
from artibrain.services.slugs import slugify
from artibrain.services.store import exists_where, flush_or_conflict

logger = get_logger(__name__)

TaxonomyModel = Union[Category, Tag]

_EVENTS: Dict[ResourceKind, Dict[Action, EventType]] = {
    ResourceKind.CATEGORY: {
        Action.CREATE: EventType.CATEGORY_CREATED,
        Action.UPDATE: EventType.CATEGORY_UPDATED,
        Action.DELETE: EventType.CATEGORY_DELETED,
    },
    ResourceKind.TAG: {
        Action.CREATE: EventType.TAG_CREATED,
        Action.UPDATE: EventType.TAG_UPDATED,
        Action.DELETE: EventType.TAG_DELETED,
    },
}


class TaxonomyService:
    """Service for one taxonomy kind."""

    def __init__(
        self,
        session: AsyncSession,
        model: Type[TaxonomyModel],
        kind: ResourceKind,
    ):
        self.session = session
        self.model = model
        self.kind = kind
        self.event_store = EventStore(session)
        if model is Category:
            self.link_table, self.link_column = post_categories, post_categories.c.category_id
        else:
            self.link_table, self.link_column = post_tags, post_tags.c.tag_id

    @classmethod
    def categories(cls, session: AsyncSession) -> "TaxonomyService":
        return cls(session, Category, ResourceKind.CATEGORY)

    @classmethod
    def tags(cls, session: AsyncSession) -> "TaxonomyService":
        return cls(session, Tag, ResourceKind.TAG)

    # ------------------------------------------------------------------
    # Public reads
    # ------------------------------------------------------------------

    async def list_with_counts(
        self,
        now: Optional[datetime] = None,
    ) -> List[Tuple[TaxonomyModel, int]]:
        """Every entry with the number of publicly visible posts it holds."""
        query = (
            select(self.model, func.count(Post.id))
            .outerjoin(self.link_table, self.link_column == self.model.id)
            .outerjoin(
                Post,
                and_(Post.id == self.link_table.c.post_id, public_visibility_clause(now)),
            )
            .group_by(self.model.id)
            .order_by(self.model.name)
        )
        result = await self.session.execute(query)
        return [(entry, count) for entry, count in result.all()]

    async def get_by_slug(
        self,
        slug: str,
        now: Optional[datetime] = None,
    ) -> Union[Tuple[TaxonomyModel, int], Failure]:
        entry = await self._first(self.model.slug == slug)
        if entry is None:
            return NOT_FOUND
        count_query = (
            select(func.count(Post.id))
            .join(self.link_table, self.link_table.c.post_id == Post.id)
            .where(self.link_column == entry.id, public_visibility_clause(now))
        )
        count = (await self.session.execute(count_query)).scalar() or 0
        return entry, count

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(
        self,
        principal: Optional[Principal],
        data: TaxonomyCreate,
        ip_address: Optional[str] = None,
    ) -> Union[TaxonomyModel, Failure]:
        if not authorize_principal(principal, Action.CREATE, self.kind).allowed:
            return FORBIDDEN

        slug = slugify(data.slug or data.name)
        if not slug:
            return INVALID_REQUEST
        if await exists_where(self.session, self.model, self.model.slug == slug):
            return CONFLICT

        entry = self.model(name=data.name, slug=slug)
        self.session.add(entry)
        conflict = await flush_or_conflict(self.session)
        if conflict is not None:
            return conflict
        await self.session.refresh(entry)

        await self._audit(principal, Action.CREATE, entry.id, {"name": entry.name, "slug": slug}, ip_address)
        return entry

    async def update(
        self,
        principal: Optional[Principal],
        entry_id: uuid.UUID,
        data: TaxonomyUpdate,
        ip_address: Optional[str] = None,
    ) -> Union[TaxonomyModel, Failure]:
        """Rename an entry. A new name re-slugs it unless a slug is given."""
        if not authorize_principal(principal, Action.UPDATE, self.kind).allowed:
            return FORBIDDEN

        entry = await self._first(self.model.id == entry_id)
        if entry is None:
            return NOT_FOUND

        name = data.name or entry.name
        slug = slugify(data.slug) if data.slug else (slugify(name) if data.name else entry.slug)
        if not slug:
            return INVALID_REQUEST
        if slug != entry.slug and await exists_where(
            self.session, self.model, self.model.slug == slug, self.model.id != entry.id
        ):
            return CONFLICT

        entry.name = name
        entry.slug = slug
        conflict = await flush_or_conflict(self.session)
        if conflict is not None:
            return conflict

        await self._audit(principal, Action.UPDATE, entry.id, {"name": name, "slug": slug}, ip_address)
        return entry

    async def delete(
        self,
        principal: Optional[Principal],
        entry_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> Optional[Failure]:
        """Delete an entry and detach it from its posts. Returns None on success."""
        if not authorize_principal(principal, Action.DELETE, self.kind).allowed:
            return FORBIDDEN

        entry = await self._first(self.model.id == entry_id)
        if entry is None:
            return NOT_FOUND

        await self.session.execute(delete(self.link_table).where(self.link_column == entry.id))
        await self.session.delete(entry)
        await self.session.flush()

        await self._audit(principal, Action.DELETE, entry_id, {"slug": entry.slug}, ip_address)
        return None

    # ------------------------------------------------------------------

    async def _first(self, *criteria) -> Optional[TaxonomyModel]:
        result = await self.session.execute(select(self.model).where(*criteria))
        return result.scalar_one_or_none()

    async def _audit(
        self,
        principal: Principal,
        action: Action,
        entry_id: uuid.UUID,
        payload: dict,
        ip_address: Optional[str],
    ) -> None:
        await self.event_store.log(
            event_type=_EVENTS[self.kind][action],
            entity_type=self.kind.value,
            entity_id=entry_id,
            user_id=principal.id,
            payload=payload,
            ip_address=ip_address,
        )
        logger.info(
            "%s %sd",
            self.kind.value.capitalize(),
            action.value,
            extra={"entry_id": entry_id, "user_id": principal.id},
        )
