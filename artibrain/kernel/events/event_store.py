"""
Audit log writer.

Services call ``log`` after a mutation has been decided and applied to the
session; the row commits (or rolls back) together with the mutation.
"""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from artibrain.kernel.models.event_log import EventLog, EventType
from artibrain.serialization import to_jsonable


class EventStore:
    """
    Append-only access to the event log.
    
    Usage:
        event_store = EventStore(session)
        await event_store.log(
            event_type=EventType.POST_CREATED,
            entity_type="post",
            entity_id=post.id,
            user_id=principal.id,
            payload={"slug": post.slug},
        )
    """
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def log(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: uuid.UUID,
        user_id: Optional[uuid.UUID] = None,
        payload: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> EventLog:
        """
        Add an audit row to the session.
        
        Args:
            event_type: What happened
            entity_type: post, category, tag, user or file
            entity_id: The affected record
            user_id: Acting user, if any
            payload: Extra detail; converted to JSON-safe values
            ip_address: Client IP
            
        Returns:
            The pending EventLog row
        """
        event = EventLog(
            event_type=event_type.value,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            payload=to_jsonable(payload or {}),
            ip_address=ip_address,
        )
        self.session.add(event)
        return event
    
    async def get_entity_history(
        self,
        entity_type: str,
        entity_id: uuid.UUID,
        limit: int = 100,
    ) -> List[EventLog]:
        """Most recent events for one record, newest first."""
        query = (
            select(EventLog)
            .where(EventLog.entity_type == entity_type, EventLog.entity_id == entity_id)
            .order_by(desc(EventLog.created_at))
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
