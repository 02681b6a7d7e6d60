"""Repair of conversation phone data written before normalization was uniform."""

import logging
from collections import defaultdict
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.core.observability import ConversationObserver, default_observer
from support_desk.core.phone import normalize_phone
from support_desk.db.repositories import (
    AgentRepository,
    ConversationRepository,
    MessageRepository,
)
from support_desk.models import Conversation, ConversationStatus
from support_desk.services.resolver import recency_key

logger = logging.getLogger(__name__)


class ConversationMaintenance:
    """Backfills phone keys and tenants, and merges duplicate open conversations.

    For each (agent, phone key) with several open conversations the most
    recently active one is kept, the others' messages move onto it and the
    others are archived. Audit entries are left pointing where they were.
    """

    def __init__(
        self,
        db: AsyncSession,
        observer: ConversationObserver = default_observer,
    ):
        self.db = db
        self.observer = observer
        self.agents = AgentRepository(db)
        self.conversations = ConversationRepository(db)
        self.messages = MessageRepository(db)

    async def normalize_and_merge(self, dry_run: bool = False) -> dict[str, int]:
        """Run the repair in one transaction.

        Args:
            dry_run: Compute the report, then roll everything back

        Returns:
            Counts: total conversations, conversations updated (phone key or
            tenant), groups merged and conversations archived
        """
        conversations = await self.conversations.list_all()
        agent_organizations = await self.agents.organization_map()
        report = {"total": len(conversations), "updated": 0, "merged": 0, "archived": 0}

        groups: dict[tuple[UUID, str], list[Conversation]] = defaultdict(list)
        keys: dict[UUID, str] = {}
        for conversation in conversations:
            if conversation.status == ConversationStatus.ARCHIVED:
                continue
            key = normalize_phone(conversation.client_phone)
            keys[conversation.id] = key
            if conversation.agent_id is not None and key:
                groups[(conversation.agent_id, key)].append(conversation)

        try:
            # Archive first so survivors can take the key without tripping the unique index
            for (agent_id, key), members in groups.items():
                if len(members) < 2:
                    continue
                kept, *duplicates = sorted(members, key=recency_key, reverse=True)
                duplicate_ids = [c.id for c in duplicates]
                self.observer.duplicates_detected(agent_id, key, kept.id, tuple(duplicate_ids))

                moved = await self.messages.reassign(duplicate_ids, kept.id)
                for duplicate in duplicates:
                    duplicate.status = ConversationStatus.ARCHIVED
                    duplicate.active_user_id = None

                report["merged"] += 1
                report["archived"] += len(duplicates)
                logger.info(
                    f"Merged {len(duplicates)} conversation(s) into {kept.id} "
                    f"({moved} message(s) moved)"
                )
            await self.db.flush()

            for conversation in conversations:
                key = keys.get(conversation.id)
                if key is None or conversation.status == ConversationStatus.ARCHIVED:
                    continue
                changed = False
                if conversation.client_phone_key != (key or None):
                    conversation.client_phone_key = key or None
                    changed = True
                organization_id = agent_organizations.get(conversation.agent_id)
                if organization_id and conversation.organization_id != organization_id:
                    conversation.organization_id = organization_id
                    changed = True
                if changed:
                    report["updated"] += 1
            await self.db.flush()
        except Exception:
            await self.db.rollback()
            raise

        if dry_run:
            await self.db.rollback()
            logger.info(f"Dry run, nothing written: {report}")
        else:
            await self.db.commit()
            logger.info(f"Phone repair complete: {report}")
        return report
