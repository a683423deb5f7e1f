"""
Label Service.

Project-scoped tags. Deleting a label detaches it from every ticket.
"""

from __future__ import annotations

import logging

from taskboard.auth.capabilities import Action
from taskboard.core.errors import NotFoundError
from taskboard.core.models import Label
from taskboard.core.schemas import LabelCreate
from taskboard.services.base import Service
from taskboard.storage.base import Collections

logger = logging.getLogger(__name__)


class LabelService(Service):
    
    async def list_labels(self, user_id: str, project_id: str) -> list[Label]:
        _, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.LABEL_READ)
        
        docs = await self.db.query(Collections.LABELS, {"project_id": project_id})
        return sorted((Label.model_validate(d) for d in docs), key=lambda l: l.name.lower())
    
    async def create_label(self, user_id: str, project_id: str, data: LabelCreate) -> Label:
        project, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.LABEL_CREATE)
        
        label = Label(project_id=project.id, name=data.name, color=data.color)
        await self._save(Collections.LABELS, label)
        return label
    
    async def delete_label(self, user_id: str, project_id: str, label_id: str) -> None:
        _, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.LABEL_DELETE)
        
        label = await self._load(Collections.LABELS, label_id, Label, "Label")
        if label.project_id != project_id:
            raise NotFoundError("Label not found")
        
        tickets = await self.db.query(
            Collections.TICKETS, {"project_id": project_id, "labels": label_id}
        )
        for doc in tickets:
            remaining = [l for l in doc["labels"] if l != label_id]
            await self.db.update(Collections.TICKETS, doc["_id"], {"labels": remaining})
        
        await self.db.delete(Collections.LABELS, label_id)
        logger.info(f"Label {label_id} deleted from {project_id}, detached from {len(tickets)} tickets")
