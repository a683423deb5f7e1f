"""
Tests for tickets, comments and labels inside a project.
"""

import pytest

from taskboard.core.errors import AuthorizationError, NotFoundError, ValidationError
from taskboard.core.models import TicketStatus
from taskboard.core.schemas import (
    CommentCreate,
    CommentUpdate,
    LabelCreate,
    MemberAdd,
    ProjectCreate,
    TicketCreate,
    TicketUpdate,
)
from taskboard.storage import Collections

from conftest import DUE, make_user


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def scenario(users, projects, tickets):
    """Owner A with project P, member B who created ticket T, outsider C."""
    async def build():
        a = await make_user(users, "a")
        b = await make_user(users, "b")
        c = await make_user(users, "c")
        project = await projects.create_project(a.id, ProjectCreate(title="P"))
        await projects.add_member(a.id, project.id, MemberAdd(user_id=b.id))
        ticket = await tickets.create_ticket(b.id, TicketCreate(
            project_id=project.id, title="T", estimation_date=DUE,
        ))
        return a.id, b.id, c.id, project, ticket
    return build


# =============================================================================
# Tickets
# =============================================================================


class TestTickets:
    @pytest.mark.asyncio
    async def test_defaults(self, scenario):
        _, b, _, project, ticket = await scenario()
        assert ticket.status == TicketStatus.TODO
        assert ticket.created_by == b
        assert ticket.project_id == project.id
        assert ticket.estimation_date == DUE

    @pytest.mark.asyncio
    async def test_outsider_cannot_read(self, scenario, tickets):
        _, _, c, project, ticket = await scenario()
        with pytest.raises(AuthorizationError):
            await tickets.get_ticket(c, ticket.id)
        with pytest.raises(AuthorizationError):
            await tickets.list_tickets(c, project.id)

    @pytest.mark.asyncio
    async def test_missing_ticket_is_not_found(self, scenario, tickets):
        _, _, c, _, _ = await scenario()
        with pytest.raises(NotFoundError):
            await tickets.get_ticket(c, "tkt_missing")

    @pytest.mark.asyncio
    async def test_outsider_cannot_create(self, scenario, tickets):
        _, _, c, project, _ = await scenario()
        with pytest.raises(AuthorizationError):
            await tickets.create_ticket(c, TicketCreate(
                project_id=project.id, title="Sneaky", estimation_date=DUE,
            ))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", list(TicketStatus))
    async def test_any_status_transition(self, scenario, tickets, status):
        a, _, _, _, ticket = await scenario()
        updated = await tickets.update_ticket(a, ticket.id, TicketUpdate(status=status))
        assert updated.status == status

    @pytest.mark.asyncio
    async def test_member_updates_to_done(self, scenario, tickets):
        _, b, _, _, ticket = await scenario()
        await tickets.update_ticket(b, ticket.id, TicketUpdate(status=TicketStatus.DONE))
        fetched = await tickets.get_ticket(b, ticket.id)
        assert fetched.status == TicketStatus.DONE
        assert fetched.title == "T"

    @pytest.mark.asyncio
    async def test_empty_update_is_noop(self, scenario, tickets):
        _, b, _, _, ticket = await scenario()
        same = await tickets.update_ticket(b, ticket.id, TicketUpdate())
        assert same.updated_at == ticket.updated_at

    @pytest.mark.asyncio
    async def test_owner_cannot_delete_others_ticket(self, scenario, tickets):
        a, _, _, _, ticket = await scenario()
        with pytest.raises(AuthorizationError):
            await tickets.delete_ticket(a, ticket.id)

    @pytest.mark.asyncio
    async def test_creator_deletes_with_comments(self, scenario, tickets, comments, storage):
        a, b, _, _, ticket = await scenario()
        await comments.create_comment(a, CommentCreate(ticket_id=ticket.id, content="hi"))
        
        await tickets.delete_ticket(b, ticket.id)
        
        assert await storage.metadata.get(Collections.TICKETS, ticket.id) is None
        assert await storage.metadata.query(Collections.COMMENTS, {"ticket_id": ticket.id}) == []

    @pytest.mark.asyncio
    async def test_assignees_deduplicated(self, scenario, tickets):
        a, b, _, _, ticket = await scenario()
        updated = await tickets.update_ticket(b, ticket.id, TicketUpdate(assignees=[a, b, a]))
        assert updated.assignees == [a, b]

    @pytest.mark.asyncio
    async def test_outsider_can_be_assigned(self, scenario, tickets):
        _, b, c, _, ticket = await scenario()
        updated = await tickets.update_ticket(b, ticket.id, TicketUpdate(assignees=[c]))
        assert updated.assignees == [c]


# =============================================================================
# Labels
# =============================================================================


class TestLabels:
    @pytest.mark.asyncio
    async def test_attach_label(self, scenario, tickets, labels):
        _, b, _, project, ticket = await scenario()
        bug = await labels.create_label(b, project.id, LabelCreate(name="bug", color="#ff0000"))
        updated = await tickets.update_ticket(b, ticket.id, TicketUpdate(labels=[bug.id, bug.id]))
        assert updated.labels == [bug.id]

    @pytest.mark.asyncio
    async def test_label_from_other_project_rejected(self, scenario, projects, tickets, labels):
        a, b, _, _, ticket = await scenario()
        other = await projects.create_project(a, ProjectCreate(title="Other"))
        foreign = await labels.create_label(a, other.id, LabelCreate(name="x"))
        with pytest.raises(ValidationError):
            await tickets.update_ticket(b, ticket.id, TicketUpdate(labels=[foreign.id]))

    @pytest.mark.asyncio
    async def test_unknown_label_rejected(self, scenario, tickets):
        _, b, _, project, _ = await scenario()
        with pytest.raises(ValidationError):
            await tickets.create_ticket(b, TicketCreate(
                project_id=project.id, title="x", estimation_date=DUE, labels=["lbl_nope"],
            ))

    @pytest.mark.asyncio
    async def test_list_sorted_by_name(self, scenario, labels):
        _, b, _, project, _ = await scenario()
        for name in ("ux", "Bug", "api"):
            await labels.create_label(b, project.id, LabelCreate(name=name))
        assert [l.name for l in await labels.list_labels(b, project.id)] == ["api", "Bug", "ux"]

    @pytest.mark.asyncio
    async def test_member_cannot_delete(self, scenario, labels):
        _, b, _, project, _ = await scenario()
        bug = await labels.create_label(b, project.id, LabelCreate(name="bug"))
        with pytest.raises(AuthorizationError):
            await labels.delete_label(b, project.id, bug.id)

    @pytest.mark.asyncio
    async def test_delete_detaches(self, scenario, tickets, labels):
        a, b, _, project, ticket = await scenario()
        bug = await labels.create_label(b, project.id, LabelCreate(name="bug"))
        ux = await labels.create_label(b, project.id, LabelCreate(name="ux"))
        await tickets.update_ticket(b, ticket.id, TicketUpdate(labels=[bug.id, ux.id]))
        
        await labels.delete_label(a, project.id, bug.id)
        
        assert (await tickets.get_ticket(b, ticket.id)).labels == [ux.id]
        assert [l.id for l in await labels.list_labels(b, project.id)] == [ux.id]

    @pytest.mark.asyncio
    async def test_delete_through_wrong_project(self, scenario, projects, labels):
        a, b, _, project, _ = await scenario()
        other = await projects.create_project(a, ProjectCreate(title="Other"))
        bug = await labels.create_label(b, project.id, LabelCreate(name="bug"))
        with pytest.raises(NotFoundError):
            await labels.delete_label(a, other.id, bug.id)


# =============================================================================
# Comments
# =============================================================================


class TestComments:
    @pytest.mark.asyncio
    async def test_thread_oldest_first(self, scenario, comments):
        a, b, _, _, ticket = await scenario()
        first = await comments.create_comment(b, CommentCreate(ticket_id=ticket.id, content="one"))
        second = await comments.create_comment(a, CommentCreate(ticket_id=ticket.id, content="two"))
        
        thread = await comments.list_comments(a, ticket.id)
        assert [c.id for c in thread] == [first.id, second.id]
        assert thread[0].author_id == b
        assert thread[0].project_id == ticket.project_id

    @pytest.mark.asyncio
    async def test_outsider_cannot_comment_or_read(self, scenario, comments):
        _, b, c, _, ticket = await scenario()
        comment = await comments.create_comment(b, CommentCreate(ticket_id=ticket.id, content="hi"))
        with pytest.raises(AuthorizationError):
            await comments.create_comment(c, CommentCreate(ticket_id=ticket.id, content="me too"))
        with pytest.raises(AuthorizationError):
            await comments.list_comments(c, ticket.id)
        with pytest.raises(AuthorizationError):
            await comments.get_comment(c, comment.id)

    @pytest.mark.asyncio
    async def test_comment_on_missing_ticket(self, scenario, comments):
        _, b, _, _, _ = await scenario()
        with pytest.raises(NotFoundError):
            await comments.create_comment(b, CommentCreate(ticket_id="tkt_missing", content="hi"))

    @pytest.mark.asyncio
    async def test_owner_cannot_edit_members_comment(self, scenario, comments):
        a, b, _, _, ticket = await scenario()
        comment = await comments.create_comment(b, CommentCreate(ticket_id=ticket.id, content="draft"))
        
        with pytest.raises(AuthorizationError):
            await comments.update_comment(a, comment.id, CommentUpdate(content="edited by owner"))
        
        edited = await comments.update_comment(b, comment.id, CommentUpdate(content="final"))
        assert edited.content == "final"
        assert (await comments.get_comment(a, comment.id)).content == "final"

    @pytest.mark.asyncio
    async def test_only_author_deletes(self, scenario, comments):
        a, b, _, _, ticket = await scenario()
        comment = await comments.create_comment(b, CommentCreate(ticket_id=ticket.id, content="bye"))
        
        with pytest.raises(AuthorizationError):
            await comments.delete_comment(a, comment.id)
        
        await comments.delete_comment(b, comment.id)
        with pytest.raises(NotFoundError):
            await comments.get_comment(b, comment.id)
