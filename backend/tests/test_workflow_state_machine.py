"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  PromoterPro - Workflow State Machine Tests                                  ║
║                                                                              ║
║  1. Transition maps (terminaux sans sortie)                                  ║
║  2. Ventes: Pending -> Verified | Rejected, id inconnu = no-op               ║
║  3. Plaintes: résolution avec notes, archivage Resolved uniquement           ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import pytest

from services.errors import InvalidTransitionError, WorkflowError
from services.repository import Collection
from services.workflow_state_machine import (
    VALID_COMPLAINT_TRANSITIONS,
    VALID_SALE_TRANSITIONS,
    archive_complaint,
    archive_resolved,
    check_resolved_invariants,
    resolve_complaint,
    transition_sale,
    validate_sale_transition,
)
from tests.factories import make_complaint, make_sale


class TestTransitionMaps:
    """Test the transition maps"""

    def test_sale_terminal_states(self):
        assert VALID_SALE_TRANSITIONS["Verified"] == []
        assert VALID_SALE_TRANSITIONS["Rejected"] == []
        assert set(VALID_SALE_TRANSITIONS["Pending"]) == {"Verified", "Rejected"}

    def test_complaint_resolved_is_terminal(self):
        assert VALID_COMPLAINT_TRANSITIONS["Resolved"] == []
        assert VALID_COMPLAINT_TRANSITIONS["In Progress"] == ["Resolved"]

    def test_pending_to_pending_is_invalid(self):
        with pytest.raises(InvalidTransitionError):
            validate_sale_transition("s1", "Pending", "Pending")

    def test_resolved_invariants(self):
        assert check_resolved_invariants({"resolutionNotes": "done", "resolvedAt": 1})
        with pytest.raises(WorkflowError):
            check_resolved_invariants({"resolutionNotes": "  ", "resolvedAt": 1})
        with pytest.raises(WorkflowError):
            check_resolved_invariants({"resolutionNotes": "done"})


class TestSaleTransitions:

    @pytest.mark.asyncio
    async def test_verify_pending_sale(self, repo):
        await repo.add(Collection.SALES, make_sale("s1"))
        sale = await transition_sale(repo, "s1", "Verified")
        assert sale["status"] == "Verified"
        assert (await repo.get(Collection.SALES, "s1"))["status"] == "Verified"

    @pytest.mark.asyncio
    async def test_reject_pending_sale(self, repo):
        await repo.add(Collection.SALES, make_sale("s1"))
        assert (await transition_sale(repo, "s1", "Rejected"))["status"] == "Rejected"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("terminal,target", [
        ("Verified", "Rejected"),
        ("Verified", "Pending"),
        ("Rejected", "Verified"),
        ("Rejected", "Rejected"),
    ])
    async def test_terminal_sale_cannot_move(self, repo, terminal, target):
        await repo.add(Collection.SALES, make_sale("s1", status=terminal))
        with pytest.raises(InvalidTransitionError):
            await transition_sale(repo, "s1", target)
        assert (await repo.get(Collection.SALES, "s1"))["status"] == terminal

    @pytest.mark.asyncio
    async def test_unknown_sale_is_noop(self, repo):
        await repo.add(Collection.SALES, make_sale("s1"))
        assert await transition_sale(repo, "ghost", "Verified") is None
        assert (await repo.get(Collection.SALES, "s1"))["status"] == "Pending"

    @pytest.mark.asyncio
    async def test_unknown_status_value_rejected(self, repo):
        await repo.add(Collection.SALES, make_sale("s1"))
        with pytest.raises(ValueError):
            await transition_sale(repo, "s1", "Approved")


class TestComplaintResolution:

    @pytest.mark.asyncio
    async def test_resolve_stamps_notes_and_time(self, repo):
        await repo.add(Collection.COMPLAINTS, make_complaint("c1"))
        complaint = await resolve_complaint(repo, "c1", "Refunded")
        assert complaint["status"] == "Resolved"
        assert complaint["resolutionNotes"] == "Refunded"
        assert complaint["resolvedAt"] > 0

    @pytest.mark.asyncio
    async def test_resolve_with_explicit_time(self, repo):
        await repo.add(Collection.COMPLAINTS, make_complaint("c1"))
        complaint = await resolve_complaint(repo, "c1", "Refunded", resolved_at=1_700_000_500_000)
        assert complaint["resolvedAt"] == 1_700_000_500_000

    @pytest.mark.asyncio
    @pytest.mark.parametrize("notes", ["", "   ", None])
    async def test_resolve_without_notes_fails(self, repo, notes):
        await repo.add(Collection.COMPLAINTS, make_complaint("c1"))
        with pytest.raises(WorkflowError):
            await resolve_complaint(repo, "c1", notes)
        assert (await repo.get(Collection.COMPLAINTS, "c1"))["status"] == "Open"

    @pytest.mark.asyncio
    async def test_in_progress_can_be_resolved(self, repo):
        await repo.add(Collection.COMPLAINTS, make_complaint("c1", status="In Progress"))
        assert (await resolve_complaint(repo, "c1", "ok"))["status"] == "Resolved"

    @pytest.mark.asyncio
    async def test_resolved_cannot_be_resolved_again(self, repo):
        await repo.add(Collection.COMPLAINTS, make_complaint("c1"))
        await resolve_complaint(repo, "c1", "first")
        with pytest.raises(InvalidTransitionError):
            await resolve_complaint(repo, "c1", "second")
        assert (await repo.get(Collection.COMPLAINTS, "c1"))["resolutionNotes"] == "first"

    @pytest.mark.asyncio
    async def test_unknown_complaint_is_noop(self, repo):
        assert await resolve_complaint(repo, "ghost", "notes") is None


class TestComplaintArchive:

    @pytest.mark.asyncio
    async def test_archive_open_complaint_refused(self, repo):
        await repo.add(Collection.COMPLAINTS, make_complaint("c1"))
        with pytest.raises(InvalidTransitionError):
            await archive_complaint(repo, "c1")
        assert not (await repo.get(Collection.COMPLAINTS, "c1")).get("isArchived")

    @pytest.mark.asyncio
    async def test_archive_resolved_complaint(self, repo):
        await repo.add(Collection.COMPLAINTS, make_complaint("c1"))
        await resolve_complaint(repo, "c1", "done")
        complaint = await archive_complaint(repo, "c1")
        assert complaint["isArchived"] is True
        assert complaint["status"] == "Resolved"

    @pytest.mark.asyncio
    async def test_archive_is_idempotent(self, repo):
        await repo.add(Collection.COMPLAINTS, make_complaint(
            "c1", status="Resolved", resolutionNotes="x", resolvedAt=1, isArchived=True
        ))
        complaint = await archive_complaint(repo, "c1")
        assert complaint["isArchived"] is True

    @pytest.mark.asyncio
    async def test_archive_unknown_is_noop(self, repo):
        assert await archive_complaint(repo, "ghost") is None

    @pytest.mark.asyncio
    async def test_archive_resolved_batch(self, repo):
        await repo.add(Collection.COMPLAINTS, make_complaint("c1"))
        await repo.add(Collection.COMPLAINTS, make_complaint("c2", status="Resolved", resolutionNotes="a", resolvedAt=1))
        await repo.add(Collection.COMPLAINTS, make_complaint("c3", status="Resolved", resolutionNotes="b", resolvedAt=1))
        await repo.add(Collection.COMPLAINTS, make_complaint(
            "c4", status="Resolved", resolutionNotes="c", resolvedAt=1, isArchived=True
        ))

        assert await archive_resolved(repo) == 2

        complaints = {c["id"]: c for c in await repo.list(Collection.COMPLAINTS)}
        assert not complaints["c1"].get("isArchived")
        assert complaints["c2"]["isArchived"] and complaints["c3"]["isArchived"]
        print("✅ Only Resolved complaints archived, Open left visible")

    @pytest.mark.asyncio
    async def test_archive_resolved_nothing_to_do(self, repo):
        await repo.add(Collection.COMPLAINTS, make_complaint("c1"))
        assert await archive_resolved(repo) == 0
