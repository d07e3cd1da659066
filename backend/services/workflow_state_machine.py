"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  PromoterPro - Workflow State Machine                                        ║
║                                                                              ║
║  RÈGLES STRICTES DE TRANSITION DE STATUT                                     ║
║                                                                              ║
║  SEUL CE MODULE change le status d'une vente ou d'une plainte                ║
║                                                                              ║
║  INVARIANTS:                                                                 ║
║  - sale: Pending -> Verified | Rejected, les deux sont TERMINAUX             ║
║  - complaint: status=Resolved IMPLIQUE resolutionNotes non vide              ║
║  - complaint: status=Resolved IMPLIQUE resolvedAt non null                   ║
║  - complaint: isArchived=true IMPLIQUE status=Resolved                       ║
║  - id inconnu = no-op silencieux (retourne None)                             ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import logging
from typing import Any, Dict, Optional

from config import now_ms
from models import ComplaintStatus, SaleStatus
from services.errors import InvalidTransitionError, WorkflowError
from services.repository import BaseRepository, Collection

logger = logging.getLogger("workflow_state_machine")


# ════════════════════════════════════════════════════════════════════════════
# VALID STATE TRANSITIONS
# ════════════════════════════════════════════════════════════════════════════

VALID_SALE_TRANSITIONS = {
    SaleStatus.PENDING.value: [SaleStatus.VERIFIED.value, SaleStatus.REJECTED.value],
    SaleStatus.VERIFIED.value: [],  # TERMINAL
    SaleStatus.REJECTED.value: [],  # TERMINAL
}

# "In Progress" is recognised but nothing in the current workflow moves a complaint into it
VALID_COMPLAINT_TRANSITIONS = {
    ComplaintStatus.OPEN.value: [ComplaintStatus.RESOLVED.value],
    ComplaintStatus.IN_PROGRESS.value: [ComplaintStatus.RESOLVED.value],
    ComplaintStatus.RESOLVED.value: [],  # TERMINAL
}


def validate_sale_transition(sale_id: str, from_status: str, to_status: str) -> bool:
    """Raise InvalidTransitionError unless from_status -> to_status is allowed"""
    valid_next = VALID_SALE_TRANSITIONS.get(from_status, [])

    if to_status not in valid_next:
        raise InvalidTransitionError(
            f"INVALID TRANSITION: sale {sale_id} cannot go from '{from_status}' to '{to_status}'. "
            f"Valid transitions from '{from_status}': {valid_next}"
        )

    return True


def validate_complaint_transition(complaint_id: str, from_status: str, to_status: str) -> bool:
    valid_next = VALID_COMPLAINT_TRANSITIONS.get(from_status, [])

    if to_status not in valid_next:
        raise InvalidTransitionError(
            f"INVALID TRANSITION: complaint {complaint_id} cannot go from '{from_status}' to '{to_status}'. "
            f"Valid transitions from '{from_status}': {valid_next}"
        )

    return True


def check_resolved_invariants(complaint: Dict[str, Any]) -> bool:
    """A Resolved complaint must carry notes and a resolution time"""
    if not (complaint.get("resolutionNotes") or "").strip():
        raise WorkflowError("INVARIANT VIOLATION: status=Resolved requires resolutionNotes")

    if not complaint.get("resolvedAt"):
        raise WorkflowError("INVARIANT VIOLATION: status=Resolved requires resolvedAt")

    return True


# ════════════════════════════════════════════════════════════════════════════
# SALES
# ════════════════════════════════════════════════════════════════════════════

async def transition_sale(
    repo: BaseRepository,
    sale_id: str,
    target: str
) -> Optional[Dict[str, Any]]:
    """
    🔒 SEULE FONCTION AUTORISÉE pour changer le status d'une vente

    Args:
        repo: store
        sale_id: ID de la vente
        target: Verified ou Rejected

    Returns:
        La vente mise à jour, ou None si l'id est inconnu

    Raises:
        InvalidTransitionError si la vente est déjà dans un état terminal
    """
    target = SaleStatus(target).value

    sale = await repo.get(Collection.SALES, sale_id)
    if not sale:
        logger.info(f"[STATE_MACHINE] Sale {sale_id} not found, nothing to do")
        return None

    current_status = sale.get("status", SaleStatus.PENDING.value)
    validate_sale_transition(sale_id, current_status, target)

    updated = {**sale, "status": target}
    await repo.update(Collection.SALES, updated)

    logger.info(f"[STATE_MACHINE] Sale {sale_id} {current_status} -> {target}")
    return updated


# ════════════════════════════════════════════════════════════════════════════
# COMPLAINTS
# ════════════════════════════════════════════════════════════════════════════

async def resolve_complaint(
    repo: BaseRepository,
    complaint_id: str,
    resolution_notes: str,
    resolved_at: Optional[int] = None
) -> Optional[Dict[str, Any]]:
    """
    🔒 Passe une plainte en Resolved

    Les notes sont fournies par l'appelant, resolvedAt est posé ici.
    """
    if not resolution_notes or not resolution_notes.strip():
        raise WorkflowError("Resolution notes are required to resolve a complaint")

    complaint = await repo.get(Collection.COMPLAINTS, complaint_id)
    if not complaint:
        logger.info(f"[STATE_MACHINE] Complaint {complaint_id} not found, nothing to do")
        return None

    current_status = complaint.get("status", ComplaintStatus.OPEN.value)
    validate_complaint_transition(complaint_id, current_status, ComplaintStatus.RESOLVED.value)

    updated = {
        **complaint,
        "status": ComplaintStatus.RESOLVED.value,
        "resolutionNotes": resolution_notes,
        "resolvedAt": resolved_at or now_ms(),
    }
    check_resolved_invariants(updated)

    await repo.update(Collection.COMPLAINTS, updated)

    logger.info(f"[STATE_MACHINE] Complaint {complaint_id} {current_status} -> Resolved")
    return updated


async def archive_complaint(repo: BaseRepository, complaint_id: str) -> Optional[Dict[str, Any]]:
    """
    🔒 Masque une plainte Resolved des vues actives (reste dans les exports)
    """
    complaint = await repo.get(Collection.COMPLAINTS, complaint_id)
    if not complaint:
        logger.info(f"[STATE_MACHINE] Complaint {complaint_id} not found, nothing to do")
        return None

    if complaint.get("status") != ComplaintStatus.RESOLVED.value:
        raise InvalidTransitionError(
            f"Cannot archive complaint {complaint_id} from status '{complaint.get('status')}' "
            f"(only Resolved complaints can be archived)"
        )

    if complaint.get("isArchived"):
        return complaint

    updated = {**complaint, "isArchived": True}
    await repo.update(Collection.COMPLAINTS, updated)

    logger.info(f"[STATE_MACHINE] Complaint {complaint_id} archived")
    return updated


async def archive_resolved(repo: BaseRepository) -> int:
    """
    🔒 "Clear resolved": archive toutes les plaintes Resolved encore visibles

    Returns:
        Nombre de plaintes archivées
    """
    complaints = await repo.list(Collection.COMPLAINTS)

    archived = 0
    for complaint in complaints:
        if complaint.get("status") == ComplaintStatus.RESOLVED.value and not complaint.get("isArchived"):
            complaint["isArchived"] = True
            archived += 1

    if archived:
        await repo.replace(Collection.COMPLAINTS, complaints)

    logger.info(f"[STATE_MACHINE_BATCH] {archived} complaints archived")
    return archived
