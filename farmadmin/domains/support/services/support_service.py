"""Support ticket queries and admin-side ticket handling.

Reads and writes go through the admin data backend, so database failures
surface as ``DataBackendError``. Every write is audited.
"""

from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime
from typing import Any, Dict, List, Optional

from farmadmin.core.users.models import User
from farmadmin.domains.admin.services.admin_data_service import data_backend, log_admin_action
from farmadmin.domains.farms.models.farm_models import Farm
from farmadmin.domains.support.mappers import map_ticket
from farmadmin.domains.support.models import TICKET_PRIORITIES, TICKET_STATUSES, SupportTicket
from farmadmin.domains.support.schemas.support_schemas import TicketRecord
from farmadmin.extensions import db

logger = logging.getLogger(__name__)

_NUMBER_ALPHABET = string.ascii_uppercase + string.digits
EDITABLE_FIELDS = ("subject", "description", "priority", "status", "assigned_to")


def _ticket_number(now: datetime) -> str:
    suffix = "".join(secrets.choice(_NUMBER_ALPHABET) for _ in range(6))
    return f"TK-{now.year}-{suffix}"


def get_all_tickets(
    status: Optional[str] = None, priority: Optional[str] = None
) -> List[TicketRecord]:
    """Tickets newest first, optionally filtered by status and priority."""
    query = SupportTicket.query.order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc())
    if status:
        query = query.filter(SupportTicket.status == status)
    if priority:
        query = query.filter(SupportTicket.priority == priority)
    with data_backend("get_all_tickets"):
        return [map_ticket(t) for t in query.all()]


def get_ticket_details(ticket_id: int) -> Optional[TicketRecord]:
    with data_backend("get_ticket_details"):
        ticket = db.session.get(SupportTicket, ticket_id)
        return map_ticket(ticket) if ticket else None


def create_ticket(
    subject: str,
    description: str,
    *,
    priority: str = "medium",
    user_id: Optional[int] = None,
    farm_id: Optional[int] = None,
    actor_id: Optional[int],
) -> TicketRecord:
    """Open a ticket assigned to the creating admin.

    Raises ValueError for an unknown priority, user or farm.
    """
    if priority not in TICKET_PRIORITIES:
        raise ValueError("invalid_priority")
    with data_backend("create_ticket"):
        if user_id is not None and db.session.get(User, user_id) is None:
            raise ValueError("unknown_user")
        if farm_id is not None and db.session.get(Farm, farm_id) is None:
            raise ValueError("unknown_farm")
        ticket = SupportTicket(
            ticket_number=_ticket_number(datetime.utcnow()),
            subject=subject,
            description=description,
            priority=priority,
            status="open",
            user_id=user_id,
            farm_id=farm_id,
            assigned_to=actor_id,
        )
        db.session.add(ticket)
        db.session.flush()
        log_admin_action(
            actor_id,
            "create_ticket",
            "support_ticket",
            ticket.id,
            farm_id=farm_id,
            new_values={"ticket_number": ticket.ticket_number, "status": "open"},
        )
        db.session.commit()
        record = map_ticket(ticket)
    logger.info("Ticket %s opened by uid=%s", record.ticket_number, actor_id)
    return record


def update_ticket(
    ticket_id: int, changes: Dict[str, Any], *, actor_id: Optional[int]
) -> Optional[TicketRecord]:
    """Apply ``changes`` to a ticket. None when the ticket does not exist.

    Raises ValueError for a field that is not editable or an unknown value.
    """
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"not_editable: {sorted(unknown)}")
    if changes.get("status") is not None and changes["status"] not in TICKET_STATUSES:
        raise ValueError("invalid_status")
    if changes.get("priority") is not None and changes["priority"] not in TICKET_PRIORITIES:
        raise ValueError("invalid_priority")
    with data_backend("update_ticket"):
        ticket = db.session.get(SupportTicket, ticket_id)
        if ticket is None:
            return None
        assignee = changes.get("assigned_to")
        if assignee is not None and db.session.get(User, assignee) is None:
            raise ValueError("unknown_assignee")
        old_values = {key: getattr(ticket, key) for key in changes}
        for key, value in changes.items():
            setattr(ticket, key, value)
        log_admin_action(
            actor_id,
            "update_ticket",
            "support_ticket",
            ticket.id,
            farm_id=ticket.farm_id,
            old_values=old_values,
            new_values=dict(changes),
        )
        db.session.commit()
        return map_ticket(ticket)
