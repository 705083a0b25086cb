"""ORM row to dataset mappers for support tickets."""

from __future__ import annotations

from farmadmin.domains.support.models import SupportTicket
from farmadmin.domains.support.schemas.support_schemas import TicketRecord


def map_ticket(ticket: SupportTicket) -> TicketRecord:
    return TicketRecord(
        id=ticket.id,
        ticket_number=ticket.ticket_number,
        subject=ticket.subject,
        description=ticket.description,
        priority=ticket.priority,
        status=ticket.status,
        user_id=ticket.user_id,
        requester_email=ticket.requester.email if ticket.requester else None,
        farm_id=ticket.farm_id,
        farm_name=ticket.farm.name if ticket.farm else None,
        assigned_to=ticket.assigned_to,
        created_at=ticket.created_at,
        updated_at=ticket.updated_at,
    )
