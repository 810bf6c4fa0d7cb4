"""Mailbox management endpoints backed by the sync engine."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from dropwin.api.dependencies import Services, get_services
from dropwin.api.routes import MessageSummary
from dropwin.domain import Mailbox

router = APIRouter(prefix="/api", tags=["mailboxes"])


# ============================================================================
# Response Models
# ============================================================================


class MailboxModel(BaseModel):
    address: str
    username: str
    domain: str
    createdAt: datetime
    messageCount: int

    @classmethod
    def from_mailbox(cls, mailbox: Mailbox) -> "MailboxModel":
        return cls(
            address=mailbox.address,
            username=mailbox.username,
            domain=mailbox.domain,
            createdAt=mailbox.created_at,
            messageCount=mailbox.message_count,
        )


class MailboxListResponse(BaseModel):
    success: bool = True
    mailboxes: list[MailboxModel]
    selected: str | None = None
    state: str


class MailboxResponse(BaseModel):
    success: bool = True
    mailbox: MailboxModel


class RemoveResponse(BaseModel):
    success: bool = True
    removed: bool
    selected: str | None = None


class InboxResponse(BaseModel):
    """Messages of the selected mailbox, newest first."""

    success: bool = True
    email: str | None = None
    state: str
    messages: list[MessageSummary]
    count: int


def _inbox(services: Services) -> InboxResponse:
    engine = services.engine
    messages = [MessageSummary.from_message(m) for m in engine.messages]
    return InboxResponse(
        email=engine.selected,
        state=engine.state.value,
        messages=messages,
        count=len(messages),
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/mailboxes", response_model=MailboxListResponse)
async def list_mailboxes(services: Services = Depends(get_services)) -> MailboxListResponse:
    engine = services.engine
    return MailboxListResponse(
        mailboxes=[MailboxModel.from_mailbox(m) for m in services.store.all()],
        selected=engine.selected,
        state=engine.state.value,
    )


@router.post("/mailboxes", response_model=MailboxResponse, status_code=201)
async def create_mailbox(services: Services = Depends(get_services)) -> MailboxResponse:
    """Create a mailbox and start polling it."""
    mailbox = await services.engine.create()
    current = services.store.get(mailbox.address) or mailbox
    return MailboxResponse(mailbox=MailboxModel.from_mailbox(current))


@router.delete("/mailboxes/{address}", response_model=RemoveResponse)
async def delete_mailbox(address: str, services: Services = Depends(get_services)) -> RemoveResponse:
    removed = await services.engine.remove(address)
    return RemoveResponse(removed=removed, selected=services.engine.selected)


@router.post("/mailboxes/deselect", response_model=InboxResponse)
async def deselect_mailbox(services: Services = Depends(get_services)) -> InboxResponse:
    services.engine.deselect()
    return _inbox(services)


@router.post("/mailboxes/{address}/select", response_model=InboxResponse)
async def select_mailbox(address: str, services: Services = Depends(get_services)) -> InboxResponse:
    await services.engine.select(address)
    return _inbox(services)


@router.get("/inbox", response_model=InboxResponse)
async def get_inbox(services: Services = Depends(get_services)) -> InboxResponse:
    return _inbox(services)


@router.post("/inbox/refresh", response_model=InboxResponse)
async def refresh_inbox(services: Services = Depends(get_services)) -> InboxResponse:
    await services.engine.manual_refresh()
    return _inbox(services)
