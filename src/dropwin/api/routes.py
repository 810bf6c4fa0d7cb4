"""
API routes for the DropWin Mail service.

Stateless provider endpoints used by the web client: address generation,
inbox listing, message reading and the domain list.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from dropwin.api.dependencies import Services, get_services
from dropwin.domain import Message, fallback_address, generate_address, parse_address
from dropwin.domain.errors import GenerationError, MalformedInputError
from dropwin.infrastructure.email.providers.onesecmail import render_html_body

router = APIRouter()


# ============================================================================
# Response Models
# ============================================================================


class GeneratedEmailResponse(BaseModel):
    """A freshly generated address. Not tracked until a mailbox is created."""

    success: bool = True
    email: str
    username: str
    domain: str
    api: str


class MessageSummary(BaseModel):
    """A message as shown in an inbox listing."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    sender: str = Field(..., alias="from")
    subject: str
    date: datetime
    body: str
    textBody: str

    @classmethod
    def from_message(cls, message: Message) -> "MessageSummary":
        return cls(
            id=message.id,
            sender=message.sender,
            subject=message.subject,
            date=message.date,
            body=message.text_body,
            textBody=message.text_body,
        )


class MessagesResponse(BaseModel):
    """Inbox listing. ``error`` is set when the provider could not be reached."""

    success: bool = True
    messages: list[MessageSummary]
    count: int
    error: str | None = None


class MessageDetail(BaseModel):
    """A full message as shown when opened."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    sender: str = Field(..., alias="from")
    subject: str
    date: datetime
    htmlBody: str
    textBody: str
    attachments: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_message(cls, message: Message) -> "MessageDetail":
        return cls(
            id=message.id,
            sender=message.sender,
            subject=message.subject,
            date=message.date,
            htmlBody=render_html_body(message),
            textBody=message.text_body,
            attachments=[dict(a) for a in message.attachments],
        )


class ReadMessageResponse(BaseModel):
    success: bool = True
    message: MessageDetail


class DomainsResponse(BaseModel):
    success: bool = True
    domains: list[str]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    version: str


class DiagnosticResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str
    version: str
    api: str
    pollIntervalMs: int


def parse_message_id(value: str | None) -> int:
    if value is None or not value.strip():
        raise MalformedInputError("Message id is required")
    try:
        message_id = int(value)
    except ValueError:
        raise MalformedInputError(f"Invalid message id: {value!r}") from None
    if message_id < 0:
        raise MalformedInputError(f"Invalid message id: {value!r}")
    return message_id


# ============================================================================
# Health Endpoints
# ============================================================================


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(services: Services = Depends(get_services)) -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=services.settings.app_version,
    )


@router.get("/api/test", response_model=DiagnosticResponse, tags=["health"])
async def diagnostic(services: Services = Depends(get_services)) -> DiagnosticResponse:
    settings = services.settings
    return DiagnosticResponse(
        message=f"{settings.app_name} server is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        api=settings.provider_name,
        pollIntervalMs=settings.poll_interval_ms,
    )


# ============================================================================
# Provider Endpoints
# ============================================================================


@router.get("/api/generate-email", response_model=GeneratedEmailResponse, tags=["mail"])
async def generate_email(services: Services = Depends(get_services)) -> GeneratedEmailResponse:
    """Generate a random address on one of the configured domains."""
    try:
        address = generate_address(services.settings.mail_domains)
    except GenerationError as e:
        logger.error(f"Address generation failed, using default domain: {e}")
        address = fallback_address()

    logger.info(f"Generated address {address.email}")
    return GeneratedEmailResponse(
        email=address.email,
        username=address.username,
        domain=address.domain,
        api=services.settings.provider_name,
    )


@router.get(
    "/api/get-messages",
    response_model=MessagesResponse,
    response_model_exclude_none=True,
    tags=["mail"],
)
async def get_messages(
    email: str | None = Query(default=None),
    services: Services = Depends(get_services),
) -> MessagesResponse:
    """List an inbox. Upstream failures degrade to an empty list."""
    address = parse_address(email)
    listing = await services.provider.list_messages(address)
    messages = [MessageSummary.from_message(m) for m in listing.messages]
    return MessagesResponse(messages=messages, count=len(messages), error=listing.error)


@router.get("/api/read-message", response_model=ReadMessageResponse, tags=["mail"])
async def read_message(
    email: str | None = Query(default=None),
    id: str | None = Query(default=None),
    services: Services = Depends(get_services),
) -> ReadMessageResponse:
    """Read one message. Failures are returned as errors."""
    address = parse_address(email)
    message_id = parse_message_id(id)
    message = await services.provider.read_message(address, message_id)
    return ReadMessageResponse(message=MessageDetail.from_message(message))


@router.get("/api/get-domains", response_model=DomainsResponse, tags=["mail"])
async def get_domains(services: Services = Depends(get_services)) -> DomainsResponse:
    return DomainsResponse(domains=list(services.settings.mail_domains))
