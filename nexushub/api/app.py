"""FastAPI web application for nexushub."""

import asyncio
import logging
from collections import Counter
from typing import List
from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from nexushub import __version__
from nexushub.api.schemas import (
    AnalyzeLinkRequest,
    AssistantChatRequest,
    AssistantChatResponse,
    AuthResponse,
    CleanupResponse,
    DashboardResponse,
    GeneratedPasswordResponse,
    LoginRequest,
    MessageResponse,
    ParseEventRequest,
    ParseEventResponse,
    RegisterRequest,
    SearchResponse,
    TipResponse,
)
from nexushub.auth.dependencies import get_assistant, get_backend, get_current_user_id
from nexushub.auth.jwt import create_access_token
from nexushub.engine.context import build_assistant_context, upcoming_events
from nexushub.engine.search import global_search
from nexushub.engine.strength import check_strength, generate_password
from nexushub.integrations.openai_client import AssistantClient, LinkAnalysis
from nexushub.models.chat import ChatMessage, ChatRole
from nexushub.models.event import CalendarEvent
from nexushub.models.link import LinkItem
from nexushub.models.password import PasswordItem, PasswordStrength
from nexushub.storage.base import PersistenceBackend, UserData
from nexushub.storage.errors import DuplicateUserError, InvalidCredentialsError, StorageFullError

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="nexushub API",
    description="Personal hub for links, password metadata, calendar events and an AI assistant",
    version=__version__,
)


@app.exception_handler(StorageFullError)
async def storage_full_handler(request: Request, exc: StorageFullError):
    return JSONResponse(status_code=status.HTTP_507_INSUFFICIENT_STORAGE, content={"detail": exc.message})


@app.exception_handler(DuplicateUserError)
async def duplicate_user_handler(request: Request, exc: DuplicateUserError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "User already exists"})


@app.exception_handler(InvalidCredentialsError)
async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "Invalid credentials"})


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# --- Auth ---

@app.post("/api/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, backend: PersistenceBackend = Depends(get_backend)):
    """Create an account and return a bearer token."""
    user = await backend.register(body.email, body.password, body.name)
    return AuthResponse(user=user, token=create_access_token(user))


@app.post("/api/auth/login", response_model=AuthResponse)
async def login(body: LoginRequest, backend: PersistenceBackend = Depends(get_backend)):
    """Exchange email and password for a bearer token."""
    user = await backend.login(body.email, body.password)
    return AuthResponse(user=user, token=create_access_token(user))


# --- Aggregate views ---

@app.get("/api/data", response_model=UserData)
async def load_data(
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    """Links, passwords and events in one call. Also prunes old chat history."""
    return await backend.load_user_data(user_id)


@app.get("/api/dashboard", response_model=DashboardResponse)
async def dashboard(
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    links, passwords, events = await asyncio.gather(
        backend.get_links(user_id),
        backend.get_passwords(user_id),
        backend.get_events(user_id),
    )
    return DashboardResponse(
        upcoming_events=upcoming_events(events),
        weak_passwords=sum(1 for p in passwords if p.strength == PasswordStrength.WEAK),
        links_by_category=dict(Counter(str(link.category) for link in links)),
        total_links=len(links),
        total_passwords=len(passwords),
        open_events=sum(1 for e in events if not e.completed),
    )


@app.get("/api/search", response_model=SearchResponse)
async def search(
    q: str,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    links, passwords, events = await asyncio.gather(
        backend.get_links(user_id),
        backend.get_passwords(user_id),
        backend.get_events(user_id),
    )
    results = global_search(q, links, passwords, events)
    return SearchResponse(results=results, count=len(results))


# --- Links ---

@app.get("/api/links", response_model=List[LinkItem])
async def list_links(
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    return await backend.get_links(user_id)


@app.post("/api/links", response_model=LinkItem, status_code=status.HTTP_201_CREATED)
async def create_link(
    link: LinkItem,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    return await backend.add_link(link.model_copy(update={"user_id": user_id}))


@app.post("/api/links/analyze", response_model=LinkAnalysis)
async def analyze_link(
    body: AnalyzeLinkRequest,
    user_id: str = Depends(get_current_user_id),
    assistant: AssistantClient = Depends(get_assistant),
):
    """Suggest title, category and tags for a URL."""
    return await asyncio.to_thread(assistant.analyze_link, body.url, body.title)


@app.delete("/api/links/{link_id}", response_model=MessageResponse)
async def delete_link(
    link_id: str,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    await backend.delete_link(link_id, user_id)
    return MessageResponse(message="Deleted")


# --- Passwords ---

@app.get("/api/passwords", response_model=List[PasswordItem])
async def list_passwords(
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    return await backend.get_passwords(user_id)


@app.post("/api/passwords", response_model=PasswordItem, status_code=status.HTTP_201_CREATED)
async def create_password(
    entry: PasswordItem,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    """Store a password entry. Strength is always recomputed from the password."""
    rated = entry.model_copy(update={"user_id": user_id, "strength": check_strength(entry.password).value})
    return await backend.add_password(rated)


@app.post("/api/passwords/generate", response_model=GeneratedPasswordResponse)
async def create_generated_password(user_id: str = Depends(get_current_user_id)):
    password = generate_password()
    return GeneratedPasswordResponse(password=password, strength=check_strength(password).value)


@app.delete("/api/passwords/{entry_id}", response_model=MessageResponse)
async def delete_password(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    await backend.delete_password(entry_id, user_id)
    return MessageResponse(message="Deleted")


# --- Events ---

@app.get("/api/events", response_model=List[CalendarEvent])
async def list_events(
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    return await backend.get_events(user_id)


@app.post("/api/events", response_model=CalendarEvent, status_code=status.HTTP_201_CREATED)
async def create_event(
    event: CalendarEvent,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    return await backend.add_event(event.model_copy(update={"user_id": user_id}))


@app.post("/api/events/parse", response_model=ParseEventResponse)
async def parse_event(
    body: ParseEventRequest,
    user_id: str = Depends(get_current_user_id),
    assistant: AssistantClient = Depends(get_assistant),
):
    """Extract event fields from free text. Nothing is stored."""
    parsed = await asyncio.to_thread(assistant.parse_event, body.text)
    return ParseEventResponse(event=parsed)


@app.put("/api/events/{event_id}", response_model=CalendarEvent)
async def update_event(
    event_id: str,
    event: CalendarEvent,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    """Replace an event. Unknown ids are ignored."""
    updated = event.model_copy(update={"id": event_id, "user_id": user_id})
    await backend.update_event(updated)
    return updated


@app.post("/api/events/{event_id}/toggle", response_model=CalendarEvent)
async def toggle_event(
    event_id: str,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    toggled = await backend.toggle_event(user_id, event_id)
    if toggled is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Event {event_id} not found")
    return toggled


@app.delete("/api/events/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    await backend.delete_event(event_id, user_id)
    return MessageResponse(message="Deleted")


# --- Chats & assistant ---

@app.get("/api/chats", response_model=List[ChatMessage])
async def list_chats(
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    """Chat transcript, oldest message first."""
    return await backend.get_chats(user_id)


@app.post("/api/chats", response_model=ChatMessage, status_code=status.HTTP_201_CREATED)
async def create_chat(
    message: ChatMessage,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    return await backend.add_chat(message, user_id)


@app.post("/api/assistant/chat", response_model=AssistantChatResponse)
async def assistant_chat(
    body: AssistantChatRequest,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
    assistant: AssistantClient = Depends(get_assistant),
):
    """Send a message to the assistant and store both sides of the exchange."""
    links, passwords, events = await asyncio.gather(
        backend.get_links(user_id),
        backend.get_passwords(user_id),
        backend.get_events(user_id),
    )
    context = build_assistant_context(links, passwords, events)

    user_message = ChatMessage(role=ChatRole.USER, text=body.message)
    saved = True
    try:
        user_message = await backend.add_chat(user_message, user_id)
    except StorageFullError as e:
        logger.warning(f"Could not save chat message for user {user_id}: {e.message}")
        saved = False

    reply_text = await asyncio.to_thread(assistant.chat, body.message, context)
    reply = ChatMessage(role=ChatRole.MODEL, text=reply_text)
    try:
        reply = await backend.add_chat(reply, user_id)
    except StorageFullError as e:
        logger.warning(f"Could not save assistant reply for user {user_id}: {e.message}")
        saved = False

    return AssistantChatResponse(message=user_message, reply=reply, saved=saved)


@app.get("/api/tips", response_model=TipResponse)
async def productivity_tip(assistant: AssistantClient = Depends(get_assistant)):
    tip = await asyncio.to_thread(assistant.productivity_tip)
    return TipResponse(tip=tip)


@app.post("/api/storage/cleanup", response_model=CleanupResponse)
async def cleanup_storage(
    force_all: bool = False,
    user_id: str = Depends(get_current_user_id),
    backend: PersistenceBackend = Depends(get_backend),
):
    """Prune chat history by the retention policy, or wipe it with force_all=true."""
    removed = await backend.cleanup_storage(user_id, force_all=force_all)
    return CleanupResponse(removed=removed)
