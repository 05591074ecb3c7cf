"""Messaging session over a WebSocket.

The client sends :class:`SessionAction` frames; the server answers with
``{"type": "state", "state": ...}`` snapshots whenever the session state
changes, and ``{"type": "error", ...}`` frames for rejected actions.
Snapshots are coalesced: many state changes between two sends produce a
single frame with the latest state.
"""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from postgrest.exceptions import APIError as PostgrestAPIError
from pydantic import ValidationError as PydanticValidationError

from dormmate.api.deps import authenticate_token
from dormmate.api.middleware.error_handler import APIError
from dormmate.core.supabase import create_user_client
from dormmate.messaging.presence import PresenceTracker
from dormmate.messaging.view_model import MessagingViewModel
from dormmate.schemas.message import SessionAction
from dormmate.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messages", tags=["messaging"])


class MessagingSession:
    """Binds one WebSocket to a view-model and a presence tracker.

    Only the writer task sends on the socket. Handlers queue error frames
    and mark the state dirty; the writer drains both.
    """

    def __init__(self, websocket: WebSocket, view_model: MessagingViewModel, presence: PresenceTracker) -> None:
        self.websocket = websocket
        self.view_model = view_model
        self.presence = presence
        self._errors: asyncio.Queue[dict] = asyncio.Queue()
        self._state_pending = False
        self._wake = asyncio.Event()
        view_model.on_change = self._mark_dirty

    async def run(self) -> None:
        """Serve the session until the client disconnects."""
        writer = asyncio.create_task(self._write_frames(), name="messaging-writer")
        try:
            async with self.presence, self.view_model:
                self._mark_dirty()
                while True:
                    try:
                        action = SessionAction.model_validate(await self.websocket.receive_json())
                    except (PydanticValidationError, ValueError) as e:
                        self._queue_error("invalid_action", str(e))
                        continue
                    await self.handle(action)
        finally:
            writer.cancel()
            try:
                await writer
            except asyncio.CancelledError:
                pass

    async def handle(self, action: SessionAction) -> None:
        """Apply one client action to the session."""
        vm = self.view_model
        try:
            if action.type == "refresh":
                await vm.load_conversations()
            elif action.type == "select_conversation":
                if action.conversation_id is None:
                    raise ValueError("conversation_id is required")
                await vm.select_conversation(str(action.conversation_id))
            elif action.type == "scroll":
                if action.offset is None:
                    raise ValueError("offset is required")
                await vm.handle_scroll(action.offset)
            elif action.type == "load_older":
                await vm.load_older_messages()
            elif action.type == "draft":
                await vm.set_draft(action.text or "")
            elif action.type == "send":
                sent = await vm.send_message()
                # A restored draft on the selected conversation means the insert failed.
                if not sent and vm.selected_conversation_id is not None and vm.draft.strip():
                    self._queue_error("send_failed", "Message could not be sent")
            elif action.type == "search":
                vm.set_search_query(action.query or "")
            elif action.type == "visibility":
                await self.presence.set_visibility(action.visible is not False)
            elif action.type == "unload":
                await self.presence.handle_unload()
        except APIError as e:
            self._queue_error(e.error_type, e.message)
        except PostgrestAPIError as e:
            logger.error("Storage error handling %s: %s", action.type, e.message)
            self._queue_error("storage_error", e.message or "Storage request failed")
        except ValueError as e:
            self._queue_error("invalid_action", str(e))
        except Exception as e:
            logger.error("Error handling %s: %s", action.type, e)
            self._queue_error("storage_error", "Storage request failed")

    def _mark_dirty(self) -> None:
        self._state_pending = True
        self._wake.set()

    def _queue_error(self, error_type: str, message: str) -> None:
        self._errors.put_nowait({"type": "error", "error": error_type, "message": message})
        self._wake.set()

    async def _write_frames(self) -> None:
        while True:
            await self._wake.wait()
            self._wake.clear()
            frames = []
            while not self._errors.empty():
                frames.append(self._errors.get_nowait())
            if self._state_pending:
                self._state_pending = False
                frames.append({"type": "state", "state": self.view_model.snapshot().model_dump(mode="json")})
            try:
                for frame in frames:
                    await self.websocket.send_json(frame)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.info("Stopped pushing frames: %s", e)
                return


@router.websocket("/ws")
async def messaging_socket(
    websocket: WebSocket,
    token: str = Query(default="", description="Access token"),
) -> None:
    """Open a messaging session for the user owning ``token``."""
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Access token required")
        return

    try:
        user = await authenticate_token(token)
    except HTTPException as e:
        logger.info("Rejected messaging socket: %s", e.detail)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=str(e.detail))
        return

    await websocket.accept()
    client = await create_user_client(user.access_token)
    user_id = str(user.user_id)
    session = MessagingSession(
        websocket,
        MessagingViewModel(client, user_id),
        PresenceTracker(ProfileService(client), user_id),
    )

    logger.info("Messaging session opened for %s", user_id)
    try:
        await session.run()
    except WebSocketDisconnect:
        logger.info("Messaging session closed for %s", user_id)
