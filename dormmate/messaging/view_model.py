"""State and behaviour of the messages page.

The view-model owns the conversation list, the open thread, the draft and
the typing state of one signed-in user. Storage calls go through the
services; realtime change feeds are consumed by background tasks that fold
events into the state. State is replaced, never mutated, and every
replacement is reported through ``on_change``.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable

from supabase import AsyncClient

from dormmate.core.config import get_settings
from dormmate.core.realtime import ChangeEvent, ChangeType, RealtimeGateway
from dormmate.messaging.formatting import (
    format_last_seen,
    format_message_time,
    get_date_separator,
    group_messages_by_date,
    to_local,
    truncate_text,
)
from dormmate.messaging.typing_indicator import TypingIndicator
from dormmate.schemas.conversation import ConversationSummary
from dormmate.schemas.message import MessageGroup, MessageView, MessagingState
from dormmate.services.conversation_service import ConversationService
from dormmate.services.message_service import MessageService
from dormmate.services.typing_service import TypingService

logger = logging.getLogger(__name__)

# Scroll offset (px from the top of the thread) that triggers loading older history
SCROLL_THRESHOLD = 100

# Length of the last-message preview in the conversation list
PREVIEW_LENGTH = 50


def _created_at(message: dict[str, Any]) -> datetime:
    return to_local(message["created_at"])


class MessagingViewModel:
    """Conversation list, open thread and composer for one user.

    Usage::

        async with MessagingViewModel(client, user_id, on_change=push) as vm:
            await vm.select_conversation(conversation_id)
            await vm.set_draft("hi")
            await vm.send_message()
    """

    def __init__(
        self,
        client: AsyncClient,
        user_id: str,
        *,
        realtime: RealtimeGateway | None = None,
        on_change: Callable[[], None] | None = None,
        page_size: int | None = None,
    ) -> None:
        self.user_id = str(user_id)
        self.conversation_service = ConversationService(client)
        self.message_service = MessageService(client)
        self.typing_service = TypingService(client)
        self.realtime = realtime or RealtimeGateway(client)
        self.on_change = on_change
        self.page_size = page_size or get_settings().message_page_size

        self._conversations: tuple[ConversationSummary, ...] = ()
        self._messages: tuple[dict[str, Any], ...] = ()
        self.selected_conversation_id: str | None = None
        self.search_query = ""
        self.draft = ""
        self.has_more = True
        self.loading = False
        self.loading_more = False

        self.typing: TypingIndicator | None = None
        self._message_listener: asyncio.Task[None] | None = None
        self._conversation_listener: asyncio.Task[None] | None = None

    # -- state accessors ------------------------------------------------

    @property
    def messages(self) -> tuple[dict[str, Any], ...]:
        return self._messages

    @property
    def all_conversations(self) -> tuple[ConversationSummary, ...]:
        return self._conversations

    @property
    def conversations(self) -> list[ConversationSummary]:
        """Conversations whose counterpart name contains the search query."""
        if not self.search_query:
            return list(self._conversations)
        query = self.search_query.lower()
        return [c for c in self._conversations if query in c.user.full_name.lower()]

    @property
    def selected_conversation(self) -> ConversationSummary | None:
        for conversation in self._conversations:
            if str(conversation.id) == self.selected_conversation_id:
                return conversation
        return None

    @property
    def is_other_user_typing(self) -> bool:
        return self.typing is not None and self.typing.is_other_user_typing

    # -- lifecycle ------------------------------------------------------

    async def start(self) -> None:
        """Load the conversation list and follow changes to it."""
        await self.load_conversations()
        if self._conversation_listener is None:
            self._conversation_listener = asyncio.create_task(
                self._listen_conversations(), name=f"conversations:{self.user_id}"
            )

    async def close(self) -> None:
        """Release every subscription held by the view-model."""
        await self._close_thread()
        await self._cancel(self._conversation_listener)
        self._conversation_listener = None

    async def __aenter__(self) -> "MessagingViewModel":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -- conversation list ----------------------------------------------

    async def load_conversations(self) -> None:
        """Reload the conversation list. Failures keep the previous list."""
        self.loading = True
        self._notify()
        try:
            self._conversations = tuple(await self.conversation_service.list_conversations(self.user_id))
        except Exception as e:
            logger.error("Error loading conversations for %s: %s", self.user_id, e)
        finally:
            self.loading = False
            self._notify()

    def set_search_query(self, query: str) -> None:
        self.search_query = query
        self._notify()

    # -- thread ---------------------------------------------------------

    async def select_conversation(self, conversation_id: str) -> None:
        """Open a conversation the user takes part in.

        Replaces the previous thread, its subscription and typing state,
        loads the newest page of history and marks it read.

        Raises:
            NotFoundError: If the conversation does not exist.
            AuthorizationError: If the user is not a participant.
        """
        conversation_id = str(conversation_id)
        await self.conversation_service.require_participant(conversation_id, self.user_id)
        await self._close_thread()

        self.selected_conversation_id = conversation_id
        self._messages = ()
        self.has_more = True
        self.draft = ""

        self.typing = TypingIndicator(
            self.typing_service,
            self.realtime,
            conversation_id,
            self.user_id,
            on_change=lambda _typing: self._notify(),
        )
        self.typing.start()
        self._message_listener = asyncio.create_task(
            self._listen_messages(conversation_id), name=f"messages:{conversation_id}"
        )

        await self._load_messages(initial=True)
        await self.mark_as_read()

    async def load_older_messages(self) -> None:
        """Prepend the page of history before the oldest loaded message."""
        if not self.selected_conversation_id or self.loading_more or not self.has_more or not self._messages:
            return
        await self._load_messages(initial=False)

    async def handle_scroll(self, offset: float) -> None:
        """React to the thread's scroll offset from the top."""
        if offset < SCROLL_THRESHOLD:
            await self.load_older_messages()

    async def _load_messages(self, initial: bool) -> None:
        conversation_id = self.selected_conversation_id
        if conversation_id is None:
            return

        before = None if initial else self._messages[0]["created_at"]
        if not initial:
            self.loading_more = True
            self._notify()

        try:
            page, has_more = await self.message_service.get_page(conversation_id, before, self.page_size)
        except Exception as e:
            logger.error("Error loading messages for %s: %s", conversation_id, e)
            self.loading_more = False
            self._notify()
            return

        self.loading_more = False
        if conversation_id != self.selected_conversation_id:
            return

        if initial:
            # Keep realtime inserts that arrived while the page was loading
            known = {m["id"] for m in page}
            self._messages = tuple(page) + tuple(m for m in self._messages if m["id"] not in known)
        else:
            self._messages = tuple(page) + self._messages
        self.has_more = has_more
        self._notify()

    async def mark_as_read(self) -> None:
        """Mark the open conversation read and zero its local unread count."""
        conversation_id = self.selected_conversation_id
        if conversation_id is None:
            return
        try:
            await self.conversation_service.mark_as_read(conversation_id, self.user_id)
        except Exception as e:
            logger.error("Error marking %s as read: %s", conversation_id, e)
            return

        self._conversations = tuple(
            c.model_copy(update={"unread_count": 0}) if str(c.id) == conversation_id else c
            for c in self._conversations
        )
        self._notify()

    # -- composer -------------------------------------------------------

    async def set_draft(self, text: str) -> None:
        """Update the draft and announce typing while it is non-blank."""
        self.draft = text
        self._notify()
        if self.typing is not None:
            await self.typing.set_typing(bool(text.strip()))

    async def send_message(self) -> bool:
        """Send the trimmed draft.

        The draft is cleared before the write. If the write fails the
        original text is put back and nothing is appended.

        Returns:
            bool: Whether a message was stored.
        """
        conversation_id = self.selected_conversation_id
        content = self.draft.strip()
        if conversation_id is None or not content:
            return False

        self.draft = ""
        self._notify()
        if self.typing is not None:
            await self.typing.set_typing(False)

        try:
            row = await self.message_service.send_message(conversation_id, self.user_id, content)
        except Exception as e:
            logger.error("Error sending message to %s: %s", conversation_id, e)
            self.draft = content
            self._notify()
            return False

        if conversation_id == self.selected_conversation_id:
            self._append_message(row)
            self._notify()
        return True

    # -- realtime -------------------------------------------------------

    async def handle_message_event(self, event: ChangeEvent) -> None:
        """Fold a change to the open thread's messages into the state."""
        row = event.new
        if not row or row.get("conversation_id") != self.selected_conversation_id:
            return

        if event.type is ChangeType.INSERT:
            self._append_message(row)
            self._notify()
            if row.get("sender_id") != self.user_id:
                await self.mark_as_read()
        elif event.type is ChangeType.UPDATE:
            self._messages = tuple(row if m["id"] == row["id"] else m for m in self._messages)
            self._notify()

    def _append_message(self, row: dict[str, Any]) -> None:
        if any(m["id"] == row["id"] for m in self._messages):
            return
        self._messages = tuple(sorted((*self._messages, row), key=_created_at))

    async def _listen_messages(self, conversation_id: str) -> None:
        subscription = self.realtime.subscribe(
            f"messages:{conversation_id}",
            "messages",
            events=(ChangeType.INSERT.value, ChangeType.UPDATE.value),
            filter=f"conversation_id=eq.{conversation_id}",
        )
        try:
            async with subscription as events:
                async for event in events:
                    await self.handle_message_event(event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Message subscription for %s failed: %s", conversation_id, e)

    async def _listen_conversations(self) -> None:
        subscription = self.realtime.subscribe(f"conversations:{self.user_id}", "conversations")
        try:
            async with subscription as events:
                async for _event in events:
                    await self.load_conversations()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Conversation subscription for %s failed: %s", self.user_id, e)

    async def _close_thread(self) -> None:
        await self._cancel(self._message_listener)
        self._message_listener = None
        typing, self.typing = self.typing, None
        if typing is not None:
            await typing.set_typing(False)
            await typing.close()

    @staticmethod
    async def _cancel(task: asyncio.Task[None] | None) -> None:
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    # -- rendering ------------------------------------------------------

    def other_user_status(self, now: datetime | None = None) -> str | None:
        """Online label or last-seen label of the open conversation's counterpart."""
        conversation = self.selected_conversation
        if conversation is None:
            return None
        if conversation.user.is_online:
            return "В сети"
        if conversation.user.last_seen is None:
            return None
        return f"Был(а) {format_last_seen(conversation.user.last_seen, now)}"

    def snapshot(self, now: datetime | None = None) -> MessagingState:
        """Render the current state with labels relative to ``now``."""
        groups = [
            MessageGroup(
                date_label=get_date_separator(group["date"], now),
                messages=[
                    MessageView.model_validate(
                        {
                            **message,
                            "time_label": format_message_time(message["created_at"], now),
                            "is_mine": message["sender_id"] == self.user_id,
                        }
                    )
                    for message in group["messages"]
                ],
            )
            for group in group_messages_by_date(self._messages)
        ]

        conversations = [
            c.model_copy(update={"last_message": truncate_text(c.last_message, PREVIEW_LENGTH)})
            if c.last_message
            else c
            for c in self.conversations
        ]

        return MessagingState(
            conversations=conversations,
            search_query=self.search_query,
            selected_conversation_id=self.selected_conversation_id,
            groups=groups,
            draft=self.draft,
            has_more=self.has_more,
            loading=self.loading,
            loading_more=self.loading_more,
            is_other_user_typing=self.is_other_user_typing,
            other_user_status=self.other_user_status(now),
        )
