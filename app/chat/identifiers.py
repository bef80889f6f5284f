"""
Conversation identifiers.

A conversation id is either:
    - a group id (the Group UUID as a string), or
    - a direct conversation id: the two user ids sorted lexicographically
      and joined with "_".

Both parties of a direct chat compute the same id independently, so the
derivation below is a wire contract shared with clients and must not change.
UUID strings never contain "_", which keeps the two forms unambiguous.

Usage:
    from chat.identifiers import direct_conversation_id, parse_conversation_id

    cid = direct_conversation_id(alice.pk, bob.pk)
    ref = parse_conversation_id(cid)
    ref.is_direct  # True
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Final

from core.helpers import parse_uuid

DIRECT_SEPARATOR: Final[str] = "_"


def direct_conversation_id(user_a, user_b) -> str:
    """
    Derive the direct conversation id of two users.

    Symmetric: direct_conversation_id(a, b) == direct_conversation_id(b, a).
    """
    return DIRECT_SEPARATOR.join(sorted([str(user_a), str(user_b)]))


def parse_direct_conversation_id(conversation_id) -> tuple[uuid.UUID, uuid.UUID] | None:
    """
    Recover the two user ids of a direct conversation id.

    Returns None when the value is not a canonical direct id (wrong shape,
    malformed ids, unsorted parts, or the same user twice).
    """
    if not isinstance(conversation_id, str):
        return None

    parts = conversation_id.split(DIRECT_SEPARATOR)
    if len(parts) != 2:
        return None

    first, second = parse_uuid(parts[0]), parse_uuid(parts[1])
    if first is None or second is None or first == second:
        return None

    # Only the canonical spelling names the conversation
    if direct_conversation_id(first, second) != conversation_id:
        return None
    return first, second


@dataclass(frozen=True)
class ConversationRef:
    """Parsed conversation id: either a group or a pair of users."""

    conversation_id: str
    group_id: uuid.UUID | None = None
    participants: tuple[uuid.UUID, uuid.UUID] | None = None

    @property
    def is_direct(self) -> bool:
        return self.participants is not None

    @property
    def is_group(self) -> bool:
        return self.group_id is not None

    def other_participant(self, user_id) -> uuid.UUID | None:
        """The other party of a direct conversation (None for groups)."""
        if not self.participants:
            return None
        first, second = self.participants
        return second if first == user_id else first


def parse_conversation_id(conversation_id) -> ConversationRef | None:
    """Classify a conversation id, or return None if it is malformed."""
    participants = parse_direct_conversation_id(conversation_id)
    if participants is not None:
        return ConversationRef(
            conversation_id=conversation_id, participants=participants
        )

    group_id = parse_uuid(conversation_id)
    if group_id is not None:
        return ConversationRef(conversation_id=str(group_id), group_id=group_id)

    return None
