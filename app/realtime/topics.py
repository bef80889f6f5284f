"""
Topic names shared by publishers (services) and subscribers (consumer).

A topic is the unit of change notification: when a service commits a
mutation it publishes the topics whose query results changed, and every
subscription listening on one of them recomputes and re-emits its snapshot.

Topics are Channels group names, so they only use ASCII letters, digits,
hyphens, underscores and periods and stay below 100 characters.

Topics:
    profile.<user_id>            Profile of one user
    friends.<user_id>            Friend list of one user
    requests.<user_id>           Pending friend requests received by one user
    conversations.<user_id>      Conversation list (groups + direct) of one user
    conversation.<conversation>  Message log of one conversation (tail + recent)
"""

from __future__ import annotations

from typing import Final

PROFILE: Final[str] = "profile"
FRIENDS: Final[str] = "friends"
REQUESTS: Final[str] = "requests"
CONVERSATIONS: Final[str] = "conversations"
CONVERSATION: Final[str] = "conversation"


def profile_topic(user_id) -> str:
    return f"{PROFILE}.{user_id}"


def friends_topic(user_id) -> str:
    return f"{FRIENDS}.{user_id}"


def requests_topic(user_id) -> str:
    return f"{REQUESTS}.{user_id}"


def conversations_topic(user_id) -> str:
    return f"{CONVERSATIONS}.{user_id}"


def conversation_topic(conversation_id) -> str:
    return f"{CONVERSATION}.{conversation_id}"
