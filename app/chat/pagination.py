"""
Pagination classes for the chat API.

MessageCursorPagination pages through a conversation's log oldest first.
The cursor encodes (timestamp, sequence), the log's total order, so pages
stay stable while new messages are appended.
"""

from rest_framework.pagination import CursorPagination


class MessageCursorPagination(CursorPagination):
    """
    Cursor pagination for message history.

    Default: 50 messages per page
    Maximum: 100 messages per page

    Query parameters:
        cursor: Encoded cursor for position
        page_size: Number of messages (optional override)
    """

    page_size = 50
    max_page_size = 100
    page_size_query_param = "page_size"
    ordering = ("timestamp", "sequence")
    cursor_query_param = "cursor"
