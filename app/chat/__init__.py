"""
Chat app: conversation registry and message log.

This app handles:
- Direct conversation ids (see identifiers.py)
- Group conversations and membership
- Message append, history, recent window and seen flags

Related apps:
    - authentication: User model and display names
    - social: Friendship (required to post in a direct conversation)
    - realtime: Topics published after every write

Usage:
    from chat.identifiers import direct_conversation_id
    from chat.services import MessageService

    cid = direct_conversation_id(alice.pk, bob.pk)
    result = MessageService.send(cid, alice, text="hi")
"""
