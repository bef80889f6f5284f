"""
Realtime app: live subscriptions over a single WebSocket.

This app handles:
- JWT authentication of WebSocket connections (middleware.py)
- Parsing and authorizing subscription queries (snapshots.py)
- Pushing full snapshots when a subscribed topic changes (consumers.py)
- Publishing topic changes after commit, with Celery redelivery (publisher.py)

Related apps:
    - authentication: profile snapshots, last seen
    - social: friends and friend request snapshots
    - chat: conversation list, message tail and recent window
"""
