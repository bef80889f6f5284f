"""
Social application (relationship graph).

Key components:
    - FriendRequest: Pending one-directional proposal stored under the recipient
    - Friendship: Directional friend edge, always written in pairs
    - FriendshipService: Send, resolve and remove; friend/request listings

Usage:
    from social.services import FriendshipService
"""
