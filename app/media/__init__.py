"""
Media app: image storage for profile photos and chat images.

Objects are written at client-chosen paths (the reference) and resolved
to public URLs. See services.py for the rules.
"""
