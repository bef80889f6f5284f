"""
Celery tasks for the chat app.

This module defines:
- verify_group_memberships: periodic rebuild of the GroupMember projection
  from the membership log (scheduled in settings.CELERY_BEAT_SCHEDULE)

Related files:
    - services.py: GroupService.rebuild_members
    - models.py: Group, GroupMember, MembershipEvent
"""

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def verify_group_memberships(self) -> int:
    """
    Check every group's member projection against its membership log.

    Returns:
        Number of groups whose projection had to be repaired
    """
    from chat.models import Group
    from chat.services import GroupService

    repaired = 0
    for group in Group.objects.only("pk").iterator():
        changes = GroupService.rebuild_members(group)
        if changes["added"] or changes["removed"]:
            repaired += 1

    if repaired:
        logger.warning(f"Membership verification repaired {repaired} groups")
    else:
        logger.info("Membership verification found no drift")
    return repaired
