from __future__ import annotations

import logging

from jobboard.config import Settings


logger = logging.getLogger(__name__)

USER_PROFILES = "user_profiles"
JOB_POSTINGS = "job_postings"
ANONYMOUS_SEGMENT = "anonymous_user_id"


def private_collection_path(settings: Settings, identity: str | None, collection: str) -> str:
    if not identity:
        # Access rules are expected to reject this path; it is only reached by a caller bug.
        logger.error("paths.private_collection_without_identity collection=%s", collection)
        identity = ANONYMOUS_SEGMENT
    return f"{settings.data_namespace}/{settings.app_id}/users/{identity}/{collection}"


def profile_document_path(settings: Settings, identity: str | None) -> str:
    return f"{private_collection_path(settings, identity, USER_PROFILES)}/{identity or ANONYMOUS_SEGMENT}"


def job_postings_path(settings: Settings, identity: str | None) -> str:
    return private_collection_path(settings, identity, JOB_POSTINGS)
