"""Nooklet API routes (mounted under /api/v1)."""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from nooklet.dependencies import IdentityDep, NookletServiceDep, ProfileServiceDep
from nooklet.errors import InvalidPublishedAtError, NookletNotFoundError, ProfileNotFoundError
from nooklet.models import (
    AuthIdentity,
    CreateNookletPayload,
    NookletCreate,
    NookletEnvelope,
    NookletUpdate,
    UpdateNookletPayload,
)
from nooklet.services.profiles import ProfileService

router = APIRouter()


def parse_published_at(value: str | None) -> datetime | None:
    """
    Parse an ISO-8601 publishedAt value.

    Missing, empty and blank strings mean "no publish date"; naive values
    are taken as UTC.

    :raises InvalidPublishedAtError: for unparseable non-empty strings
    """
    if value is None:
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    try:
        parsed = datetime.fromisoformat(trimmed)
    except ValueError as exc:
        raise InvalidPublishedAtError() from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


async def _resolve_owner_id(identity: AuthIdentity | None, profiles: ProfileService) -> str:
    if identity is None:
        raise HTTPException(401, "Not authenticated")
    try:
        return await profiles.resolve_owner_id(identity.user_id)
    except ProfileNotFoundError as exc:
        raise HTTPException(400, exc.message) from exc


@router.post("/nooklets", response_model=NookletEnvelope, status_code=201)
async def create_nooklet(
    body: NookletCreate,
    identity: IdentityDep,
    service: NookletServiceDep,
    profiles: ProfileServiceDep,
):
    owner_id = await _resolve_owner_id(identity, profiles)
    try:
        published_at = parse_published_at(body.published_at)
    except InvalidPublishedAtError as exc:
        raise HTTPException(422, exc.message) from exc

    nooklet = await service.create(
        CreateNookletPayload(
            profile_id=owner_id,
            type=body.type,
            content=body.content,
            raw_content=body.raw_content,
            summary=body.summary,
            metadata=body.metadata,
            is_draft=body.is_draft,
            is_favorite=body.is_favorite,
            published_at=published_at,
        )
    )
    return NookletEnvelope(data=nooklet)


@router.put("/nooklets/{nooklet_id}", response_model=NookletEnvelope)
async def update_nooklet(
    nooklet_id: str,
    body: NookletUpdate,
    identity: IdentityDep,
    service: NookletServiceDep,
    profiles: ProfileServiceDep,
):
    owner_id = await _resolve_owner_id(identity, profiles)

    changes = body.model_dump(exclude_unset=True, exclude={"published_at"})
    if "published_at" in body.model_fields_set:
        try:
            changes["published_at"] = parse_published_at(body.published_at)
        except InvalidPublishedAtError as exc:
            raise HTTPException(422, exc.message) from exc

    try:
        nooklet = await service.update(nooklet_id, owner_id, UpdateNookletPayload(**changes))
    except NookletNotFoundError as exc:
        raise HTTPException(404, exc.message) from exc
    return NookletEnvelope(data=nooklet)


@router.delete("/nooklets/{nooklet_id}", response_model=NookletEnvelope)
async def archive_nooklet(
    nooklet_id: str,
    identity: IdentityDep,
    service: NookletServiceDep,
    profiles: ProfileServiceDep,
):
    owner_id = await _resolve_owner_id(identity, profiles)
    try:
        nooklet = await service.archive(nooklet_id, owner_id)
    except NookletNotFoundError as exc:
        raise HTTPException(404, exc.message) from exc
    return NookletEnvelope(data=nooklet)


@router.post("/nooklets/{nooklet_id}/restore", response_model=NookletEnvelope)
async def restore_nooklet(
    nooklet_id: str,
    identity: IdentityDep,
    service: NookletServiceDep,
    profiles: ProfileServiceDep,
):
    owner_id = await _resolve_owner_id(identity, profiles)
    try:
        nooklet = await service.restore(nooklet_id, owner_id)
    except NookletNotFoundError as exc:
        raise HTTPException(404, exc.message) from exc
    return NookletEnvelope(data=nooklet)
