"""Journal home view."""

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from nooklet.dependencies import IdentityDep, NookletServiceDep, ProfileServiceDep
from nooklet.errors import ProfileNotFoundError
from nooklet.models import HomeView

router = APIRouter()


@router.get("/home", response_model=HomeView)
async def home(
    identity: IdentityDep,
    service: NookletServiceDep,
    profiles: ProfileServiceDep,
):
    if identity is None:
        return RedirectResponse("/login", status_code=303)

    try:
        owner_id = await profiles.resolve_owner_id(identity.user_id)
    except ProfileNotFoundError:
        # A fresh identity without a profile simply has no entries yet.
        return HomeView(nooklets=[])
    return HomeView(nooklets=await service.list_for_user(owner_id))
