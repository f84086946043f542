from fastapi import APIRouter, Body, Depends, Header

from gentlytold.api.deps import Settings, get_moderation_queue, get_settings
from gentlytold.api.schemas import ProvisionAdminRequest, ProvisionAdminResponse
from gentlytold.components.moderation import ModerationQueue, ProvisionAdminInput

router = APIRouter()


@router.post("/admin/{slug}", response_model=ProvisionAdminResponse)
def provision_admin(
    slug: str,
    request_body: ProvisionAdminRequest | None = Body(None),
    x_master_key: str | None = Header(None),
    queue: ModerationQueue = Depends(get_moderation_queue),
    settings: Settings = Depends(get_settings),
) -> ProvisionAdminResponse:
    """(Re)issue the admin token for a memorial. Any previous token stops working."""
    body = request_body or ProvisionAdminRequest()
    result = queue.provision_admin(
        ProvisionAdminInput(
            slug=slug,
            master_key=x_master_key,
            contact_email=body.contact_email,
            contact_name=body.contact_name,
        )
    )
    record = result.record
    review_url = f"{settings.base_url.rstrip('/')}/api/review/{slug}?token={record.token}"
    return ProvisionAdminResponse(
        slug=record.slug,
        token=record.token,
        created_at=record.created_at,
        review_url=review_url,
    )
