# =============================================================================
# app/routers/templates.py - Bulk Creation Template Endpoints
# =============================================================================
# Each admin has at most one bulk creation template, read and saved here.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import AdminIdentity, require_admin
from core.models.responses import BulkTemplateResponse
from core.models.template import TemplateSave
from core.services.template_service import TemplateService

router = APIRouter()


@router.get("", response_model=BulkTemplateResponse)
async def get_bulk_template(admin: AdminIdentity = Depends(require_admin)):
    """Get the calling admin's template, or null when none was saved."""
    return {"template": TemplateService.get_template(admin.actor_id)}


@router.post("", response_model=BulkTemplateResponse)
async def save_bulk_template(
    request: TemplateSave,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Save the calling admin's template.

    Replaces the existing template's entries, or creates the template on
    first save.
    """
    return {"template": TemplateService.save_template(admin.actor_id, request)}
