# worldforge/api/v1/templates.py
from fastapi import APIRouter, Depends, status

from worldforge.api.auth import CurrentUser, get_current_user
from worldforge.api.dependencies import WorldAccess, authorize_world, get_service, require_world_role
from worldforge.errors import AuthorizationDenied, NotFound, ValidationFailed
from worldforge.models.enums import ActivityAction, MemberRole
from worldforge.models.template import Template
from worldforge.schemas import (
    OkResponse, TemplateCreate, TemplateEnvelope, TemplateList, TemplateUpdate, fields_to_json,
)
from worldforge.services.activity_service import ActivityService
from worldforge.services.permission_service import PermissionService
from worldforge.services.template_service import TemplateService

world_router = APIRouter()
router = APIRouter()


@world_router.get("/{world_id}/templates", response_model=TemplateList)
async def list_templates(
    access: WorldAccess = Depends(require_world_role(MemberRole.VIEWER, allow_public_read=True)),
    template_service: TemplateService = Depends(get_service(TemplateService)),
):
    """World templates, plus system templates the world has not customized."""
    return {"templates": template_service.get_world_templates(access.world.id)}


@world_router.post("/{world_id}/templates", response_model=TemplateEnvelope, status_code=status.HTTP_201_CREATED)
async def create_template(
    payload: TemplateCreate,
    access: WorldAccess = Depends(require_world_role(MemberRole.EDITOR)),
    template_service: TemplateService = Depends(get_service(TemplateService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    data = payload.model_dump(exclude={"fields"})
    data["fields"] = fields_to_json(payload.fields)
    template = template_service.create_template(access.world.id, data)
    activity.template_created(access.user.id, access.world.id, template.id, template.name)
    return {"template": template}


def _load_template(template_id: str, template_service: TemplateService) -> Template:
    template = template_service.get_template(template_id)
    if not template:
        raise NotFound("Template", template_id)
    return template


@router.put("/{template_id}", response_model=TemplateEnvelope)
async def update_template(
    template_id: str,
    payload: TemplateUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_service(TemplateService)),
    permissions: PermissionService = Depends(get_service(PermissionService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """
    Update a template. For a system template this saves a customized copy
    in the world given by ``worldId`` and leaves the system template as is.
    """
    template = _load_template(template_id, template_service)
    world_id = template.world_id or payload.world_id
    if not world_id:
        raise ValidationFailed.for_field("worldId", "worldId is required to customize a system template")
    authorize_world(permissions, world_id, current_user, MemberRole.EDITOR)

    data = payload.model_dump(exclude_unset=True, exclude={"fields"})
    if payload.fields is not None:
        data["fields"] = fields_to_json(payload.fields)
    data["world_id"] = world_id

    updated = template_service.update_template(template, data)
    activity.log(current_user.id, ActivityAction.UPDATE_TEMPLATE, f'Updated template "{updated.name}"',
                 world_id=world_id, resource_type="template", resource_id=updated.id,
                 resource_name=updated.name)
    return {"template": updated}


@router.delete("/{template_id}", response_model=OkResponse)
async def delete_template(
    template_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_service(TemplateService)),
    permissions: PermissionService = Depends(get_service(PermissionService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    template = _load_template(template_id, template_service)
    if template.is_system:
        raise AuthorizationDenied("System templates cannot be deleted")
    authorize_world(permissions, template.world_id, current_user, MemberRole.EDITOR)

    world_id, name = template.world_id, template.name
    template_service.delete_template(template)
    activity.log(current_user.id, ActivityAction.DELETE_TEMPLATE, f'Deleted template "{name}"',
                 world_id=world_id, resource_type="template", resource_id=template_id, resource_name=name)
    return {"ok": True}
