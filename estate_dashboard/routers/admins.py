"""
Admin staff management endpoints.
"""

from fastapi import APIRouter, Depends, Query, status
from uuid import UUID

from estate_dashboard.models.user import Admin
from estate_dashboard.services import AdminService
from estate_dashboard.schemas.common import DataResponse, MessageResponse
from estate_dashboard.schemas.user import AdminPage, AdminResponse, AdminUpdate
from estate_dashboard.schemas.error import get_crud_error_responses, get_common_error_responses
from estate_dashboard.utils.dependencies import get_current_admin, require_permission, get_admin_service


router = APIRouter(prefix="/admins", tags=["Admins"])


@router.get(
    "",
    response_model=DataResponse[AdminPage],
    summary="List admins",
    description="Paginated list of back office accounts. Super admins only.",
    responses=get_common_error_responses()
)
async def list_admins(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_admin: Admin = Depends(require_permission("manage_admins", "manage admins")),
    admin_service: AdminService = Depends(get_admin_service)
):
    return DataResponse(data=await admin_service.list_admins(page=page, limit=limit))


@router.get(
    "/{admin_id}",
    response_model=DataResponse[AdminResponse],
    summary="Get admin",
    description="Admins can view their own profile; super admins can view any.",
    responses=get_common_error_responses()
)
async def get_admin(
    admin_id: UUID,
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    return DataResponse(data=await admin_service.get_admin(admin_id, current_admin))


@router.put(
    "/{admin_id}",
    response_model=DataResponse[AdminResponse],
    summary="Update admin",
    description="Admins can edit their own profile; only super admins can edit others or change roles.",
    responses=get_crud_error_responses()
)
async def update_admin(
    admin_id: UUID,
    admin_data: AdminUpdate,
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    return DataResponse(data=await admin_service.update_admin(admin_id, admin_data, current_admin))


@router.delete(
    "/{admin_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete admin",
    description="Super admins only. An admin cannot delete their own account.",
    responses=get_crud_error_responses()
)
async def delete_admin(
    admin_id: UUID,
    current_admin: Admin = Depends(require_permission("manage_admins", "manage admins")),
    admin_service: AdminService = Depends(get_admin_service)
):
    await admin_service.delete_admin(admin_id, current_admin)
    return MessageResponse(message="Admin deleted successfully")
