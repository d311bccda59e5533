"""
Public sell-to-us form endpoint.
"""

from fastapi import APIRouter, Depends, status

from estate_dashboard.services import SellService
from estate_dashboard.schemas.common import DataResponse
from estate_dashboard.schemas.sell import SellSubmissionCreate, SellSubmissionResponse
from estate_dashboard.schemas.error import get_error_responses
from estate_dashboard.utils.dependencies import get_sell_service


router = APIRouter(prefix="/sell", tags=["Sell"])


@router.post(
    "",
    response_model=DataResponse[SellSubmissionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Submit a property for a direct offer",
    responses=get_error_responses(400, 500)
)
async def submit_sell_form(
    submission: SellSubmissionCreate,
    sell_service: SellService = Depends(get_sell_service)
):
    return DataResponse(data=await sell_service.submit(submission))
