"""Resource library endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..ai import AIClient, get_ai_client
from ..auth.models import User
from ..auth.service import get_current_active_user
from ..database import get_db
from ..pagination import Paging
from .schemas import ResourceCreate, ResourceUpdate, ResourceResponse, ResourceList
from .service import ResourceService

router = APIRouter(prefix="/resources", tags=["Resources"])


def get_resource_service(
    db: Session = Depends(get_db),
    ai: AIClient = Depends(get_ai_client),
) -> ResourceService:
    """Dependency to get an instance of ResourceService."""
    return ResourceService(db, ai)


@router.get("", response_model=ResourceList)
async def list_resources(
    paging: Paging = Depends(),
    current_user: User = Depends(get_current_active_user),
    service: ResourceService = Depends(get_resource_service),
):
    """List the current user's resources, newest first."""
    return {"items": service.list_resources(current_user, paging.limit, paging.offset)}


@router.post("", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
def create_resource(
    data: ResourceCreate,
    current_user: User = Depends(get_current_active_user),
    service: ResourceService = Depends(get_resource_service),
):
    """Save a text note, or register a hosted PDF/image by URL."""
    return service.create_resource(current_user, data)


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: str,
    current_user: User = Depends(get_current_active_user),
    service: ResourceService = Depends(get_resource_service),
):
    return service.get_resource(current_user, resource_id)


@router.patch("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: str,
    data: ResourceUpdate,
    current_user: User = Depends(get_current_active_user),
    service: ResourceService = Depends(get_resource_service),
):
    """Update title, notes, learning category or tags."""
    return service.update_resource(current_user, resource_id, data)
