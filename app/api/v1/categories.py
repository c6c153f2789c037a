from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.category import CategoryResponse
from app.services.category_service import list_active_categories

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse], status_code=status.HTTP_200_OK)
def list_categories(db: Session = Depends(get_db)) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(category) for category in list_active_categories(db)]
