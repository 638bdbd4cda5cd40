from fastapi import APIRouter

from ..schemas import TRANSACTION_CATEGORIES

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[str], summary="List the fixed transaction categories")
def list_categories():
    return list(TRANSACTION_CATEGORIES)
