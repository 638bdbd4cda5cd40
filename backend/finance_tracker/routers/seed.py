from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import SeedResponse
from ..services import store
from ..services.seeder import seed_sample_transactions

router = APIRouter(prefix="/seed-data", tags=["meta"])


@router.post("", response_model=SeedResponse, summary="Insert sample transactions into an empty database")
def seed_data(db: Session = Depends(get_db)):
    inserted = seed_sample_transactions(db)
    return {"inserted": inserted, "count": store.count_transactions(db)}
