from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import check_connection, get_db
from app.schemas.dto import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(db: Session = Depends(get_db)) -> HealthResponse:
    connected = check_connection(db)
    return HealthResponse(
        success=True,
        message="Server is running",
        database="Connected" if connected else "Disconnected",
    )
