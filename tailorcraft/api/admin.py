# tailorcraft/api/admin.py
# Админ-панель: сводка и список мастеров.
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tailorcraft.core.security import require_role
from tailorcraft.db.session import get_db
from tailorcraft.models.user import RoleEnum
from tailorcraft.schemas.dashboard import DashboardOut, WorkerOut
from tailorcraft.services.dashboard import dashboard_summary, worker_roster

router = APIRouter(dependencies=[Depends(require_role(RoleEnum.ADMIN))])

@router.get("/dashboard", response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db)):
    return dashboard_summary(db)

@router.get("/workers", response_model=List[WorkerOut])
def workers(db: Session = Depends(get_db)):
    return worker_roster(db)
