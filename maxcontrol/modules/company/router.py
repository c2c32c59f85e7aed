from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from maxcontrol.database.database import get_db
from maxcontrol.modules.auth.dependencies import require_admin, require_any_role
from maxcontrol.modules.company.service import CompanyInfoService
from maxcontrol.modules.company.schemas import CompanyInfoUpdate, CompanyInfoOut

company_router = APIRouter(prefix="/api/settings", tags=["Settings"])


@company_router.get("/company-info", response_model=CompanyInfoOut)
def get_company_info(
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    return CompanyInfoService(db).get_company_info()


@company_router.put("/company-info", response_model=CompanyInfoOut)
def update_company_info(
    data: CompanyInfoUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    """
    Actualizar la información de la empresa

    Las cotizaciones ya emitidas conservan su copia de la información anterior.
    """
    return CompanyInfoService(db).update_company_info(data)
