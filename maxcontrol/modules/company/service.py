from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from typing import Dict, Any, Optional
import logging

from maxcontrol.modules.company.models import CompanyInfo, COMPANY_INFO_ID
from maxcontrol.modules.company.schemas import CompanyInfoUpdate, CompanyInfoOut

logger = logging.getLogger(__name__)


class CompanyInfoService:
    """Servicio para la configuración de la empresa"""

    def __init__(self, db: Session):
        self.db = db

    def find_company_info(self) -> Optional[CompanyInfo]:
        return self.db.query(CompanyInfo).filter(CompanyInfo.id == COMPANY_INFO_ID).first()

    def get_company_info(self) -> CompanyInfo:
        company_info = self.find_company_info()
        if not company_info:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Información de la empresa no encontrada. Configúrela primero."
            )
        return company_info

    def update_company_info(self, data: CompanyInfoUpdate) -> CompanyInfo:
        """Actualizar (o crear la primera vez) la información de la empresa"""
        try:
            company_info = self.find_company_info()
            if not company_info:
                company_info = CompanyInfo(id=COMPANY_INFO_ID, name=data.name)
                self.db.add(company_info)

            for field, value in data.model_dump().items():
                setattr(company_info, field, value)

            self.db.commit()
            self.db.refresh(company_info)
            logger.info("Company info updated")
            return company_info

        except Exception:
            self.db.rollback()
            logger.exception("Error updating company info")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error actualizando la información de la empresa"
            )

    def snapshot(self) -> Dict[str, Any]:
        """
        Copia congelada de la información de la empresa.

        Se guarda dentro de cada cotización al crearla para que los documentos
        históricos no cambien si la configuración cambia después.
        """
        company_info = self.find_company_info()
        if not company_info:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Información de la empresa no configurada"
            )
        return CompanyInfoOut.model_validate(company_info).model_dump(mode="json")
