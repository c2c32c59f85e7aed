from maxcontrol.database.database import Base
from maxcontrol.common.mixins import TimestampMixin
from sqlalchemy import Column, Integer, String, Text

# La aplicación maneja una sola empresa: la fila con este ID
COMPANY_INFO_ID = 1


class CompanyInfo(Base, TimestampMixin):
    __tablename__ = "company_info"

    id = Column(Integer, primary_key=True, default=COMPANY_INFO_ID)
    name = Column(String(200), nullable=False)
    logo_url_dark_bg = Column(Text, nullable=True)
    logo_url_light_bg = Column(Text, nullable=True)
    address = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(100), nullable=True)
    cnpj = Column(String(20), nullable=True)
    instagram = Column(String(100), nullable=True)
    website = Column(String(200), nullable=True)
