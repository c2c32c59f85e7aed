from pydantic import BaseModel, Field, field_validator
from typing import Optional

from maxcontrol.common.validators import validate_cnpj, format_cnpj


class CompanyInfoBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Nombre comercial")
    logo_url_dark_bg: Optional[str] = Field(None, description="Logo para fondos oscuros")
    logo_url_light_bg: Optional[str] = Field(None, description="Logo para fondos claros")
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=100)
    cnpj: Optional[str] = Field(None, max_length=20)
    instagram: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=200)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if v and v.strip():
            if '@' not in v or '.' not in v:
                raise ValueError('Email debe tener formato válido')
        return v

    @field_validator('cnpj')
    @classmethod
    def validate_cnpj_format(cls, v):
        if v and v.strip():
            if not validate_cnpj(v):
                raise ValueError('CNPJ inválido')
            return format_cnpj(v)
        return v


class CompanyInfoUpdate(CompanyInfoBase):
    pass


class CompanyInfoOut(CompanyInfoBase):
    id: int

    class Config:
        from_attributes = True
