from typing import List, Optional
from pydantic import BaseModel, Field
from voucher_admin.models.base import PlatformModel


class SocialLink(BaseModel):
    name: str
    url: str


class StoreSocial(BaseModel):
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    tiktok: Optional[str] = None
    youtube: Optional[str] = None
    others: List[SocialLink] = Field(default_factory=list)


class Store(PlatformModel):
    name: str
    owner_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    logo: Optional[str] = None
    social: StoreSocial = Field(default_factory=StoreSocial)
