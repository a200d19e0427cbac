"""Pydantic schemas for user settings"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ModuleFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    multi_tools: bool = True
    build: bool = True
    daily_checks: bool = True
    asset_tracker: bool = True
    nico_geo: bool = True
    nexus_opencopy: bool = True


class Providers(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword_data: str = "dataforseo"
    ai: str = "openai"


class CustomApiKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1)
    label: Optional[str] = None


class ApiKeys(BaseModel):
    model_config = ConfigDict(frozen=True)

    custom: List[CustomApiKey] = Field(default_factory=list)


class McpHeader(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: Optional[str] = None
    value: Optional[str] = None
    isSecret: bool = False


class McpServer(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    base_url: Optional[str] = None
    enabled: bool = True
    headers: List[McpHeader] = Field(default_factory=list)


class Mcp(BaseModel):
    model_config = ConfigDict(frozen=True)

    servers: List[McpServer] = Field(default_factory=list)


class Integrations(BaseModel):
    model_config = ConfigDict(frozen=True)

    cloudflare_account_id: str = ""
    cloudflare_zone_id: str = ""
    google_ga_property_id: str = ""
    google_gsc_site: str = ""


class SettingsDocument(BaseModel):
    """Complete effective settings; immutable once built"""
    model_config = ConfigDict(frozen=True, extra="allow")

    modules: ModuleFlags = Field(default_factory=ModuleFlags)
    providers: Providers = Field(default_factory=Providers)
    api_keys: ApiKeys = Field(default_factory=ApiKeys)
    mcp: Mcp = Field(default_factory=Mcp)
    integrations: Integrations = Field(default_factory=Integrations)


class ModuleOverrides(BaseModel):
    multi_tools: Optional[bool] = None
    build: Optional[bool] = None
    daily_checks: Optional[bool] = None
    asset_tracker: Optional[bool] = None
    nico_geo: Optional[bool] = None
    nexus_opencopy: Optional[bool] = None


class ProviderOverrides(BaseModel):
    keyword_data: Optional[str] = None
    ai: Optional[str] = None


class ApiKeyOverrides(BaseModel):
    custom: Optional[List[CustomApiKey]] = None


class McpOverrides(BaseModel):
    servers: Optional[List[McpServer]] = None


class IntegrationOverrides(BaseModel):
    cloudflare_account_id: Optional[str] = None
    cloudflare_zone_id: Optional[str] = None
    google_ga_property_id: Optional[str] = None
    google_gsc_site: Optional[str] = None


class SettingsOverrides(BaseModel):
    """Partial settings as stored; unknown top-level keys are kept"""
    model_config = ConfigDict(extra="allow")

    modules: Optional[ModuleOverrides] = None
    providers: Optional[ProviderOverrides] = None
    api_keys: Optional[ApiKeyOverrides] = None
    mcp: Optional[McpOverrides] = None
    integrations: Optional[IntegrationOverrides] = None


class SettingsUpdate(BaseModel):
    """PUT /settings body: a complete settings document"""
    settings: SettingsDocument


class SettingsResponse(BaseModel):
    settings: SettingsDocument
    updated_at: Optional[str] = None
