"""Pydantic schemas for API."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from testgen import AnalysisRequest, LoginConfig, resolve_target_urls


class LoginConfigPayload(BaseModel):
    """Login settings. Credentials may use either naming convention."""
    model_config = ConfigDict(populate_by_name=True)

    login_url: str = Field('', alias='loginUrl')
    username: str = ''
    password: str = ''
    test_username: str = Field('', alias='testUsername')
    test_password: str = Field('', alias='testPassword')
    username_field: str = Field('', alias='usernameField')
    password_field: str = Field('', alias='passwordField')
    submit_selector: str = Field('', alias='submitSelector')

    def to_login_config(self) -> Optional[LoginConfig]:
        return LoginConfig.from_payload(self.model_dump(by_alias=True))


class AnalyzeRequest(BaseModel):
    """Analysis request payload."""
    model_config = ConfigDict(populate_by_name=True)

    url: str = ''
    urls: list[str] = Field(default_factory=list)
    pages: list[str] = Field(default_factory=list)
    login_config: Optional[LoginConfigPayload] = Field(None, alias='loginConfig')
    strategy: Literal['live', 'static'] = 'live'
    profile: Optional[Literal['compact', 'standard', 'extended']] = None

    def to_analysis_request(self) -> AnalysisRequest:
        """Resolve target URLs (raises InputError) and the login config."""
        urls = resolve_target_urls(self.url, self.urls, self.pages)
        login = self.login_config.to_login_config() if self.login_config else None
        return AnalysisRequest(urls=urls, login=login)
