"""Configuration for the API server."""

import os
from dataclasses import dataclass, field

from testgen import AnalyzerConfig, PipelineLimits


def _csv(value: str) -> list:
    return [item.strip() for item in value.split(',') if item.strip()]


@dataclass
class Settings:
    """Environment-backed settings."""
    browserless_token: str = os.getenv('BROWSERLESS_TOKEN', '')
    browserless_url: str = os.getenv('BROWSERLESS_URL', 'https://production-sfo.browserless.io')
    browser_mode: str = os.getenv('BROWSER_MODE', 'remote')
    extraction_profile: str = os.getenv('EXTRACTION_PROFILE', 'standard')
    request_timeout_s: float = float(os.getenv('REQUEST_TIMEOUT_S', '120'))
    navigation_timeout_ms: int = int(os.getenv('NAVIGATION_TIMEOUT_MS', '30000'))
    log_level: str = os.getenv('LOG_LEVEL', 'INFO')
    port: int = int(os.getenv('PORT', '3001'))
    cors_origins: list = field(default_factory=lambda: _csv(os.getenv('CORS_ORIGINS', '*')))

    @property
    def backend_configured(self) -> bool:
        return self.browser_mode == 'local' or bool(self.browserless_token)

    def analyzer_config(self, strategy: str = 'live', profile: str = '') -> AnalyzerConfig:
        """Build the analyzer config for one request."""
        return AnalyzerConfig(
            browser_mode=self.browser_mode,
            browserless_token=self.browserless_token,
            browserless_url=self.browserless_url,
            strategy=strategy,
            navigation_timeout_ms=self.navigation_timeout_ms,
            request_timeout_s=self.request_timeout_s,
            limits=PipelineLimits.for_profile(profile or self.extraction_profile),
        )


settings = Settings()
