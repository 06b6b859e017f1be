from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Cache volume
    cache_root: str = Field(default="", validation_alias="NSC_CACHE_PATH")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # CI detection, raw values; only "true" switches a flag on
    github_actions: str = Field(default="", validation_alias="GITHUB_ACTIONS")
    gitlab_ci: str = Field(default="", validation_alias="GITLAB_CI")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    @property
    def in_github_actions(self) -> bool:
        return self.github_actions.strip().lower() == "true"

    @property
    def in_gitlab_ci(self) -> bool:
        return self.gitlab_ci.strip().lower() == "true"

    @property
    def is_ci(self) -> bool:
        """Running under GitHub Actions or GitLab CI"""
        return self.in_github_actions or self.in_gitlab_ci
