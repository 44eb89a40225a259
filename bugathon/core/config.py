from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://bugathon:bugathon@db:5432/bugathon"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://scoreboard.example.com,https://api.example.com"
    CORS_ORIGINS: str = "*"

    # Jira Cloud ticket source. JIRA_DOMAIN is the <domain> in
    # https://<domain>.atlassian.net; JIRA_BASE_URL overrides the whole host.
    JIRA_DOMAIN: str = ""
    JIRA_EMAIL: str = ""
    JIRA_API_TOKEN: str = ""
    JIRA_BASE_URL: str = ""
    JIRA_JQL: str = 'labels = "Bugathon"'
    JIRA_MAX_RESULTS: int = 100
    JIRA_TIMEOUT_SECONDS: float = 20.0

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jira_search_url(self) -> str:
        base = self.JIRA_BASE_URL.rstrip("/") or f"https://{self.JIRA_DOMAIN}.atlassian.net"
        return f"{base}/rest/api/3/search/jql"


settings = Settings()
