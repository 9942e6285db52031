"""
Main settings object.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from realmgroups.toolkit.client import AdminClient, BearerAuth


class Settings(BaseSettings):
    server_url: str = "http://localhost:8080"
    admin_path: str = "/admin"

    # Obtained out of band, e.g. from a client credentials grant
    access_token: str | None = None
    verify_tls: bool = True

    default_realm: str = "master"

    model_config = SettingsConfigDict(env_prefix="REALMGROUPS_", env_file=".env")

    @property
    def admin_url(self) -> str:
        return self.server_url.rstrip("/") + self.admin_path

    def client(self) -> AdminClient:
        return AdminClient(
            base_url=self.admin_url,
            auth=BearerAuth(self.access_token) if self.access_token else None,
            verify=self.verify_tls,
        )
