from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class FirestoreConfig(BaseModel):
    """
    Options consumed by the bound action methods.

    Unknown keys are kept so newer options pass straight through to the
    actions that read them.
    """
    model_config = ConfigDict(extra="allow")

    auto_populate_profile: bool = False
    dispatch_on_unset_listener: bool = True
    enable_empty_auth_changes: bool = False
    enable_logging: bool = False
    enable_redirect_handling: bool = True
    set_profile_populate_results: bool = False
    update_profile_on_login: bool = True
    user_profile: Any = None

    # Read by the instance assembler and the listener actions
    helpers_namespace: Optional[str] = None
    log_listener_error: bool = True
    allow_multiple_listeners: bool = False


DEFAULT_CONFIG: Dict[str, Any] = FirestoreConfig().model_dump()


def merge_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Extend the default config with caller supplied options (no validation)"""
    return {**DEFAULT_CONFIG, **(overrides or {})}


class Settings(BaseSettings):
    firebase_project_id: str = "firestore-dispatch"
    firebase_service_account_key: str = "serviceAccountKey.json"

    # Instance options loaded from the environment
    helpers_namespace: Optional[str] = None
    enable_logging: bool = False
    allow_multiple_listeners: bool = False

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def firestore_overrides(self) -> Dict[str, Any]:
        """Config overrides for create_firestore_instance"""
        overrides = {
            "enable_logging": self.enable_logging,
            "allow_multiple_listeners": self.allow_multiple_listeners,
        }
        if self.helpers_namespace:
            overrides["helpers_namespace"] = self.helpers_namespace
        return overrides


settings = Settings()
