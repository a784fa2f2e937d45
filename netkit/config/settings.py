from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Sent as User-Agent on every outgoing request that does not set its own.
    user_agent: str = Field("", validation_alias="NETKIT_USER_AGENT")
    notifications_enabled: bool = Field(False, validation_alias="NETKIT_NOTIFICATIONS_ENABLED")

    debug_logging: bool = Field(False, validation_alias="NETKIT_DEBUG_LOGGING")
    log_raw_response_data: bool = Field(False, validation_alias="NETKIT_LOG_RAW_RESPONSE_DATA")

    default_timeout_seconds: float = Field(60.0, validation_alias="NETKIT_DEFAULT_TIMEOUT_SECONDS")
    connect_timeout_seconds: float = Field(10.0, validation_alias="NETKIT_CONNECT_TIMEOUT_SECONDS")
    follow_redirects: bool = Field(True, validation_alias="NETKIT_FOLLOW_REDIRECTS")

    # None waits forever for an endpoint control gate to resume a request.
    control_gate_timeout_seconds: float | None = Field(
        None,
        validation_alias="NETKIT_CONTROL_GATE_TIMEOUT_SECONDS",
    )
    upload_temp_dir: str = Field("", validation_alias="NETKIT_UPLOAD_TEMP_DIR")

    mock_backend: str = Field("none", validation_alias="NETKIT_MOCK_BACKEND")
    mock_enabled: bool = Field(False, validation_alias="NETKIT_MOCK_ENABLED")
    mock_recording: bool = Field(False, validation_alias="NETKIT_MOCK_RECORDING")
    mock_directory: str = Field(".netkit-mocks", validation_alias="NETKIT_MOCK_DIRECTORY")
    mock_base_url: str = Field("", validation_alias="NETKIT_MOCK_BASE_URL")
