from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # CRM (LeadConnector / HighLevel v2 API)
    crm_api_key: str = ""
    crm_base_url: str = "https://services.leadconnectorhq.com"
    crm_api_version: str = "2021-07-28"
    crm_location_id: str = ""
    crm_pipeline_id: str = ""
    crm_pipeline_stage_id: str = ""
    crm_default_user_id: str = ""
    crm_timeout_seconds: float = 30.0
    # custom field key -> id, for accounts whose API returns fields by id only
    crm_custom_field_ids: dict[str, str] = {}

    # SMTP
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    smtp_use_ssl: bool = False
    email_from_address: str = "hello@barn-gym.com"
    email_from_name: str = "Barn Gym ROI Calculator"
    email_reply_to: str = ""

    # Report rendering
    booking_url: str = "https://calendly.com/barn-gym/consultation"
    chromium_executable_path: Optional[str] = None
    pdf_render_timeout_ms: int = 60_000
    benchmarks_path: Optional[str] = None

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"
