from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # GCP Document AI (OCR processor)
    gcp_project_id: str
    gcp_location: str = "us"
    gcp_processor_id: str

    # Gemini
    gemini_api_key: str
    gemini_model: str = "gemini-1.5-pro"

    # RxNorm
    rxnorm_base_url: str = "https://rxnav.nlm.nih.gov/REST"
    rxnorm_timeout_seconds: float = 3.0
    correction_max_workers: int = 8

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]
    max_image_size_mb: int = 10
    title_date_format: str = "%x"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
