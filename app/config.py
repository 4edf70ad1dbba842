"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Type-safe configuration sourced from .env / environment."""

    # Ollama
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    ollama_timeout_seconds: int = 120
    chat_timeout_seconds: int = 300

    # Project store
    store_backend: str = "json"  # json | psycopg2
    store_json_path: str = "./data/history.json"
    store_fallback_to_json: bool = True
    history_key: str = "mentorStemHistory"

    # PostgreSQL
    pg_host: str = "localhost"
    pg_port: int = 5433
    pg_database: str = "mentor_stem"
    pg_user: str = "postgres"
    pg_password: str = "postgres"
    pg_pool_min: int = 1
    pg_pool_max: int = 5

    # Proposal parsing
    proposal_long_response_threshold: int = 500

    # PDF export
    export_footer_image_url: str = (
        "https://drive.google.com/thumbnail?id=1iSVxFdvc7e6JP4yLGmiwvu0tCwP1o1Tc&sz=w1200"
    )
    export_header_logo_url: str = (
        "https://upload.wikimedia.org/wikipedia/commons/9/9e/Escudo_Universidad_de_C%C3%B3rdoba.png"
    )
    export_image_proxy_url: str = "https://api.allorigins.win/raw?url={url}"
    export_image_timeout_seconds: int = 10

    # Narration
    narration_output_dir: str = "./data/podcast"
    narration_fallback_lang: str = "es-CO"
    narration_pause_seconds: float = 0.25

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
