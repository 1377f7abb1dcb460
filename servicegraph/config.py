from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

_BUNDLED_CORPUS = Path(__file__).parent / "corpus" / "data" / "corpus.json"


class Settings(BaseSettings):
    model_config = {"env_prefix": "SG_", "env_file": ".env", "env_file_encoding": "utf-8"}

    api_title: str = Field(default="UK Services Graph")
    corpus_path: str = Field(default=str(_BUNDLED_CORPUS))
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
