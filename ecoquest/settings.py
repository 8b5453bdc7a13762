import os
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# load .env once at startup
load_dotenv()


class Settings(BaseModel):
    supabase_url: str | None = Field(default=None, alias="SUPABASE_URL")
    supabase_anon_key: str | None = Field(default=None, alias="SUPABASE_ANON_KEY")
    supabase_timeout: float = Field(default=10.0, alias="SUPABASE_TIMEOUT")
    default_daily_co2_target: float = Field(default=10.0, alias="DEFAULT_DAILY_CO2_TARGET")
    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @classmethod
    def from_env(cls):
        origins = os.getenv("CORS_ORIGINS", "*")
        data = {
            "SUPABASE_URL": os.getenv("SUPABASE_URL"),
            "SUPABASE_ANON_KEY": os.getenv("SUPABASE_ANON_KEY"),
            "SUPABASE_TIMEOUT": os.getenv("SUPABASE_TIMEOUT", "10"),
            "DEFAULT_DAILY_CO2_TARGET": os.getenv("DEFAULT_DAILY_CO2_TARGET", "10.0"),
            "GEMINI_API_KEY": os.getenv("GEMINI_API_KEY"),
            "GEMINI_MODEL": os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            "CORS_ORIGINS": [o.strip() for o in origins.split(",") if o.strip()] or ["*"],
            "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO"),
        }
        return cls.model_validate(data)


settings = Settings.from_env()
