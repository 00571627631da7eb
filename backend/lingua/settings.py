from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field

class Settings(BaseSettings):
	# Server-wide fallback key; a key saved by the student always wins
	gemini_api_key: str | None = Field(default=None, validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"))
	# Google AI Studio (Generative Language API)
	gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta", validation_alias="GEMINI_BASE_URL")
	gemini_timeout_seconds: float = Field(default=60.0, validation_alias="GEMINI_TIMEOUT_SECONDS")
	# Prebuilt voice used for examiner speech
	gemini_tts_voice: str = Field(default="Kore", validation_alias="GEMINI_TTS_VOICE")

	# Auth configuration (students sign in by name)
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	access_token_expire_minutes: int = Field(default=720, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")
	# Comma-separated list of student names; empty admits any name
	student_roster: str = Field(default="", validation_alias="STUDENT_ROSTER")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
	history_retention_days: int = Field(default=90, validation_alias="HISTORY_RETENTION_DAYS")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	def roster(self) -> list[str]:
		return [name.strip() for name in self.student_roster.split(",") if name.strip()]

settings = Settings()
