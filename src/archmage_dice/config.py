from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ARCHMAGE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Deepest parenthesis nesting the parser will follow before giving up.
    max_nesting_depth: int = 32
    # Largest dice count accepted in a single term, e.g. 1000d6.
    max_dice_count: int = 1000
    # Longest digit run accepted for a number, dice count or dice sides.
    # Must stay below the interpreter's int() string limit (4300 by default).
    max_number_digits: int = 1000

    # Server logs go to stderr; stdout is the MCP transport.
    log_level: str = "INFO"


settings = Settings()
