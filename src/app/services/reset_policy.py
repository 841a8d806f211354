from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field


class ResetPolicy(BaseModel):
    """Tunables of the password reset flow, built once at startup."""

    model_config = ConfigDict(frozen=True)

    app_name: str = "Feedback Talent"
    pin_length: int = Field(default=6, ge=4, le=12)
    pin_ttl_minutes: int = Field(default=10, gt=0)
    reset_token_ttl_minutes: int = Field(default=15, gt=0)
    max_attempts: int = Field(default=5, gt=0)
    resend_cooldown_seconds: int = Field(default=60, ge=0)
    min_password_length: int = Field(default=8, ge=1)
    pin_hash_rounds: int = Field(default=10, ge=4, le=16)

    @property
    def pin_ttl(self) -> timedelta:
        return timedelta(minutes=self.pin_ttl_minutes)

    @property
    def reset_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.reset_token_ttl_minutes)

    @classmethod
    def from_config(cls, config) -> "ResetPolicy":
        return cls(
            app_name=config.APP_NAME,
            pin_length=config.RESET_PIN_LENGTH,
            pin_ttl_minutes=config.RESET_PIN_TTL_MIN,
            reset_token_ttl_minutes=config.RESET_TOKEN_TTL_MIN,
            max_attempts=config.RESET_MAX_ATTEMPTS,
            resend_cooldown_seconds=config.RESET_RESEND_COOLDOWN_SECONDS,
            min_password_length=config.RESET_MIN_PASSWORD_LENGTH,
        )
