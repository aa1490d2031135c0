from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.enums import NotificationType

# FCM rejects multicast requests with more than 500 tokens.
MAX_BATCH_SIZE = 500


class DispatcherConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DISPATCHER_")

    log_level: str = "INFO"
    notification_type: str = NotificationType.BLOOD_REQUEST_RESPONSE
    batch_size: int = Field(default=MAX_BATCH_SIZE, ge=1, le=MAX_BATCH_SIZE)
    topic_prefix: str = "user_"
    dry_run: bool = False
    dedupe_enabled: bool = False
    dedupe_ttl_seconds: int = Field(default=86400, ge=1)


class PayloadConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PUSH_")

    default_title: str = "Blood Donation Request Response"
    default_body_template: str = (
        "{{ responder_name }} has responded to your blood request"
    )
    fallback_responder_name: str = "A donor"
    click_action: str = "FLUTTER_NOTIFICATION_CLICK"
    android_channel_id: str = "blood_donation_high_importance"
    android_icon: str = "ic_stat_blooddrop"
    android_color: str = "#E53935"
    apns_badge: int = 1


class CeleryConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CELERY_")

    broker_url: str = "redis://localhost:6379/0"
    prune_queue: str = "maintenance"
