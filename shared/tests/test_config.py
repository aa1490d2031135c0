import os
from unittest.mock import patch

from shared.config import FirebaseConfig, RedisConfig


class TestFirebaseConfig:
    def test_defaults(self):
        config = FirebaseConfig()
        assert config.credentials_path is None
        assert config.project_id is None
        assert config.notifications_collection == "notifications"
        assert config.users_collection == "users"

    def test_from_env(self):
        env = {
            "FIREBASE_CREDENTIALS_PATH": "/secrets/sa.json",
            "FIREBASE_PROJECT_ID": "blood-alert-prod",
            "FIREBASE_NOTIFICATIONS_COLLECTION": "notifications_v2",
            "FIREBASE_USERS_COLLECTION": "profiles",
        }
        with patch.dict(os.environ, env, clear=False):
            config = FirebaseConfig()
        assert config.credentials_path == "/secrets/sa.json"
        assert config.project_id == "blood-alert-prod"
        assert config.notifications_collection == "notifications_v2"
        assert config.users_collection == "profiles"


class TestRedisConfig:
    def test_defaults(self):
        config = RedisConfig()
        assert config.host == "localhost"
        assert config.port == 6379
        assert config.db == 0

    def test_from_env(self):
        env = {
            "REDIS_HOST": "redis.prod",
            "REDIS_PORT": "6380",
            "REDIS_DB": "2",
        }
        with patch.dict(os.environ, env, clear=False):
            config = RedisConfig()
        assert config.host == "redis.prod"
        assert config.port == 6380
        assert config.db == 2

    def test_port_validation(self):
        env = {"REDIS_PORT": "not_a_number"}
        with patch.dict(os.environ, env, clear=False):
            try:
                RedisConfig()
                assert False, "Should have raised"
            except Exception:
                pass
