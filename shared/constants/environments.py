from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    PRODUCTION = "production"
    STAGING = "staging"
    TESTING = "testing"
    DEVELOPMENT = "development"

    @classmethod
    def parse(cls, env: str) -> "Environment":
        """Map a free-form environment name onto a known value (default production)."""
        try:
            return cls(env.strip().lower())
        except ValueError:
            return cls.PRODUCTION

    @classmethod
    def wants_plain_logs(cls, env: str) -> bool:
        """Local runs read logs in a terminal; everything else ships JSON."""
        return cls.parse(env) in (cls.DEVELOPMENT, cls.TESTING)
