"""Cache key construction for notification data.

All notification cache keys follow the pattern ``{namespace}:{id}`` so the
three namespaces never collide inside one MemoryCache.

Usage:
    from src.infrastructure.cache.cache_keys import NotificationCacheKeys

    keys = NotificationCacheKeys()
    keys.template("welcome-email")        # "template:welcome-email"
    keys.user_preferences("user-123")     # "user_prefs:user-123"
    keys.provider_config("sendgrid")      # "provider_config:sendgrid"
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationCacheKeys:
    """Centralized key construction for NotificationCache.

    Attributes:
        template_namespace: Prefix for rendered/raw templates.
        user_preferences_namespace: Prefix for per-user preferences.
        provider_config_namespace: Prefix for provider configuration.
    """

    template_namespace: str = "template"
    user_preferences_namespace: str = "user_prefs"
    provider_config_namespace: str = "provider_config"

    def template(self, template_id: str) -> str:
        """Template cache key.

        Pattern: template:{template_id}
        """
        return f"{self.template_namespace}:{template_id}"

    def user_preferences(self, user_id: str) -> str:
        """User preferences cache key.

        Pattern: user_prefs:{user_id}
        """
        return f"{self.user_preferences_namespace}:{user_id}"

    def provider_config(self, provider: str) -> str:
        """Provider configuration cache key.

        Pattern: provider_config:{provider}
        """
        return f"{self.provider_config_namespace}:{provider}"
