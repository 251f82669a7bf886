"""Response cache, API client, notification channel and the sync controller."""
