from registration.shared.retry.base import RetryPolicy
from registration.shared.retry.exponential_backoff_retry import ExponentialBackoffRetry

__all__ = ["RetryPolicy", "ExponentialBackoffRetry"]
