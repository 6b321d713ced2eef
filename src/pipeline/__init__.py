"""
Shared pacing helpers for the batch pipelines.

The sync, transcription and tagging jobs all process one item at a time:
    - FixedIntervalGate: fixed pause between consecutive items
    - retry_with_backoff: exponential backoff around a flaky call
"""

from .pacing import FixedIntervalGate, SleepFn, retry_with_backoff

__all__ = ["FixedIntervalGate", "SleepFn", "retry_with_backoff"]
