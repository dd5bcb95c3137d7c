"""
In-App Messaging Providers

Provider implementations for different message backends.
Supports Campaigns (HTTP, default) and Stub (development).
"""

from messaging_inapp.providers.base import (
    InAppMessagingProvider,
    ProviderError,
)
from messaging_inapp.providers.campaigns import CampaignsProvider
from messaging_inapp.providers.stub import StubInAppMessagingProvider

__all__ = [
    "InAppMessagingProvider",
    "ProviderError",
    "CampaignsProvider",
    "StubInAppMessagingProvider",
]
