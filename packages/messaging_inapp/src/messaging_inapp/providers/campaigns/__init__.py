"""Campaigns in-app messaging provider (default)."""

from messaging_inapp.providers.campaigns.client import PROVIDER_NAME, CampaignsProvider
from messaging_inapp.providers.campaigns.rules import match_messages

__all__ = [
    "PROVIDER_NAME",
    "CampaignsProvider",
    "match_messages",
]
