"""Stub in-app messaging provider."""

from messaging_inapp.providers.stub.client import StubInAppMessagingProvider

__all__ = ["StubInAppMessagingProvider"]
