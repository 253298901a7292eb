"""Strapi client functionality shared by the CLI and the sync engine."""

from .async_utils import run_sync
from .client import CMSClient, CMSError, StrapiClient

__all__ = ["CMSClient", "CMSError", "StrapiClient", "run_sync"]
