"""Guarded natural-language querying for the IT asset database."""

from assetguard.diagnostics import GuardResult
from assetguard.policy import QueryGuard, run_guard
from assetguard.schema import ASSET_SCHEMA, describe

__all__ = ["ASSET_SCHEMA", "GuardResult", "QueryGuard", "describe", "run_guard"]
