"""HTTP API."""

from ph_payroll.api.app import create_app

__all__ = ["create_app"]
