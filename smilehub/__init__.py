"""
SmileHub Backend - Dental Practice Patient Management

This package provides the REST API for SmileHub: practice (tenant)
accounts, tenant-scoped patient records, treatment payments and the
financial ledger derived from them.
"""

__version__ = "1.0.0"
__author__ = "SmileHub Team"
