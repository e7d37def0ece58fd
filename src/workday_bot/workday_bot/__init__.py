"""Workday Bot package.

This package is organized by feature modules (users, sessions, ledger,
vacations, ...) with a thin Flask/Discord controller layer and
service/repository layers underneath.
"""
