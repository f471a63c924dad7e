"""Solura rota backend.

Multi-tenant restaurant staff backend organized by feature modules (shifts,
holidays, users, notifications) with thin Flask controllers over
service/repository layers. Every tenant has its own MySQL database.
"""
