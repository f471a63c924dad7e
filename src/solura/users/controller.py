from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.responses import error_response, fail, ok, request_data
from ..common.validators import require_fields
from ..container import Container
from ..core.exceptions import DomainError, PersistenceError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "message": "Solura backend is running"})

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        try:
            data = request_data()
            databases = container.auth_service.login(data.get("email") or "", data.get("password") or "")
            return ok("Login successful", email=str(data["email"]).strip(), databases=databases)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Login failed")
            return fail("Server error", 500)

    @app.route("/select-database", methods=["POST"], endpoint="select_database")
    def select_database():
        try:
            data = request_data()
            require_fields(data, ("db_name",), "Database required")
            container.tenant(data["db_name"]).ping()
            return ok(f"Connected to {data['db_name']}")
        except PersistenceError:
            logger.exception("Database selection error")
            return fail("Cannot connect to database", 500)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Database selection error")
            return fail("Cannot connect to database", 500)

    @app.route("/employee", methods=["GET"], endpoint="employee")
    def employee():
        try:
            data = request_data()
            require_fields(data, ("email", "db"), "Email and db required")
            emp = container.tenant(data["db"]).employee_service.get_by_email(data["email"])
            return ok(name=emp.name, lastName=emp.last_name, wage=emp.wage, designation=emp.designation)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching employee")
            return fail("Server error", 500)
