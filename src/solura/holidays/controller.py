from __future__ import annotations

import logging

from flask import Flask

from ..common.datetime_utils import parse_day, today_local
from ..common.responses import error_response, fail, ok, request_data
from ..common.validators import require_fields, require_int
from ..container import Container
from ..core.enums import PaymentType
from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _payment_type(value) -> PaymentType:
        try:
            return PaymentType(str(value or PaymentType.PAID.value).strip().lower())
        except ValueError:
            raise ValidationError("paymentType must be paid or unpaid")

    @app.route("/holidays", methods=["GET"], endpoint="holidays")
    def holidays():
        try:
            data = request_data()
            require_fields(data, ("db", "email"), "Database and email are required")
            services = container.tenant(data["db"])
            emp = services.employee_service.get_by_email(data["email"])
            summary = services.holiday_service.compute_years(employee=emp, today=today_local())
            return ok(**summary)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error computing holidays")
            return fail("Server error", 500)

    @app.route("/holidays/request", methods=["POST"], endpoint="holiday_request")
    def holiday_request():
        try:
            data = request_data()
            require_fields(data, ("db", "email", "startDate", "endDate"), "db, email, startDate and endDate required")
            services = container.tenant(data["db"])
            emp = services.employee_service.get_by_email(data["email"])
            holiday_id = services.holiday_service.request_holiday(
                employee=emp,
                start_date=parse_day(data["startDate"]),
                end_date=parse_day(data["endDate"]),
                payment_type=_payment_type(data.get("paymentType")),
                notes=data.get("notes") or "",
                today=today_local(),
            )
            return ok("Holiday request sent", id=holiday_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error requesting holiday")
            return fail("Server error", 500)

    @app.route("/holidays/pending", methods=["GET"], endpoint="holiday_pending")
    def holiday_pending():
        try:
            data = request_data()
            require_fields(data, ("db",), "Database required")
            services = container.tenant(data["db"])
            return ok(holidays=[h.to_dict() for h in services.holiday_service.pending_holidays()])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching pending holidays")
            return fail("Server error", 500)

    @app.route("/holidays/decide", methods=["POST"], endpoint="holiday_decide")
    def holiday_decide():
        """``actorEmail`` is trusted as given; no session backs it."""
        try:
            data = request_data()
            require_fields(data, ("db", "actorEmail", "id", "decision"), "db, actorEmail, id and decision required")
            decision = str(data["decision"]).strip().lower()
            if decision not in ("approve", "decline"):
                raise ValidationError("decision must be approve or decline")

            services = container.tenant(data["db"])
            holiday = services.holiday_service.decide(
                actor_email=data["actorEmail"],
                holiday_id=require_int(data["id"], "id"),
                approve=decision == "approve",
                reason=data.get("reason") or "",
            )
            return ok(f"Holiday {holiday.status.value}", holiday=holiday.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error deciding holiday")
            return fail("Server error", 500)
