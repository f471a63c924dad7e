from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify

from ..common.datetime_utils import format_day, parse_day, today_local, week_bounds
from ..common.responses import error_response, fail, ok, request_data
from ..common.validators import optional_float, require_fields, require_int
from ..container import Container, TenantServices
from ..core.exceptions import DomainError, ValidationError
from ..scheduling.interval import ShiftInterval
from .model import ShiftMeta

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _tenant(data: dict) -> TenantServices:
        require_fields(data, ("db",), "Database required")
        return container.tenant(data["db"])

    def _employee(services: TenantServices, data: dict):
        return services.employee_service.resolve(
            email=data.get("email"),
            name=data.get("name"),
            last_name=data.get("lastName"),
        )

    def _meta(data: dict) -> ShiftMeta:
        wage = data.get("wage")
        designation = data.get("designation")
        return ShiftMeta(
            wage=None if wage in (None, "") else optional_float(wage, "wage"),
            designation=None if designation in (None, "") else str(designation),
        )

    def _shift_input(data: dict):
        require_fields(data, ("day", "startTime", "endTime"), "day, startTime and endTime required")
        return parse_day(data["day"]), ShiftInterval.parse(str(data["startTime"]), str(data["endTime"]))

    @app.route("/today-shifts", methods=["GET"], endpoint="today_shifts")
    def today_shifts():
        try:
            data = request_data()
            require_fields(data, ("db", "email"), "Database and email are required")
            services = _tenant(data)
            emp = services.employee_service.get_by_email(data["email"])
            today = today_local()
            shifts = services.shift_registry.today_shifts(employee=emp, today=today)
            return ok(
                employee={"name": emp.name, "lastName": emp.last_name, "wage": emp.wage, "designation": emp.designation},
                today=format_day(today),
                shifts=[s.to_dict() for s in shifts],
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching today's shifts")
            return fail("Server error fetching shifts", 500)

    @app.route("/save-shift", methods=["POST"], endpoint="save_shift")
    def save_shift():
        try:
            data = request_data()
            services = _tenant(data)
            emp = _employee(services, data)
            day, interval = _shift_input(data)
            shift_id = services.shift_registry.save_shift(employee=emp, day=day, interval=interval, meta=_meta(data))
            return ok("Shift saved successfully", id=shift_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error saving shift")
            return fail("Server error saving shift", 500)

    @app.route("/add-another-shift", methods=["POST"], endpoint="add_another_shift")
    def add_another_shift():
        try:
            data = request_data()
            services = _tenant(data)
            emp = _employee(services, data)
            day, interval = _shift_input(data)
            shift_id = services.shift_registry.add_shift(employee=emp, day=day, interval=interval, meta=_meta(data))
            return ok("Shift added successfully", id=shift_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error adding shift")
            return fail("Server error adding shift", 500)

    @app.route("/update-shift", methods=["POST"], endpoint="update_shift")
    def update_shift():
        try:
            data = request_data()
            services = _tenant(data)
            require_fields(data, ("id", "startTime", "endTime"), "id, startTime and endTime required")
            interval = ShiftInterval.parse(str(data["startTime"]), str(data["endTime"]))
            shift = services.shift_registry.update_shift(
                shift_id=require_int(data["id"], "id"),
                interval=interval,
                meta=_meta(data),
            )
            return ok("Shift updated successfully", shift=shift.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error updating shift")
            return fail("Server error updating shift", 500)

    @app.route("/delete-shift", methods=["POST"], endpoint="delete_shift")
    def delete_shift():
        try:
            data = request_data()
            services = _tenant(data)
            require_fields(data, ("id",), "id required")
            services.shift_registry.delete_shift(shift_id=require_int(data["id"], "id"))
            return ok("Shift deleted successfully")
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error deleting shift")
            return fail("Server error deleting shift", 500)

    @app.route("/rota", methods=["GET"], endpoint="rota")
    def rota():
        try:
            data = request_data()
            services = _tenant(data)
            emp = _employee(services, data)
            shifts = services.shift_registry.week_rota(employee=emp, today=today_local())
            return jsonify([s.to_dict() for s in shifts])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching current week rota")
            return fail("Server error", 500)

    @app.route("/confirmedRota", methods=["GET"], endpoint="confirmed_rota")
    def confirmed_rota():
        try:
            data = request_data()
            services = _tenant(data)
            emp = _employee(services, data)
            month = data.get("month")
            year = data.get("year")
            shifts = services.shift_registry.confirmed_rota(
                employee=emp,
                month=require_int(month, "month") if month not in (None, "") else None,
                year=require_int(year, "year") if year not in (None, "") else None,
            )
            return jsonify([s.to_dict() for s in shifts])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching confirmed rota")
            return fail("Server error", 500)

    @app.route("/all-rota", methods=["GET"], endpoint="all_rota")
    def all_rota():
        try:
            data = request_data()
            services = _tenant(data)
            start, end = week_bounds(today_local())
            if data.get("start"):
                start = parse_day(data["start"])
                end = start + timedelta(days=6)
            if data.get("end"):
                end = parse_day(data["end"])
            shifts = services.shift_registry.all_rota(start=start, end=end)
            return ok(start=format_day(start), end=format_day(end), shifts=[s.to_dict() for s in shifts])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching rota")
            return fail("Server error", 500)

    @app.route("/shift-requests", methods=["POST"], endpoint="shift_request_create")
    def shift_request_create():
        try:
            data = request_data()
            services = _tenant(data)
            emp = _employee(services, data)
            day, interval = _shift_input(data)
            request_id = services.shift_registry.request_shift(employee=emp, day=day, interval=interval, meta=_meta(data))
            return ok("Shift request sent", id=request_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error creating shift request")
            return fail("Server error", 500)

    @app.route("/shift-requests/pending", methods=["GET"], endpoint="shift_request_pending")
    def shift_request_pending():
        try:
            data = request_data()
            services = _tenant(data)
            return ok(requests=[r.to_dict() for r in services.shift_registry.pending_requests()])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error fetching shift requests")
            return fail("Server error", 500)

    @app.route("/shift-requests/decide", methods=["POST"], endpoint="shift_request_decide")
    def shift_request_decide():
        """``actorEmail`` is trusted as given; no session backs it."""
        try:
            data = request_data()
            services = _tenant(data)
            require_fields(data, ("actorEmail", "id", "decision"), "actorEmail, id and decision required")
            decision = str(data["decision"]).strip().lower()
            request_id = require_int(data["id"], "id")

            if decision == "approve":
                shift_id = services.shift_registry.accept_request(actor_email=data["actorEmail"], request_id=request_id)
                return ok("Shift request accepted", id=shift_id)
            if decision == "decline":
                services.shift_registry.decline_request(actor_email=data["actorEmail"], request_id=request_id)
                return ok("Shift request declined")
            raise ValidationError("decision must be approve or decline")
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error deciding shift request")
            return fail("Server error", 500)
