from __future__ import annotations

import logging
from datetime import datetime
from functools import wraps

from flask import Flask, abort, jsonify, request

from . import responses
from .commands import Command, InteractionType, parse_command, role_for
from ..container import Container
from ..common.validators import require_in_range
from ..core.constants import (
    DEFAULT_PRODUCTIVITY_DAYS,
    DEFAULT_REPORT_DAYS,
    DEFAULT_TIME_LOG_DAYS,
    MAX_ADJUST_DAYS,
    MAX_SET_BALANCE_DAYS,
    MAX_TIME_LOG_DAYS,
)
from ..core.enums import BalanceOperation, Location, Role
from ..core.exceptions import AuthorizationError, BalanceNotFound, DomainError, ValidationError

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong, please try again later"


def register(app: Flask, container: Container) -> None:
    def current_role(cmd: Command) -> Role:
        return role_for(
            cmd.actor.role_ids,
            admin_role_ids=frozenset(app.config.get("ADMIN_ROLE_IDS") or ()),
            pm_role_ids=frozenset(app.config.get("PM_ROLE_IDS") or ()),
        )

    def admin_required(handler):
        @wraps(handler)
        def wrapper(cmd: Command):
            if current_role(cmd) != Role.ADMIN:
                raise AuthorizationError("Only administrators can use this command")
            return handler(cmd)

        return wrapper

    def pm_required(handler):
        """Allow PMs and administrators."""

        @wraps(handler)
        def wrapper(cmd: Command):
            if current_role(cmd) not in (Role.PM, Role.ADMIN):
                raise AuthorizationError("Only project managers can use this command")
            return handler(cmd)

        return wrapper

    def ensure_target(cmd: Command, option: str) -> tuple[str, str]:
        user_id, name = cmd.user(option)
        container.user_directory.ensure_user(user_id, name)
        return user_id, name

    # --- sessions ---

    def clock_in_at(location: Location | str):
        def handler(cmd: Command):
            result = container.session_service.start_work(cmd.actor.user_id, location)
            return responses.clock_in(cmd.actor.display_name, result)

        return handler

    def clock_in(cmd: Command):
        return clock_in_at(cmd.get("location", Location.OFFICE.value))(cmd)

    def clock_out(cmd: Command):
        ended = container.session_service.end_work(cmd.actor.user_id)
        return responses.clock_out(cmd.actor.display_name, ended)

    def pauza_start(cmd: Command):
        session = container.session_service.start_break(cmd.actor.user_id)
        return responses.break_started(cmd.actor.display_name, session)

    def pauza_end(cmd: Command):
        ended = container.session_service.end_break(cmd.actor.user_id)
        return responses.break_ended(cmd.actor.display_name, ended)

    def off(cmd: Command):
        result = container.session_service.mark_off(cmd.actor.user_id)
        return responses.off(cmd.actor.display_name, result)

    def time_log(cmd: Command):
        days = require_in_range(cmd.integer("days", DEFAULT_TIME_LOG_DAYS), "Days", 1, MAX_TIME_LOG_DAYS)
        entries = container.time_ledger.query(cmd.actor.user_id, days)
        return responses.time_log(entries, days)

    # --- vacations ---

    def vacation_request(cmd: Command):
        start, end = cmd.date("start_date"), cmd.date("end_date")
        days = cmd.required_integer("working_days")
        request_id = container.vacation_service.request_leave(
            user_id=cmd.actor.user_id,
            start_date=start,
            end_date=end,
            requested_days=days,
            reason=cmd.text("reason"),
        )
        return responses.vacation_requested(request_id, days, start, end)

    def sick_leave(cmd: Command):
        start, end = cmd.date("start_date"), cmd.date("end_date")
        days = cmd.required_integer("working_days")
        request_id = container.vacation_service.request_sick_leave(
            user_id=cmd.actor.user_id,
            start_date=start,
            end_date=end,
            requested_days=days,
            reason=cmd.text("reason"),
        )
        return responses.sick_leave(request_id, days, start, end)

    def vacation_status(cmd: Command):
        try:
            balance = container.balance_ledger.get_balance(cmd.actor.user_id)
        except BalanceNotFound:
            balance = None
        recent = container.vacation_service.list_for_user(cmd.actor.user_id)
        return responses.vacation_status(balance, recent)

    def adjust_balance(operation: BalanceOperation):
        @admin_required
        def handler(cmd: Command):
            days = cmd.required_integer("days")
            if operation == BalanceOperation.SET:
                days = require_in_range(days, "Days", 0, MAX_SET_BALANCE_DAYS)
            else:
                days = require_in_range(days, "Days", 1, MAX_ADJUST_DAYS)
            target_id, target_name = ensure_target(cmd, "user")
            balance = container.balance_ledger.adjust(target_id, operation, days, actor_id=cmd.actor.user_id)
            return responses.balance_adjusted(target_name, operation, days, balance)

        return handler

    @pm_required
    def pm_pending(cmd: Command):
        pending = container.vacation_service.list_pending()
        return responses.pending_requests(pending, container.user_directory.display_names())

    @pm_required
    def pm_approve(cmd: Command):
        req = container.vacation_service.pm_approve(
            request_id=cmd.required_integer("request_id"),
            approver_id=cmd.actor.user_id,
        )
        return responses.decision(req)

    @pm_required
    def pm_deny(cmd: Command):
        req = container.vacation_service.pm_reject(
            request_id=cmd.required_integer("request_id"),
            approver_id=cmd.actor.user_id,
            reason=cmd.text("reason"),
        )
        return responses.decision(req)

    @admin_required
    def admin_approve(cmd: Command):
        req = container.vacation_service.admin_approve(
            request_id=cmd.required_integer("request_id"),
            approver_id=cmd.actor.user_id,
        )
        return responses.decision(req)

    @admin_required
    def admin_deny(cmd: Command):
        req = container.vacation_service.admin_reject(
            request_id=cmd.required_integer("request_id"),
            approver_id=cmd.actor.user_id,
            reason=cmd.text("reason"),
        )
        return responses.decision(req)

    # --- reminders ---

    def remind(cmd: Command):
        target_id, target_name = ensure_target(cmd, "user")
        item = container.reminder_service.remind(
            user_id=cmd.actor.user_id,
            target_user_id=target_id,
            message=cmd.text("message"),
            delay_minutes=cmd.required_integer("when"),
        )
        return responses.reminder(cmd.actor.display_name, target_name, item)

    # --- status / schedule / report ---

    def status(cmd: Command):
        kind = str(cmd.required("type"))
        views = container.status_service
        if kind == "online":
            return responses.presence("Online", views.online(), "Nobody is working right now.")
        if kind == "on-break":
            return responses.presence("On break", views.on_break(), "Nobody is on a break.")
        if kind == "on-vacation":
            return responses.vacations("On vacation:", views.on_vacation(), "Nobody is on vacation.")
        if kind == "off-duty":
            return responses.entries("Off duty (24h):", views.off_duty(), "No recent off entries.")
        if kind == "team-overview":
            return responses.team_overview(views.team_overview())
        raise ValidationError(f"Unknown status type {kind!r}")

    def schedule(cmd: Command):
        kind = str(cmd.required("type"))
        views = container.schedule_service
        if kind == "today":
            return responses.day_schedule(views.today())
        if kind == "week":
            return responses.day_counts("Active days, last 7 days:", views.week())
        if kind == "vacation-calendar":
            return responses.vacations("Upcoming vacations:", views.vacation_calendar(), "No upcoming vacations.")
        raise ValidationError(f"Unknown schedule type {kind!r}")

    def report(cmd: Command):
        kind = str(cmd.required("type"))
        views = container.report_service
        if kind == "time-today":
            return responses.entries("Time entries today:", views.time_today(), "No entries today.")
        if kind == "vacation-pending":
            return responses.vacations("Pending vacations:", views.vacation_pending(), "Nothing pending.")
        if kind == "user-activity":
            days = cmd.integer("days", DEFAULT_REPORT_DAYS)
            return responses.activity(views.user_activity(days), days)
        if kind == "monthly-attendance":
            now = datetime.now()
            month = cmd.integer("month", now.month)
            year = cmd.integer("year", now.year)
            rows = views.monthly_attendance(month, year, now=now)
            return responses.day_counts(f"Monthly attendance {month}/{year}:", rows)
        if kind == "productivity":
            days = cmd.integer("days", DEFAULT_PRODUCTIVITY_DAYS)
            return responses.productivity(views.productivity(days), days)
        if kind == "vacation-usage":
            return responses.vacation_usage(views.vacation_usage())
        if kind == "work-hours":
            days = cmd.integer("days", DEFAULT_REPORT_DAYS)
            return responses.work_hours(views.work_hours(days), days)
        raise ValidationError(f"Unknown report type {kind!r}")

    handlers = {
        "clock-in": clock_in,
        "wfh": clock_in_at(Location.HOME),
        "wfo": clock_in_at(Location.OFFICE),
        "clock-out": clock_out,
        "pauza-start": pauza_start,
        "pauza-end": pauza_end,
        "off": off,
        "time-log": time_log,
        "vacation-request": vacation_request,
        "sick-leave": sick_leave,
        "vacation-status": vacation_status,
        "admin-set-balance": adjust_balance(BalanceOperation.SET),
        "admin-add-days": adjust_balance(BalanceOperation.ADD),
        "admin-remove-days": adjust_balance(BalanceOperation.REMOVE),
        "pm-pending": pm_pending,
        "pm-approve": pm_approve,
        "pm-deny": pm_deny,
        "admin-approve": admin_approve,
        "admin-deny": admin_deny,
        "remind": remind,
        "status": status,
        "schedule": schedule,
        "report": report,
    }

    @app.route("/interactions", methods=["POST"], endpoint="interactions")
    def interactions():
        payload = request.get_json(silent=True) or {}
        kind = payload.get("type")

        if kind == InteractionType.PING:
            return jsonify(responses.pong())
        if kind != InteractionType.APPLICATION_COMMAND:
            abort(404)

        name = (payload.get("data") or {}).get("name")
        try:
            cmd = parse_command(payload)
            handler = handlers.get(cmd.name)
            if handler is None:
                return jsonify(responses.error("Unknown command"))

            container.user_directory.ensure_user(cmd.actor.user_id, cmd.actor.display_name)
            return jsonify(handler(cmd))
        except DomainError as e:
            logger.info("command %s rejected: %s", name, e)
            return jsonify(responses.error(str(e)))
        except Exception:
            logger.exception("command %s failed", name)
            return jsonify(responses.error(GENERIC_FAILURE))
