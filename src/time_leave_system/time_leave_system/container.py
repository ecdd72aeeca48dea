from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .aggregation.service import ReportService
from .common.calendar import StaticHolidayCalendar, WorkingCalendar
from .common.locks import EmployeeLocks
from .core.rules import EngineRules
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .notifications.dispatcher import LoggingNotificationDispatcher, NotificationDispatcher
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.rounding.factory import RoundingStrategyFactory
from .time_entries.service import TimeEntryService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    rules: EngineRules
    calendar: WorkingCalendar
    dispatcher: NotificationDispatcher

    employees_repo: EmployeeRepository
    time_entries_repo: TimeEntryRepository
    leave_repo: LeaveRepository

    employee_service: EmployeeService
    time_entry_service: TimeEntryService
    leave_service: LeaveService
    report_service: ReportService


def assemble(
    *,
    employees_repo: EmployeeRepository,
    time_entries_repo: TimeEntryRepository,
    leave_repo: LeaveRepository,
    rules: Optional[EngineRules] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    calendar: Optional[WorkingCalendar] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    rules = rules or EngineRules()
    dispatcher = dispatcher or LoggingNotificationDispatcher()
    calendar = calendar or StaticHolidayCalendar()
    # Entry and leave mutations of one employee share one lock.
    locks = EmployeeLocks()

    employee_service = EmployeeService(employees_repo, rules=rules)
    time_entry_service = TimeEntryService(
        time_entries_repo,
        employees_repo,
        rules=rules,
        dispatcher=dispatcher,
        locks=locks,
        rounding_factory=RoundingStrategyFactory(),
    )
    leave_service = LeaveService(
        leave_repo,
        employees_repo,
        rules=rules,
        dispatcher=dispatcher,
        calendar=calendar,
        locks=locks,
    )
    report_service = ReportService(time_entries_repo, leave_repo, employees_repo, rules=rules, calendar=calendar)

    return Container(
        conn=conn,
        rules=rules,
        calendar=calendar,
        dispatcher=dispatcher,
        employees_repo=employees_repo,
        time_entries_repo=time_entries_repo,
        leave_repo=leave_repo,
        employee_service=employee_service,
        time_entry_service=time_entry_service,
        leave_service=leave_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    rules: Optional[EngineRules] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    calendar: Optional[WorkingCalendar] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return assemble(
        employees_repo=MySQLEmployeeRepository(conn),
        time_entries_repo=MySQLTimeEntryRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        rules=rules,
        dispatcher=dispatcher,
        calendar=calendar,
        conn=conn,
    )
