from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .claims.mysql_claim_repository import MySQLClaimRepository
from .claims.service import MealClaimService
from .common.datetime_utils import now_local
from .database.connection import DBConfig, DatabaseConnection
from .members.mysql_member_repository import MySQLMemberRepository
from .members.service import MemberService
from .people.mysql_people_repository import MySQLPeopleDirectory
from .reports.mailer import SmtpConfig, SmtpMailer
from .reports.service import FreemealReportService
from .reports.weekly import WeeklyReportService
from .users.mysql_admin_repository import MySQLAdminUserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    clock: Callable[[], datetime]

    people_repo: MySQLPeopleDirectory
    claims_repo: MySQLClaimRepository
    members_repo: MySQLMemberRepository
    admins_repo: MySQLAdminUserRepository

    auth_service: AuthService
    meal_claim_service: MealClaimService
    member_service: MemberService
    report_service: FreemealReportService
    weekly_report_service: WeeklyReportService


def build_container(
    *,
    db_config: dict,
    smtp_config: Optional[dict] = None,
    from_name: str = "Pantry",
    from_email: str = "no-reply@localhost",
    report_recipients=None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    people_repo = MySQLPeopleDirectory(conn)
    claims_repo = MySQLClaimRepository(conn)
    members_repo = MySQLMemberRepository(conn)
    admins_repo = MySQLAdminUserRepository(conn)

    auth_service = AuthService(admins_repo)
    meal_claim_service = MealClaimService(claims_repo, people_repo, transaction=conn.transaction, clock=clock)
    member_service = MemberService(members_repo, people_repo)
    report_service = FreemealReportService(claims_repo, clock=clock)
    mailer = SmtpMailer(SmtpConfig.from_dict(smtp_config or {}), from_name=from_name, from_email=from_email)
    weekly_report_service = WeeklyReportService(report_service, mailer, recipients=report_recipients)

    return Container(
        conn=conn,
        clock=clock,
        people_repo=people_repo,
        claims_repo=claims_repo,
        members_repo=members_repo,
        admins_repo=admins_repo,
        auth_service=auth_service,
        meal_claim_service=meal_claim_service,
        member_service=member_service,
        report_service=report_service,
        weekly_report_service=weekly_report_service,
    )
