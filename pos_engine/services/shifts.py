# =========================================================
# SHIFT / SESSION AGGREGATOR
#
# A cashier is active while they hold a session with no
# shift_end. Closing sets shift_end exactly once. Shift
# reports reuse the sales aggregator scoped to the cashier
# and the shift's time span.
# =========================================================

from datetime import datetime, timezone

from pos_engine.core.clock import between, elapsed, is_before, sort_key
from pos_engine.core.config import settings
from pos_engine.core.exceptions import AlreadyClosed, InvalidEndTime, ShiftAlreadyOpen
from pos_engine.core.log import logger
from pos_engine.schemas.order import Order
from pos_engine.schemas.refund import Refund
from pos_engine.schemas.report import ReportWindow, ShiftSummary
from pos_engine.schemas.shift import ShiftSession
from pos_engine.services.reports import aggregate, coerce_records


def _now(reference: datetime) -> datetime:
    # Same awareness as the shift's own timestamps
    return datetime.now(reference.tzinfo)


# =========================================================
# SESSION LOOKUPS
# =========================================================
def current_session(cashier_id: int, sessions) -> ShiftSession | None:
    open_sessions = [
        session
        for session in sessions or []
        if session.cashier_id == cashier_id and session.shift_end is None
    ]

    if not open_sessions:
        return None

    return max(open_sessions, key=lambda s: sort_key(s.shift_start))


def active_staff(sessions, as_of: datetime | None = None) -> set[int]:
    active = set()

    for session in sessions or []:
        if session.shift_end is not None:
            continue

        moment = as_of or _now(session.shift_start)

        if not is_before(moment, session.shift_start):
            active.add(session.cashier_id)

    return active


# =========================================================
# SESSION TRANSITIONS
# =========================================================
def open_session(
    cashier_id: int,
    branch_id: int | None,
    sessions=(),
    start: datetime | None = None,
) -> ShiftSession:
    existing = current_session(cashier_id, sessions)

    if existing:
        raise ShiftAlreadyOpen(f"Cashier {cashier_id} already has shift #{existing.id} open")

    session = ShiftSession(
        cashier_id=cashier_id,
        branch_id=branch_id,
        shift_start=start or datetime.now(timezone.utc),
    )

    logger.info(f"Shift opened for cashier {cashier_id} at branch {branch_id}")

    return session


def close_session(session: ShiftSession, end_time: datetime) -> ShiftSession:
    if session.shift_end is not None:
        raise AlreadyClosed(f"Shift #{session.id} already ended at {session.shift_end}")

    if is_before(end_time, session.shift_start):
        raise InvalidEndTime()

    logger.info(f"Shift #{session.id} closed for cashier {session.cashier_id}")

    return session.model_copy(update={"shift_end": end_time})


def shift_duration_hours(session: ShiftSession, now: datetime | None = None) -> int:
    end = session.shift_end or now or _now(session.shift_start)
    span = elapsed(session.shift_start, end)

    # Whole hours only, rounded down
    return max(0, int(span.total_seconds() // 3600))


# =========================================================
# SHIFT REPORT
# =========================================================
def shift_summary(
    session: ShiftSession,
    orders,
    refunds,
    now: datetime | None = None,
    *,
    top_n: int | None = None,
) -> ShiftSummary:
    end = session.shift_end or now or _now(session.shift_start)

    if is_before(end, session.shift_start):
        end = session.shift_start

    window = ReportWindow(start=session.shift_start, end=end)

    cashier_orders = [o for o in coerce_records(orders, Order) if o.cashier_id == session.cashier_id]
    cashier_refunds = [r for r in coerce_records(refunds, Refund) if r.cashier_id == session.cashier_id]

    summary = aggregate(cashier_orders, cashier_refunds, window, top_n=top_n)

    start = session.shift_start
    limit = settings.RECENT_ACTIVITY_LIMIT

    recent_orders = sorted(
        (o for o in cashier_orders if o.created_at and between(o.created_at, start, end)),
        key=lambda o: sort_key(o.created_at),
        reverse=True,
    )
    recent_refunds = sorted(
        (r for r in cashier_refunds if r.created_at and between(r.created_at, start, end)),
        key=lambda r: sort_key(r.created_at),
        reverse=True,
    )

    return ShiftSummary(
        **summary.model_dump(),
        session=session,
        duration_hours=shift_duration_hours(session, end),
        recent_orders=recent_orders[:limit],
        recent_refunds=recent_refunds[:limit],
    )
