"""
CSV export of charging sessions.

Rows are comma-joined without quoting, matching the files the browser client
downloads. None of the exported fields can contain a comma: dates are ISO
timestamps and the remaining columns are numbers or charge type names.
"""

from datetime import date
from typing import Iterable, Optional

from calculations.constants import DEFAULT_CHARGE_TYPE
from exceptions import ValidationError
from utils.error_codes import ErrorCode
from utils.time_utils import format_datetime_iso, parse_datetime, utc_now


def csv_header(currency: str) -> str:
    return ",".join(["Date", f"Cost ({currency})", "Start %", "End %", "kWh", "Type"])


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def session_row(session: dict) -> str:
    charged_at = parse_datetime(session.get("charged_at"))
    return ",".join(
        [
            format_datetime_iso(charged_at) if charged_at else "",
            _cell(session.get("cost")),
            _cell(session.get("start_percent")),
            _cell(session.get("end_percent")),
            _cell(session.get("kwh") or None),
            session.get("charge_type") or DEFAULT_CHARGE_TYPE,
        ]
    )


def sessions_to_csv(sessions: Iterable[dict], currency: str) -> str:
    """
    Render sessions as CSV text.

    Raises:
        ValidationError: there are no sessions to export
    """
    sessions = list(sessions)
    if not sessions:
        raise ValidationError("No data", error_code=ErrorCode.E402_NO_EXPORT_DATA)

    lines = [csv_header(currency)]
    lines.extend(session_row(s) for s in sessions)
    return "\n".join(lines)


def export_filename(today: Optional[date] = None) -> str:
    """``ev_charging_data_<YYYY-MM-DD>.csv`` for the given (UTC) day."""
    today = today or utc_now().date()
    return f"ev_charging_data_{today.isoformat()}.csv"
