from .attendance import get_session_attendance, redeem_dynamic_token
from .dynamic_qr import DynamicToken, issue_dynamic_token
from .entry_pass import build_entry_pass, entry_pass_payload, render_qr_png_base64
from .event_entry import EventEntryResult, get_event_entry_stats, record_event_entry
from .utils import format_rate, get_session_or_404, get_user, parse_scanned_user_id

__all__ = [
    # attendance
    "redeem_dynamic_token",
    "get_session_attendance",
    # dynamic QR
    "DynamicToken",
    "issue_dynamic_token",
    # entry pass
    "build_entry_pass",
    "entry_pass_payload",
    "render_qr_png_base64",
    # event entry
    "EventEntryResult",
    "record_event_entry",
    "get_event_entry_stats",
    # utils
    "format_rate",
    "get_session_or_404",
    "get_user",
    "parse_scanned_user_id",
]
