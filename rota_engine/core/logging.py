import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from rota_engine.core.config import settings

# Request id of the HTTP call being served; empty outside a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RotaJsonFormatter(jsonlogger.JsonFormatter):
    """
    One JSON object per record, stamped with the service identity and the
    correlation id so placement and leave decisions can be traced per request.
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["service"] = settings.app_name
        log_record["environment"] = settings.environment


def setup_logging():
    root = logging.getLogger()
    # Repeated app construction (tests) must not stack handlers
    if any(isinstance(h.formatter, RotaJsonFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(RotaJsonFormatter("%(timestamp) %(level) %(name) %(message)"))
    root.addHandler(handler)
    root.setLevel(settings.log_level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # sql_echo turns on statement logging for debugging placement queries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.sql_echo else logging.WARNING)
