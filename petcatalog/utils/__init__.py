"""Utils package initialization."""
from petcatalog.utils.logger import get_logger, ParserLogger, set_trace_id

__all__ = ["get_logger", "ParserLogger", "set_trace_id"]
