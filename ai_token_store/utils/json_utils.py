import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any


class EnhancedJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        elif isinstance(obj, (datetime, date)):
            return obj.isoformat()
        elif isinstance(obj, bytes):
            return obj.decode("utf-8", errors="replace")
        elif hasattr(obj, "model_dump"):
            return obj.model_dump()
        return str(obj)


def dumps(obj: Any, **kwargs) -> str:
    """JSON dumps with Decimal, datetime and bytes support."""
    return json.dumps(obj, cls=EnhancedJSONEncoder, **kwargs)
