"""Query filter helpers"""

import json

from sqlalchemy import String, cast


def json_list_contains(column, value: str):
    """
    Membership test on a JSON list column.

    Compares against the JSON-encoded element text so the same filter works on
    SQLite and PostgreSQL (the column is serialized with the default encoder).
    """
    return cast(column, String).contains(json.dumps(value), autoescape=True)
