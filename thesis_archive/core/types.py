"""Custom SQLAlchemy column types shared by the models"""
import json
import uuid

from sqlalchemy import TypeDecorator, String, Text


def generate_uuid():
    """Generate a UUID string"""
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """Stores UUIDs as VARCHAR(36) on every backend"""
    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return str(value)
        return value


class JSONList(TypeDecorator):
    """
    A list serialized to JSON text in a single column.

    Author/advisor lists are kept denormalized on the thesis row so the
    listing search can run a plain LIKE over the serialized text. Unreadable
    stored values load as an empty list.
    """
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return json.dumps([])
        return json.dumps(list(value), ensure_ascii=False)

    def process_result_value(self, value, dialect):
        if not value:
            return []
        try:
            decoded = json.loads(value)
        except (TypeError, ValueError):
            return []
        return decoded if isinstance(decoded, list) else []


def enum_values(enum_cls):
    """values_callable for SQLEnum so rows hold 'senior-high' rather than 'SENIOR_HIGH'"""
    return [member.value for member in enum_cls]
