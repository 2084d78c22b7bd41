# storefront/repos/kv_store.py
import json
from typing import Any, Protocol

import redis
from pydantic import TypeAdapter, ValidationError as SchemaError
from pydantic_core import to_jsonable_python
from sqlalchemy.orm import Session

from storefront.data.models.kv_entry import KVEntryModel
from storefront.domain.errors import PersistenceError
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


# klucze w jednym miejscu, scope to user id albo "guest"
def cart_key(scope_key: str) -> str:
    return f"cart:{scope_key}"


def coupon_key(scope_key: str) -> str:
    return f"cart:{scope_key}:coupon"


def orders_key(scope_key: str) -> str:
    return f"orders:{scope_key}"


def last_order_key(scope_key: str) -> str:
    return f"orders:{scope_key}:last"


def payment_methods_key(scope_key: str) -> str:
    return f"payment_methods:{scope_key}"


class PersistentStore(Protocol):
    def load(self, key: str) -> Any | None: ...

    def load_typed(self, key: str, type_: Any) -> Any | None: ...

    def save(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class JsonStore:
    """
    Wspolna logika JSON dla backendow key-value.
    - load nigdy nie rzuca dla uszkodzonych danych, tylko usuwa wpis i zwraca None
    - save serializuje przed zapisem, wiec zla wartosc nie zostawia polowicznego wpisu
    """

    def _read(self, key: str) -> str | None:
        raise NotImplementedError

    def _write(self, key: str, raw: str) -> None:
        raise NotImplementedError

    def _delete(self, key: str) -> None:
        raise NotImplementedError

    def load(self, key: str) -> Any | None:
        raw = self._read(key)
        if raw is None:
            return None

        try:
            return json.loads(raw)
        except ValueError as e:
            self._discard(PersistenceError(key, str(e)))
            return None

    def load_typed(self, key: str, type_: Any) -> Any | None:
        """Load and validate against a pydantic type; wrong shape counts as corruption."""
        data = self.load(key)
        if data is None:
            return None

        try:
            return TypeAdapter(type_).validate_python(data)
        except SchemaError as e:
            self._discard(PersistenceError(key, f"{e.error_count()} validation error(s)"))
            return None

    def save(self, key: str, value: Any) -> None:
        raw = json.dumps(to_jsonable_python(value))
        self._write(key, raw)

    def remove(self, key: str) -> None:
        self._delete(key)

    def _discard(self, error: PersistenceError) -> None:
        logger.warning(f"{error.message} - wpis usuniety, start od pustego stanu")
        self._delete(error.key)


class SqlStore(JsonStore):
    def __init__(self, db: Session):
        self.db = db

    def _read(self, key: str) -> str | None:
        entry = self.db.get(KVEntryModel, key)
        return entry.value if entry else None

    def _write(self, key: str, raw: str) -> None:
        entry = self.db.get(KVEntryModel, key)
        if entry:
            entry.value = raw
        else:
            self.db.add(KVEntryModel(key=key, value=raw))
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _delete(self, key: str) -> None:
        entry = self.db.get(KVEntryModel, key)
        if entry is None:
            return
        self.db.delete(entry)
        self.db.commit()


class RedisStore(JsonStore):
    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def _read(self, key: str) -> str | None:
        return self.redis.get(key)

    @redis_retry()
    def _write(self, key: str, raw: str) -> None:
        self.redis.set(name=key, value=raw)

    @redis_retry()
    def _delete(self, key: str) -> None:
        self.redis.delete(key)
