"""System settings: key/value rows with atomic per-key upsert."""

import json
import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from portal.core.errors import NotFound, ValidationFailed
from portal.models.setting import RESTRICTED_ACCESS_KEY, SystemSetting
from portal.schemas.settings import SettingOut, SettingValue

logger = logging.getLogger(__name__)


def coerce_value(value: Any) -> str:
    """
    Text form stored for a setting value.

    Strings are kept verbatim; any other JSON value is stored as its JSON
    text (true -> "true", 1 -> "1", null -> "null").
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _insert_for(db: Session):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise RuntimeError(f"Unsupported database dialect for settings upsert: {dialect}")


def get_all_settings(db: Session) -> dict[str, SettingValue]:
    rows = db.query(SystemSetting).order_by(SystemSetting.key).all()
    return {r.key: SettingValue(value=r.value, updated_at=r.updated_at) for r in rows}


def get_setting(db: Session, key: str) -> SettingOut:
    row = db.get(SystemSetting, key)
    if row is None:
        raise NotFound("Setting not found")
    return SettingOut.model_validate(row)


def upsert_setting(db: Session, key: str, value: Any) -> SettingOut:
    """Insert or update one key in a single statement and return the stored row."""
    text_value = coerce_value(value)
    insert = _insert_for(db)
    stmt = insert(SystemSetting).values(key=key, value=text_value, updated_at=func.now())
    stmt = stmt.on_conflict_do_update(
        index_elements=[SystemSetting.key],
        set_={"value": stmt.excluded["value"], "updated_at": func.now()},
    )
    db.execute(stmt)
    db.commit()

    row = db.get(SystemSetting, key, populate_existing=True)
    logger.info("Setting updated", extra={"setting_key": key})
    return SettingOut.model_validate(row)


def bulk_upsert_settings(db: Session, settings: Any) -> list[SettingOut]:
    """
    Upsert every entry of a key->value mapping, in mapping order.

    Each key commits on its own; a failure midway leaves earlier keys applied.
    """
    if not isinstance(settings, dict):
        raise ValidationFailed(
            "Send an object with the settings", error="InvalidSettings"
        )
    return [upsert_setting(db, str(key), value) for key, value in settings.items()]


def is_restricted_access(db: Session) -> bool:
    """True only when the restricted_access row holds the literal string 'true'."""
    row = db.get(SystemSetting, RESTRICTED_ACCESS_KEY)
    return row is not None and row.value == "true"


def seed_defaults(db: Session) -> None:
    """Insert restricted_access='false' if the key has never been set."""
    insert = _insert_for(db)
    stmt = (
        insert(SystemSetting)
        .values(key=RESTRICTED_ACCESS_KEY, value="false", updated_at=func.now())
        .on_conflict_do_nothing(index_elements=[SystemSetting.key])
    )
    db.execute(stmt)
    db.commit()
