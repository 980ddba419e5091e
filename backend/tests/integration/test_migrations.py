"""Integration tests for the Alembic migrations (SQLite in-memory)"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

MIGRATIONS = Path(__file__).resolve().parents[2] / "migrations"

INSERT_MAPPING = text(
    "INSERT INTO order_mapping (id, woo_order_id, ongoing_order_id, mapping_type, confidence, is_active) "
    "VALUES (:id, :woo, :ongoing, :mapping_type, :confidence, :active)"
)


def mapping_row(mapping_id, woo="a1", ongoing="b1", mapping_type="manual", confidence=100, active=True):
    return {
        "id": mapping_id,
        "woo": woo,
        "ongoing": ongoing,
        "mapping_type": mapping_type,
        "confidence": confidence,
        "active": active,
    }


@pytest.fixture
def alembic_config():
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS))
    return config


@pytest.fixture
def migrated_engine(alembic_config):
    engine = create_engine("sqlite://", poolclass=StaticPool)
    with engine.begin() as connection:
        alembic_config.attributes["connection"] = connection
        command.upgrade(alembic_config, "head")
    yield engine
    engine.dispose()


class TestUpgrade:

    def test_creates_order_mapping_table(self, migrated_engine):
        inspector = inspect(migrated_engine)

        assert "order_mapping" in inspector.get_table_names()
        index_names = {index["name"] for index in inspector.get_indexes("order_mapping")}
        assert {"ix_order_mapping_pair", "uq_order_mapping_active_pair"} <= index_names

    def test_check_constraints_created(self, migrated_engine):
        names = {ck["name"] for ck in inspect(migrated_engine).get_check_constraints("order_mapping")}

        assert {"ck_order_mapping_type", "ck_order_mapping_confidence"} <= names

    def test_server_defaults(self, migrated_engine):
        with migrated_engine.begin() as connection:
            connection.execute(text(
                "INSERT INTO order_mapping (id, woo_order_id, ongoing_order_id, mapping_type) "
                "VALUES ('m1', 'a1', 'b1', 'exact')"
            ))
            row = connection.execute(text(
                "SELECT confidence, is_active, mapped_at FROM order_mapping WHERE id = 'm1'"
            )).one()

        assert row.confidence == 100
        assert row.is_active == 1
        assert row.mapped_at is not None

    def test_downgrade_drops_table(self, migrated_engine, alembic_config):
        with migrated_engine.begin() as connection:
            alembic_config.attributes["connection"] = connection
            command.downgrade(alembic_config, "base")

        assert "order_mapping" not in inspect(migrated_engine).get_table_names()


class TestConstraints:
    """Constraints enforced by the database itself"""

    def test_second_active_mapping_for_pair_rejected(self, migrated_engine):
        with migrated_engine.begin() as connection:
            connection.execute(INSERT_MAPPING, mapping_row("m1"))

        with pytest.raises(IntegrityError):
            with migrated_engine.begin() as connection:
                connection.execute(INSERT_MAPPING, mapping_row("m2"))

    def test_inactive_mappings_do_not_block_pair(self, migrated_engine):
        with migrated_engine.begin() as connection:
            connection.execute(INSERT_MAPPING, mapping_row("m1", active=False))
            connection.execute(INSERT_MAPPING, mapping_row("m2", active=False))
            connection.execute(INSERT_MAPPING, mapping_row("m3"))

            count = connection.execute(text("SELECT COUNT(*) FROM order_mapping")).scalar()

        assert count == 3

    @pytest.mark.parametrize("fields", [
        {"mapping_type": "guessed"},
        {"confidence": 101},
        {"confidence": -1},
    ])
    def test_invalid_values_rejected(self, migrated_engine, fields):
        with pytest.raises(IntegrityError):
            with migrated_engine.begin() as connection:
                connection.execute(INSERT_MAPPING, mapping_row("m1", **fields))
