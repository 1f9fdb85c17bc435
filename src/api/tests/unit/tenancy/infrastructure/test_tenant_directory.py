"""Unit tests for TenantDirectory with a mocked platform session."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from tenancy.domain import ConnectionConfig, Tenant, TenantDatabase, TenantId
from tenancy.infrastructure.models import TenantDatabaseModel, TenantModel
from tenancy.infrastructure.tenant_directory import TenantDirectory
from tenancy.ports.exceptions import DuplicateTenantError
from tenancy.ports.repositories import ITenantDirectory
from tests.unit.tenancy.fakes import TENANT_A


@pytest.fixture
def mock_session():
    """Create mock async session."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def directory(mock_session):
    return TenantDirectory(session=mock_session)


def _scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _tenant_model(**overrides) -> TenantModel:
    fields = {
        "id": TENANT_A,
        "company_name": "Finca La Esperanza",
        "email": "admin@esperanza.co",
        "subdomain": "esperanza",
        "cell_phone_number": "3001234567",
        "is_created_db": True,
        "is_active": True,
    }
    fields.update(overrides)
    return TenantModel(**fields)


class TestProtocolCompliance:
    """Tests for protocol compliance."""

    def test_implements_protocol(self, directory):
        assert isinstance(directory, ITenantDirectory)


class TestGet:
    """Tests for get and get_by_subdomain."""

    @pytest.mark.asyncio
    async def test_maps_model_to_domain(self, directory, mock_session):
        mock_session.execute.return_value = _scalar_result(_tenant_model())

        tenant = await directory.get(TenantId(value=TENANT_A))

        assert tenant == Tenant(
            id=TenantId(value=TENANT_A),
            company_name="Finca La Esperanza",
            email="admin@esperanza.co",
            subdomain="esperanza",
            cell_phone_number="3001234567",
            is_created_db=True,
            is_active=True,
        )

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(self, directory, mock_session):
        mock_session.execute.return_value = _scalar_result(None)

        assert await directory.get_by_subdomain("nowhere") is None


class TestSave:
    """Tests for save."""

    @pytest.mark.asyncio
    async def test_adds_new_tenant(self, directory, mock_session):
        mock_session.execute.return_value = _scalar_result(None)
        tenant = Tenant.create("Finca", "a@finca.co", "finca")

        await directory.save(tenant)

        added = mock_session.add.call_args.args[0]
        assert isinstance(added, TenantModel)
        assert added.id == tenant.id.value
        assert added.subdomain == "finca"
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_updates_existing_tenant(self, directory, mock_session):
        existing = _tenant_model()
        mock_session.execute.return_value = _scalar_result(existing)
        tenant = Tenant(
            id=TenantId(value=TENANT_A),
            company_name="Renamed",
            email="admin@esperanza.co",
            subdomain="esperanza",
            is_active=False,
        )

        await directory.save(tenant)

        mock_session.add.assert_not_called()
        assert existing.company_name == "Renamed"
        assert existing.is_active is False

    @pytest.mark.asyncio
    async def test_unique_violation_is_duplicate(self, directory, mock_session):
        mock_session.execute.return_value = _scalar_result(None)
        mock_session.flush.side_effect = IntegrityError("insert", {}, Exception())

        with pytest.raises(DuplicateTenantError):
            await directory.save(Tenant.create("Finca", "a@finca.co", "finca"))


class TestDatabaseRecords:
    """Tests for the tenant database record."""

    @pytest.mark.asyncio
    async def test_joins_tenant_status(self, directory, mock_session):
        model = TenantDatabaseModel(
            id="db-1",
            tenant_id=TENANT_A,
            database_name="cropco_tenant_esperanza",
            connection_config={
                "host": "tenant-db",
                "port": 5433,
                "username": "esperanza",
                "password": "sealed",
            },
            is_migrated=True,
        )
        result = MagicMock()
        result.one_or_none.return_value = (model, False)
        mock_session.execute.return_value = result

        database = await directory.get_database_for_tenant(TenantId(value=TENANT_A))

        assert database == TenantDatabase(
            id="db-1",
            tenant_id=TENANT_A,
            database_name="cropco_tenant_esperanza",
            connection_config=ConnectionConfig(
                host="tenant-db", port=5433, username="esperanza", password="sealed"
            ),
            is_migrated=True,
            tenant_is_active=False,
        )

    @pytest.mark.asyncio
    async def test_missing_record(self, directory, mock_session):
        result = MagicMock()
        result.one_or_none.return_value = None
        mock_session.execute.return_value = result

        assert (
            await directory.get_database_for_tenant(TenantId(value=TENANT_A)) is None
        )

    @pytest.mark.asyncio
    async def test_save_database_stores_config_document(
        self, directory, mock_session
    ):
        existing = TenantDatabaseModel(
            id="db-1", tenant_id=TENANT_A, database_name="old", connection_config=None
        )
        mock_session.execute.return_value = _scalar_result(existing)

        await directory.save_database(
            TenantDatabase(
                id="db-1",
                tenant_id=TENANT_A,
                database_name="new_db",
                connection_config=ConnectionConfig(
                    host="h", port=5432, username="u", password="sealed"
                ),
            )
        )

        assert existing.database_name == "new_db"
        assert existing.connection_config == {
            "host": "h",
            "port": 5432,
            "username": "u",
            "password": "sealed",
        }


class TestSoftDelete:
    """Tests for soft_delete."""

    @pytest.mark.asyncio
    async def test_tombstones_tenant_and_database(self, directory, mock_session):
        tenant = _tenant_model()
        database = TenantDatabaseModel(
            id="db-1", tenant_id=TENANT_A, database_name="cropco_tenant_esperanza"
        )
        mock_session.execute.side_effect = [
            _scalar_result(tenant),
            _scalar_result(database),
        ]

        await directory.soft_delete(TenantId(value=TENANT_A))

        assert tenant.deleted_at is not None
        assert database.deleted_at is not None
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_tenant_is_noop(self, directory, mock_session):
        mock_session.execute.return_value = _scalar_result(None)

        await directory.soft_delete(TenantId(value=TENANT_A))

        mock_session.flush.assert_not_awaited()


class TestConnectionConfigDocument:
    """Tests for reading the stored connection_config JSON."""

    @pytest.mark.parametrize("document", [None, {}, {"port": 5432}])
    def test_missing_host_means_unconfigured(self, document):
        assert ConnectionConfig.from_dict(document) is None

    def test_defaults_port_and_blank_credentials(self):
        config = ConnectionConfig.from_dict(
            {"host": "tenant-db", "username": "", "password": None}
        )

        assert config == ConnectionConfig(host="tenant-db", port=5432)
        assert config.has_credentials is False
