"""
Configuración de pytest y fixtures compartidas.

Los servicios de presupuesto son puros y se prueban con schemas reales;
la base de datos se reemplaza por un AsyncSession simulado.
"""

import uuid
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from presumaker.schemas.budget import (
    BudgetConfig,
    BudgetItem,
    ClientData,
    CompanyData,
    CompleteBudget,
    Currency,
    DocumentMetadata,
    OfferConditions,
)

# 1x1 PNG transparente
PNG_DATA_URI = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


# ============================================================
# AsyncSession simulado
# ============================================================


@pytest.fixture
def mock_db():
    """Mock de AsyncSession."""
    db = AsyncMock(spec=AsyncSession)
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    return db


def scalar_result(value):
    """Resultado de db.execute() cuyo scalar_one_or_none devuelve value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


# ============================================================
# Usuarios simulados
# ============================================================


class MockUser:
    """Mock del modelo User."""
    def __init__(self, **kwargs):
        self.id = kwargs.get('id', uuid.uuid4())
        self.username = kwargs.get('username', 'carbatk')
        self.hashed_password = kwargs.get('hashed_password', '')
        self.full_name = kwargs.get('full_name', 'Ana Mora')
        self.role = kwargs.get('role', 'administrador')
        self.is_active = kwargs.get('is_active', True)
        self.created_at = kwargs.get('created_at', datetime(2025, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def mock_user():
    """Usuario administrador activo."""
    return MockUser()


@pytest.fixture
def mock_operator():
    """Usuario operador activo."""
    return MockUser(username="user1", full_name="Luis Solano", role="operador")


# ============================================================
# Presupuestos
# ============================================================


@pytest.fixture
def issuer():
    """Emisor con datos completos y logo incrustable."""
    return CompanyData(
        name="CarbaTK Soluciones",
        address="San José, Costa Rica",
        phone="+506 6274-8990",
        email="info@carbatk.com",
        website="www.carbatk.com",
        logo=PNG_DATA_URI,
        id_number="109240206",
        whatsapp="+506 6274-8990",
        sinpe="6274-8990",
        iban="",
        bank="",
    )


@pytest.fixture
def two_items():
    """Dos líneas: 2 x 100 y 1 x 50 (subtotal 250)."""
    return [
        BudgetItem(id="a", code="SRV-01", quantity=2, description="Mantenimiento", unit_price=100),
        BudgetItem(id="b", code="REP-07", quantity=1, description="Filtro", unit_price=50),
    ]


@pytest.fixture
def crc_config():
    """10% de descuento, 13% de impuesto, colones."""
    return BudgetConfig(discount_percent=10, tax_percent=13, currency=Currency.CRC, exchange_rate=500)


@pytest.fixture
def usd_config():
    """Igual que crc_config pero presentado en dólares a 500."""
    return BudgetConfig(discount_percent=10, tax_percent=13, currency=Currency.USD, exchange_rate=500)


def make_budget(items, config=None, **overrides) -> CompleteBudget:
    """Construye un CompleteBudget con valores razonables."""
    return CompleteBudget(
        metadata=overrides.get(
            "metadata",
            DocumentMetadata(
                proforma_number="P-2025-001",
                issue_date=date(2025, 1, 10),
                vendor="Ana Mora",
            ),
        ),
        client=overrides.get(
            "client",
            ClientData(
                company_name="Ferretería El Roble",
                company_phone="2222-3333",
                company_email="compras@elroble.cr",
                contact_name="María Vargas",
                contact_phone="8888-9999",
                contact_email="maria@elroble.cr",
            ),
        ),
        items=items,
        config=config or BudgetConfig(),
        offer_conditions=overrides.get("offer_conditions", OfferConditions(validity_days=30)),
        issuer=overrides.get("issuer", CompanyData(name="CarbaTK Soluciones")),
    )


@pytest.fixture
def budget(two_items, crc_config, issuer):
    """Presupuesto de dos líneas en colones."""
    return make_budget(two_items, crc_config, issuer=issuer)


@pytest.fixture
def many_items():
    """30 líneas de 1 x 10: tres páginas con 14 por página."""
    return [
        BudgetItem(code=f"C{i:02d}", quantity=1, description=f"Artículo {i}", unit_price=10)
        for i in range(1, 31)
    ]


@pytest.fixture
def budget_factory():
    """Acceso a make_budget desde las pruebas."""
    return make_budget


@pytest.fixture
def png_data_uri():
    return PNG_DATA_URI


@pytest.fixture
def db_result():
    """Acceso a scalar_result desde las pruebas."""
    return scalar_result
