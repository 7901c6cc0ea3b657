import base64
import os
import tempfile

# Must be set before the application modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["RCC_MEDIA_DIR"] = tempfile.mkdtemp(prefix="rcc_media_")
os.environ["RCC_GUARDIAN_POLICY"] = "permissive"

from datetime import date, timedelta  # noqa: E402

import fakeredis  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import Engine, StaticPool, create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.orm.session import Session  # noqa: E402

from rcc_portal.core.security import get_password_hash  # noqa: E402
from rcc_portal.database.db import Base, get_db  # noqa: E402
from rcc_portal.main import app  # noqa: E402
from rcc_portal.models.events import Event, EventType  # noqa: E402
from rcc_portal.models.profiles import Profile, UserRole  # noqa: E402
from rcc_portal.services.auth import issue_token  # noqa: E402
from rcc_portal.services.mail import mailer  # noqa: E402

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine: Engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Minimal valid 1x1 pixel black GIF (43 bytes)
GIF_BYTES = base64.b64decode("R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7")
PASSWORD = "segredo123"


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Set up and tear down the database for the test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    """Empty every table and the mail outbox after each test."""
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    mailer.clear()


# Override the database dependency
def override_get_db():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def redis_client(fake_redis, monkeypatch: pytest.MonkeyPatch):
    """Route the registration lock through fakeredis."""
    monkeypatch.setattr("rcc_portal.services.registrations.get_redis_client", lambda: fake_redis)
    return fake_redis


def create_profile(db: Session, email: str, role: UserRole = UserRole.SERVO, nome: str = "Maria Silva") -> Profile:
    profile = Profile(
        email=email,
        nome=nome,
        telefone="(11) 99999-0000",
        endereco="Campinas",
        password_hash=get_password_hash(PASSWORD),
        role=role.value,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def headers_for(db: Session, profile: Profile) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(db, profile)}"}


def create_event(db: Session, **overrides) -> Event:
    values = {
        "nome": "Retiro de Carnaval",
        "descricao": "Quatro dias de oração e louvor para toda a família.",
        "data": date.today() + timedelta(days=10),
        "horario": "08:00",
        "local": "Casa de Retiros",
        "taxa_inscricao": 0,
        "tipo": EventType.RETIRO.value,
        "form_fields_config": {},
    }
    values.update(overrides)
    event = Event(**values)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


@pytest.fixture
def member(db_session: Session) -> Profile:
    return create_profile(db_session, "membro@example.com")


@pytest.fixture
def staff(db_session: Session) -> Profile:
    return create_profile(db_session, "coord@example.com", UserRole.COORDENADOR, nome="João Coordenador")


@pytest.fixture
def admin(db_session: Session) -> Profile:
    return create_profile(db_session, "admin@example.com", UserRole.ADMIN, nome="Ana Admin")


@pytest.fixture
def member_headers(db_session: Session, member: Profile) -> dict[str, str]:
    return headers_for(db_session, member)


@pytest.fixture
def staff_headers(db_session: Session, staff: Profile) -> dict[str, str]:
    return headers_for(db_session, staff)


@pytest.fixture
def admin_headers(db_session: Session, admin: Profile) -> dict[str, str]:
    return headers_for(db_session, admin)


@pytest.fixture
def event(db_session: Session) -> Event:
    return create_event(db_session)


@pytest.fixture
def paid_event(db_session: Session) -> Event:
    return create_event(
        db_session,
        nome="Experiência de Oração",
        taxa_inscricao=50.0,
        tipo=EventType.EXPERIENCIA_ORACAO.value,
        chave_pix="pix@rcc.org",
        form_fields_config={
            "nome": {"required": True},
            "idade": {"required": True},
            "telefone_responsavel": {"required": True},
        },
    )


@pytest.fixture
def make_event(db_session: Session):
    """Factory for events with sensible defaults."""
    return lambda **overrides: create_event(db_session, **overrides)


@pytest.fixture
def make_profile(db_session: Session):
    return lambda email, role=UserRole.SERVO: create_profile(db_session, email, role)


@pytest.fixture
def auth_headers(db_session: Session):
    return lambda profile: headers_for(db_session, profile)


@pytest.fixture
def gif_file():
    return ("foto.gif", GIF_BYTES, "image/gif")
