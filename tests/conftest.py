import hashlib
import hmac
import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("secret_key", "test-jwt-secret")
os.environ.setdefault("SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "rzp_test_secret")
os.environ.setdefault("BREVO_API_KEY", "test-brevo-key")

import pytest  # noqa: E402
import razorpay  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel, Session, create_engine, select  # noqa: E402

import memorycraver.models  # noqa: E402,F401
from memorycraver.config import settings  # noqa: E402
from memorycraver.database import get_session  # noqa: E402
from memorycraver.main import app  # noqa: E402
from memorycraver.models.book import Book  # noqa: E402
from memorycraver.models.chapter import Chapter  # noqa: E402
from memorycraver.models.profile import Profile  # noqa: E402
from memorycraver.models.purchase import Purchase  # noqa: E402
from memorycraver.services import razorpay_gateway  # noqa: E402
from memorycraver.utils.hash import hash_password, hash_security_answer  # noqa: E402
from memorycraver.utils.token import create_access_token  # noqa: E402

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


class FakeOrders:
    """Stands in for ``razorpay_client.order``."""

    def __init__(self):
        self.calls = []
        self.fail = False

    def create(self, data):
        self.calls.append(data)
        if self.fail:
            raise razorpay.errors.BadRequestError("Authentication failed")
        return {
            "id": f"order_test{len(self.calls)}",
            "entity": "order",
            "amount": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
        }


@pytest.fixture
def gateway(monkeypatch):
    orders = FakeOrders()
    monkeypatch.setattr(razorpay_gateway.razorpay_client, "order", orders)
    return orders


def sign(order_id: str, payment_id: str, secret: str = None) -> str:
    secret = secret or settings.RAZORPAY_KEY_SECRET
    return hmac.new(
        secret.encode("utf-8"),
        f"{order_id}|{payment_id}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def make_user(session, email="reader@readers.io", role="reader", notifications=True):
    user = Profile(
        email=email,
        full_name=email.split("@")[0].title(),
        role=role,
        password_hash=hash_password(DEFAULT_PASSWORD),
        security_question="First pet?",
        security_answer_hash=hash_security_answer("Rex"),
        email_notifications_enabled=notifications,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_book(session, title="The Glass Orchard"):
    book = Book(title=title, description="A serial", is_published=True)
    session.add(book)
    session.commit()
    session.refresh(book)
    return book


def make_chapter(session, book=None, number=1, price=99.0, **fields):
    fields.setdefault("is_published", True)
    chapter = Chapter(
        book_id=book.id if book else None,
        title=f"Chapter {number}",
        description="",
        chapter_number=number,
        price=price,
        **fields,
    )
    session.add(chapter)
    session.commit()
    session.refresh(chapter)
    return chapter


def make_purchase(session, user, chapter, status="pending", order_id="order_old", payment_id=None):
    purchase = Purchase(
        user_id=user.id,
        chapter_id=chapter.id,
        amount_paid=chapter.price,
        gateway_order_id=order_id,
        gateway_payment_id=payment_id,
        payment_status=status,
    )
    session.add(purchase)
    session.commit()
    session.refresh(purchase)
    return purchase


def purchases_of(session, user):
    session.expire_all()
    return session.exec(
        select(Purchase).where(Purchase.user_id == user.id)
    ).all()


def auth_headers(user):
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def reader(session):
    return make_user(session)


@pytest.fixture
def book(session):
    return make_book(session)
