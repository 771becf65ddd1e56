import asyncio

import pytest
from app.application.errors.exceptions import FatalJobError, RetryableJobError
from app.application.services.welcome_service import WelcomeService
from app.domain.models.job import SendWelcomeJob
from app.domain.models.user import User


@pytest.fixture()
def service(db, notification_sink) -> WelcomeService:
    return WelcomeService(uow_factory=db.uow_factory, notification_sink=notification_sink)


@pytest.fixture()
def user(db) -> User:
    user = User(email="bob@dylan.com", password_hash="x")
    db.users[user.id] = user
    return user


def test_sends_welcome_to_user_email(service, notification_sink, user) -> None:
    asyncio.run(service.handle(SendWelcomeJob(user_id=user.id).to_message()))

    assert len(notification_sink.sent) == 1
    assert notification_sink.sent[0].recipient == "bob@dylan.com"
    assert "bob@dylan.com" in notification_sink.sent[0].html_body


def test_missing_user_id_is_fatal(service) -> None:
    with pytest.raises(FatalJobError) as exc:
        asyncio.run(service.send(SendWelcomeJob()))

    assert exc.value.msg == "Missing userId"


def test_unknown_user_is_fatal(service) -> None:
    with pytest.raises(FatalJobError) as exc:
        asyncio.run(service.send(SendWelcomeJob(user_id="ghost")))

    assert exc.value.msg == "User not found"


def test_sink_failure_is_retryable(service, notification_sink, user) -> None:
    notification_sink.error = ConnectionError("smtp down")

    with pytest.raises(RetryableJobError) as exc:
        asyncio.run(service.send(SendWelcomeJob(user_id=user.id)))

    assert exc.value.retryable is True
