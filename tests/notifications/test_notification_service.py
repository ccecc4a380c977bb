import pytest

from nikagenyx.core.exceptions import ValidationError
from nikagenyx.notifications.service import NotificationService


@pytest.fixture
def service(employees_repo, mailer):
    return NotificationService(employees_repo, mailer, admin_address="hr@example.com")


def test_bulk_email_sends_plain_text_to_each_employee(service, mailer):
    result = service.send_bulk_email("HR Team", "Holiday", "Office closed on Friday.", ["NGX000001", "NGX000002"])

    assert result.sent == 2
    assert result.failed == ()
    assert {m["to"] for m in mailer.sent} == {"admin@example.com", "asha@example.com"}
    assert mailer.sent[0]["sender_name"] == "HR Team"


def test_bulk_email_collects_failures(employees_repo, failing_mailer, make_employee):
    employees_repo.add(make_employee("NGX000003", phone="3", email=None))
    service = NotificationService(employees_repo, failing_mailer)

    result = service.send_bulk_email("HR", "Notice", "Body", ["NGX000001", "NGX000002", "NGX000003", "NGX404404"])

    assert result.sent == 1
    assert [f["emp_id"] for f in result.failed] == ["NGX000002", "NGX000003", "NGX404404"]
    assert result.to_dict()["failed"] == 3


@pytest.mark.parametrize(
    "sender,subject,body,emp_ids",
    [
        ("", "s", "b", ["NGX000001"]),
        ("HR", "", "b", ["NGX000001"]),
        ("HR", "s", "", ["NGX000001"]),
        ("HR", "s", "b", []),
        ("HR", "s", "b", "NGX000001"),
    ],
)
def test_bulk_email_requires_every_field(service, sender, subject, body, emp_ids):
    with pytest.raises(ValidationError):
        service.send_bulk_email(sender, subject, body, emp_ids)


def test_contact_is_relayed_to_admin(service, mailer):
    service.send_contact("Meera", "meera@example.com", "Please call me back.")

    sent = mailer.sent[0]
    assert sent["to"] == "hr@example.com"
    assert sent["reply_to"] == "meera@example.com"
    assert "Please call me back." in sent["body"]


def test_contact_validates_email(service):
    with pytest.raises(ValidationError):
        service.send_contact("Meera", "not-an-email", "Hi")
