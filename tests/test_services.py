from datetime import datetime

import pytest

from serenibook.models import Booking, Service

SERVICE = {
    "name": "Hatha yoga",
    "description": "Séance individuelle de hatha yoga, tous niveaux.",
    "duration": 60,
    "price": 45.0,
    "color": "#1AA385",
}


def services_url(account):
    return f"/users/{account['id']}/services"


def create_service(client, account, **overrides):
    response = client.post(services_url(account), json={**SERVICE, **overrides}, headers=account["headers"])
    assert response.status_code == 201, response.text
    return response.json()


def test_create_service(client, onboarded_professional):
    service = create_service(client, onboarded_professional)

    assert service["name"] == "Hatha yoga"
    assert service["active"] is True
    assert service["maxParticipants"] == 1
    assert service["color"] == "#1aa385"


def test_list_services_ordered_by_name(client, onboarded_professional):
    create_service(client, onboarded_professional, name="Yin yoga")
    create_service(client, onboarded_professional, name="Ashtanga")

    response = client.get(services_url(onboarded_professional), headers=onboarded_professional["headers"])

    assert [s["name"] for s in response.json()] == ["Ashtanga", "Yin yoga"]


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"name": "Yo"}, "name"),
        ({"description": "Too short"}, "description"),
        ({"duration": 4}, "duration"),
        ({"duration": 481}, "duration"),
        ({"price": -1}, "price"),
        ({"maxParticipants": 0}, "maxParticipants"),
        ({"color": "green"}, "color"),
    ],
)
def test_create_service_validation(client, onboarded_professional, overrides, field):
    response = client.post(
        services_url(onboarded_professional),
        json={**SERVICE, **overrides},
        headers=onboarded_professional["headers"],
    )

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["errors"]] == [field]


def test_duration_bounds_are_inclusive(client, onboarded_professional):
    assert create_service(client, onboarded_professional, duration=5)["duration"] == 5
    assert create_service(client, onboarded_professional, duration=480)["duration"] == 480


def test_update_service(client, onboarded_professional):
    service = create_service(client, onboarded_professional)

    response = client.patch(
        f"{services_url(onboarded_professional)}/{service['id']}",
        json={**SERVICE, "price": 50, "maxParticipants": 8, "type": "group"},
        headers=onboarded_professional["headers"],
    )

    assert response.status_code == 200
    assert response.json()["price"] == 50
    assert response.json()["maxParticipants"] == 8
    assert response.json()["type"] == "group"


def test_service_of_another_professional_is_not_found(client, onboarded_professional, db_session):
    from conftest import make_account, professional_onboarding_payload

    other = make_account(client, "other@example.com", "PROFESSIONAL")
    client.post("/onboarding", json=professional_onboarding_payload(), headers=other["headers"])
    foreign = create_service(client, other)

    response = client.patch(
        f"{services_url(onboarded_professional)}/{foreign['id']}",
        json=SERVICE,
        headers=onboarded_professional["headers"],
    )

    assert response.status_code == 404


def test_delete_service_without_bookings(client, db_session, onboarded_professional):
    service = create_service(client, onboarded_professional)

    response = client.delete(
        f"{services_url(onboarded_professional)}/{service['id']}",
        headers=onboarded_professional["headers"],
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    db_session.expire_all()
    assert db_session.get(Service, service["id"]) is None


def test_delete_service_with_bookings_deactivates(client, db_session, onboarded_professional):
    service = create_service(client, onboarded_professional)
    db_session.add(Booking(service_id=service["id"], starts_at=datetime(2026, 5, 4, 10, 0)))
    db_session.commit()

    response = client.delete(
        f"{services_url(onboarded_professional)}/{service['id']}",
        headers=onboarded_professional["headers"],
    )

    assert response.status_code == 200
    assert response.json()["id"] == service["id"]
    assert response.json()["active"] is False
    db_session.expire_all()
    assert db_session.get(Service, service["id"]).active is False


def test_services_require_professional_profile(client, professional, client_account):
    assert client.get(services_url(professional), headers=professional["headers"]).status_code == 404
    response = client.post(services_url(client_account), json=SERVICE, headers=client_account["headers"])
    assert response.status_code == 404
    assert response.json()["detail"] == "Professional profile not found"


def test_services_of_another_user_are_forbidden(client, onboarded_professional, client_account):
    response = client.get(services_url(onboarded_professional), headers=client_account["headers"])

    assert response.status_code == 403


def test_service_text_keeps_punctuation_across_edits(client, onboarded_professional):
    service = create_service(
        client,
        onboarded_professional,
        name="Yoga & Pilates",
        description="Cours pour 5 < 10 personnes, l'après-midi",
    )

    assert service["name"] == "Yoga & Pilates"
    assert service["description"] == "Cours pour 5 < 10 personnes, l'après-midi"

    updated = client.patch(
        f"{services_url(onboarded_professional)}/{service['id']}",
        json={**SERVICE, "name": service["name"], "description": service["description"]},
        headers=onboarded_professional["headers"],
    ).json()

    assert updated["name"] == "Yoga & Pilates"
    assert updated["description"] == "Cours pour 5 < 10 personnes, l'après-midi"


def test_service_markup_is_stripped_before_length_checks(client, onboarded_professional):
    response = client.post(
        services_url(onboarded_professional),
        json={**SERVICE, "name": "<b></b>", "description": "<i></i><i></i><i></i>"},
        headers=onboarded_professional["headers"],
    )

    assert response.status_code == 400
    assert {e["field"] for e in response.json()["errors"]} == {"name", "description"}


def test_service_name_with_markup_is_stored_as_text(client, onboarded_professional):
    service = create_service(client, onboarded_professional, name="<em>Yin</em> yoga")

    assert service["name"] == "Yin yoga"
