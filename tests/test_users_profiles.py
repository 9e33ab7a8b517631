from serenibook.models import Client, Professional, User


def test_user_summary(client, professional):
    response = client.get(f"/users/{professional['id']}", headers=professional["headers"])

    assert response.status_code == 200
    assert response.headers["Cache-Control"] == "no-store, max-age=0"
    assert response.json() == {
        "id": professional["id"],
        "email": "camille@example.com",
        "name": "Camille Martin",
        "role": "PROFESSIONAL",
        "hasProfile": False,
        "isFirstVisit": True,
        "emailVerified": False,
        "hasProfessionalProfile": False,
        "hasClientProfile": False,
    }


def test_user_summary_email_check(client, professional):
    response = client.get(
        f"/users/{professional['id']}?check=emailVerified", headers=professional["headers"]
    )

    assert response.json() == {
        "id": professional["id"],
        "email": "camille@example.com",
        "emailVerified": False,
    }


def test_users_cannot_read_each_other(client, professional, client_account):
    other = client_account["id"]
    headers = professional["headers"]

    assert client.get(f"/users/{other}", headers=headers).status_code == 403
    assert client.get(f"/users/{other}/profile", headers=headers).status_code == 403
    assert (
        client.patch(
            f"/users/{other}/personal-info",
            json={"name": "Intruder", "phone": "0612345678"},
            headers=headers,
        ).status_code
        == 403
    )


def test_users_endpoints_require_session(client, professional):
    assert client.get(f"/users/{professional['id']}").status_code == 401
    assert client.get(f"/users/{professional['id']}/profile").status_code == 401


def test_first_visit_flag(client, db_session, professional):
    response = client.post(f"/users/{professional['id']}/first-visit", headers=professional["headers"])

    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.get(User, professional["id"]).is_first_visit is False


def test_personal_info_creates_professional_profile(client, db_session, professional):
    response = client.patch(
        f"/users/{professional['id']}/personal-info",
        json={
            "name": "Camille M.",
            "phone": "06.12.34.56.78",
            "companyName": "Studio Zen",
            "siret": "12345678901234",
            "website": "https://studio-zen.fr",
        },
        headers=professional["headers"],
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Camille M."
    assert body["hasProfile"] is True
    assert body["professional"]["phone"] == "06.12.34.56.78"
    assert body["professional"]["type"] == "OTHER"
    assert body["professional"]["companyName"] == "Studio Zen"
    assert body["client"] is None


def test_personal_info_empty_strings_clear_business_fields(client, professional):
    url = f"/users/{professional['id']}/personal-info"
    client.patch(
        url,
        json={"name": "Camille", "phone": "0612345678", "siret": "12345678901234", "website": "https://a.fr"},
        headers=professional["headers"],
    )

    response = client.patch(
        url,
        json={"name": "Camille", "phone": "0612345678", "siret": "", "website": ""},
        headers=professional["headers"],
    )

    assert response.status_code == 200
    assert response.json()["professional"]["siret"] is None
    assert response.json()["professional"]["website"] is None


def test_personal_info_validation(client, professional):
    response = client.patch(
        f"/users/{professional['id']}/personal-info",
        json={"name": "C", "phone": "12345", "siret": "123", "website": "ftp://x"},
        headers=professional["headers"],
    )

    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"name", "phone", "siret", "website"}


def test_personal_info_for_client_updates_client_profile(client, db_session, client_account):
    response = client.patch(
        f"/users/{client_account['id']}/personal-info",
        json={"name": "Louis B.", "phone": "+33 6 12 34 56 78", "companyName": "ignored"},
        headers=client_account["headers"],
    )

    assert response.status_code == 200
    assert response.json()["client"]["phone"] == "+33 6 12 34 56 78"
    assert db_session.query(Professional).count() == 0


def test_client_profile_upsert(client, db_session, client_account):
    payload = {
        "name": "Louis Bernard",
        "phone": "0711223344",
        "address": "4 avenue Foch",
        "city": "Paris",
        "postalCode": "75016",
    }
    url = f"/users/{client_account['id']}/client-profile"

    created = client.patch(url, json=payload, headers=client_account["headers"])
    updated = client.patch(url, json={**payload, "city": "Lyon"}, headers=client_account["headers"])

    assert created.status_code == 200
    assert created.json()["hasProfile"] is True
    assert updated.json()["client"]["city"] == "Lyon"
    assert db_session.query(Client).count() == 1


def test_client_profile_validation(client, client_account):
    response = client.patch(
        f"/users/{client_account['id']}/client-profile",
        json={"name": "Louis", "phone": "0711223344", "address": "1", "city": "P", "postalCode": "7501"},
        headers=client_account["headers"],
    )

    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"address", "city", "postalCode"}


def test_client_profile_is_for_clients_only(client, professional):
    response = client.patch(
        f"/users/{professional['id']}/client-profile",
        json={
            "name": "Camille",
            "phone": "0612345678",
            "address": "12 rue des Lilas",
            "city": "Lyon",
            "postalCode": "69003",
        },
        headers=professional["headers"],
    )

    assert response.status_code == 403


def professional_profile_payload(**overrides):
    payload = {
        "type": "NATUROPATH",
        "yearsExperience": 3,
        "bio": "<script>alert(1)</script>Naturopathe passionnée",
        "approach": "Une approche <b>globale</b> et bienveillante",
        "address": "8 place Bellecour",
        "city": "Lyon",
        "postalCode": "69002",
        "specialties": ["Phytothérapie", " ", "Nutrition"],
        "certifications": [],
    }
    payload.update(overrides)
    return payload


def test_professional_profile_maps_type_and_strips_html(client, professional):
    response = client.patch(
        f"/users/{professional['id']}/professional-profile",
        json=professional_profile_payload(),
        headers=professional["headers"],
    )

    assert response.status_code == 200
    profile = response.json()["professional"]
    assert profile["type"] == "OTHER"
    assert profile["otherTypeDetails"] == "NATUROPATH"
    assert "<" not in profile["bio"]
    assert profile["bio"].endswith("Naturopathe passionnée")
    assert profile["approach"] == "Une approche globale et bienveillante"
    assert profile["specialties"] == ["Phytothérapie", "Nutrition"]
    assert response.json()["hasProfile"] is True


def test_professional_profile_keeps_known_types(client, professional):
    response = client.patch(
        f"/users/{professional['id']}/professional-profile",
        json=professional_profile_payload(type="MEDITATION_TEACHER"),
        headers=professional["headers"],
    )

    assert response.json()["professional"]["type"] == "MEDITATION_TEACHER"
    assert response.json()["professional"]["otherTypeDetails"] is None


def test_professional_profile_validation(client, professional):
    response = client.patch(
        f"/users/{professional['id']}/professional-profile",
        json=professional_profile_payload(yearsExperience=-1, bio="short", approach="tiny"),
        headers=professional["headers"],
    )

    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"yearsExperience", "bio", "approach"}


def test_professional_profile_is_for_professionals_only(client, client_account):
    response = client.patch(
        f"/users/{client_account['id']}/professional-profile",
        json=professional_profile_payload(),
        headers=client_account["headers"],
    )

    assert response.status_code == 403


def test_auto_confirm_setting(client, onboarded_professional):
    url = f"/users/{onboarded_professional['id']}/settings/auto-confirm"

    response = client.patch(url, json={"autoConfirmBookings": False}, headers=onboarded_professional["headers"])

    assert response.status_code == 200
    assert response.json() == {"success": True, "autoConfirmBookings": False}
    availability = client.get(
        f"/users/{onboarded_professional['id']}/availability",
        headers=onboarded_professional["headers"],
    )
    assert availability.json()["autoConfirmBookings"] is False


def test_auto_confirm_without_professional_profile(client, professional):
    response = client.patch(
        f"/users/{professional['id']}/settings/auto-confirm",
        json={"autoConfirmBookings": True},
        headers=professional["headers"],
    )

    assert response.status_code == 404


def test_profile_includes_nested_professional(client, onboarded_professional):
    response = client.get(
        f"/users/{onboarded_professional['id']}/profile", headers=onboarded_professional["headers"]
    )

    body = response.json()
    assert body["hasProfile"] is True
    assert body["professional"]["type"] == "YOGA_TEACHER"
    assert body["professional"]["languages"] == ["fr", "en"]
    assert body["professional"]["notificationSettings"] == {
        "emailEnabled": True,
        "smsEnabled": True,
        "marketingEmails": False,
    }


def test_professional_profile_rejects_markup_only_text(client, professional):
    response = client.patch(
        f"/users/{professional['id']}/professional-profile",
        json=professional_profile_payload(bio="<p></p><p></p><p></p>", approach="<b>ok</b>" * 3),
        headers=professional["headers"],
    )

    assert response.status_code == 400
    assert {e["field"] for e in response.json()["errors"]} == {"bio", "approach"}
