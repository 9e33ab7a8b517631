import pytest

from serenibook.models import ProfessionalType
from serenibook.security_utils import (
    generate_secure_token,
    hash_password,
    mask_email,
    sanitize_text,
    verify_password,
)
from serenibook.shared.activity import map_activity_type, other_type_details
from serenibook.shared.validators import (
    time_to_minutes,
    validate_email,
    validate_fr_phone,
    validate_password,
    validate_postal_code,
    validate_siret,
    validate_time,
    validate_website,
)


@pytest.mark.parametrize("password", ["Secret123!", "a1@aaaaa", "Passw0rd+Long", "12345678a&"])
def test_valid_passwords(password):
    assert validate_password(password) == password


@pytest.mark.parametrize(
    "password",
    ["short1!", "nodigits!!", "12345678!", "NoSpecial123", "with space1!", "accentué1!"],
)
def test_invalid_passwords(password):
    with pytest.raises(ValueError):
        validate_password(password)


def test_email_is_normalised():
    assert validate_email("  Camille@Example.COM ") == "camille@example.com"
    with pytest.raises(ValueError):
        validate_email("camille@localhost")


@pytest.mark.parametrize(
    "phone", ["0612345678", "06 12 34 56 78", "06.12.34.56.78", "+33 6 12 34 56 78", "0033612345678"]
)
def test_valid_french_phones(phone):
    assert validate_fr_phone(phone) == phone


@pytest.mark.parametrize("phone", ["061234567", "0012345678", "+44 20 7946 0958", "06-12-34-56"])
def test_invalid_french_phones(phone):
    with pytest.raises(ValueError):
        validate_fr_phone(phone)


def test_postal_code_and_siret():
    assert validate_postal_code(" 69003 ") == "69003"
    with pytest.raises(ValueError):
        validate_postal_code("6900")
    assert validate_siret("") == ""
    assert validate_siret("12345678901234") == "12345678901234"
    with pytest.raises(ValueError):
        validate_siret("1234567890123A")


def test_website():
    assert validate_website("") == ""
    assert validate_website("https://studio-zen.fr") == "https://studio-zen.fr"
    with pytest.raises(ValueError):
        validate_website("studio-zen.fr")


def test_times():
    assert validate_time("00:00") == "00:00"
    assert validate_time("23:59") == "23:59"
    for bad in ("24:00", "7:30", "12:60", ""):
        with pytest.raises(ValueError):
            validate_time(bad)
    assert time_to_minutes("09:30") == 570


@pytest.mark.parametrize(
    "activity,expected",
    [
        ("LIFE_COACH", ProfessionalType.LIFE_COACH),
        ("PERSONAL_COACH", ProfessionalType.PERSONAL_COACH),
        ("YOGA_TEACHER", ProfessionalType.YOGA_TEACHER),
        ("PILATES_INSTRUCTOR", ProfessionalType.PILATES_INSTRUCTOR),
        ("THERAPIST", ProfessionalType.THERAPIST),
        ("MASSAGE_THERAPIST", ProfessionalType.MASSAGE_THERAPIST),
        ("MEDITATION_TEACHER", ProfessionalType.MEDITATION_TEACHER),
        ("NATUROPATH", ProfessionalType.OTHER),
        ("NUTRITIONIST", ProfessionalType.OTHER),
        ("OSTEOPATH", ProfessionalType.OTHER),
        ("REFLEXOLOGIST", ProfessionalType.OTHER),
        ("SOPHROLOGIST", ProfessionalType.OTHER),
        ("OTHER", ProfessionalType.OTHER),
        ("ASTROLOGER", ProfessionalType.OTHER),
        ("", ProfessionalType.OTHER),
    ],
)
def test_activity_mapping(activity, expected):
    assert map_activity_type(activity) is expected


def test_other_type_details():
    assert other_type_details("OSTEOPATH", None) == "OSTEOPATH"
    assert other_type_details("OTHER", "Art-thérapeute") == "Art-thérapeute"
    assert other_type_details("OTHER", None) is None
    assert other_type_details("YOGA_TEACHER", None) is None


def test_password_hashing():
    hashed = hash_password("Secret123!")
    assert hashed.startswith("$2")
    assert verify_password("Secret123!", hashed)
    assert not verify_password("Secret123?", hashed)
    assert not verify_password("Secret123!", "not-a-hash")


def test_tokens_and_masking():
    token = generate_secure_token()
    assert len(token) == 64
    assert token != generate_secure_token()
    assert mask_email("camille@example.com") == "ca***@ex***.com"


def test_sanitize_text_strips_markup():
    assert sanitize_text("<p>Hello <em>there</em></p>") == "Hello there"
    assert sanitize_text(None) is None
    assert sanitize_text("  plain  ") == "plain"


@pytest.mark.parametrize(
    "text",
    ["Yoga & Pilates", "Cours pour 5 < 10 personnes", "L'atelier du souffle", "Tom & Jerry's <3"],
)
def test_sanitize_text_keeps_plain_punctuation(text):
    assert sanitize_text(text) == text
    assert sanitize_text(sanitize_text(text)) == text


def test_sanitize_text_of_markup_only_is_empty():
    assert sanitize_text("<b></b><i> </i>") == ""
