"""
Tests for the patients router against a substitute service.

These cover request decoding, path id parsing, envelope shape and the
mapping of every error category to HTTP 400.
"""
from api.routers.patients import parse_id
from core.exceptions import PatientNotFoundError, PersistenceError, ValidationError

PATIENT_BODY = {
    "name": "Zopsmart",
    "phone": "+919172681679",
    "discharge": True,
    "bloodGroup": "+A",
    "description": "patient description",
}


def _assert_error(response, message=None):
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == 400
    assert body["status"] == "Error"
    if message is not None:
        assert body["Message"] == message
    return body


# =============================================================================
# INSERT
# =============================================================================

def test_insert_success(mock_client, mock_service, sample_patient):
    mock_service.insert.return_value = sample_patient

    response = mock_client.post("/patients", json=PATIENT_BODY)

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == 200
    assert body["status"] == "Success"
    patient = body["data"]["Patient"]
    assert patient["id"] == 5
    assert patient["bloodGroup"] == "+A"
    assert "createdAt" in patient
    assert "updatedAt" in patient
    assert "deletedAt" not in patient

    passed = mock_service.insert.call_args.args[0]
    assert passed.name == "Zopsmart"
    assert passed.blood_group == "+A"
    assert passed.discharge is True


def test_insert_service_error(mock_client, mock_service):
    mock_service.insert.side_effect = ValidationError("invalid name")

    response = mock_client.post("/patients", json={**PATIENT_BODY, "name": ""})

    _assert_error(response, "invalid name")


def test_insert_unknown_fields_ignored_missing_fields_zeroed(mock_client, mock_service, sample_patient):
    mock_service.insert.return_value = sample_patient

    response = mock_client.post("/patients", json={"name": "Zopsmart", "discharged": True})

    assert response.status_code == 200
    passed = mock_service.insert.call_args.args[0]
    assert passed.discharge is False
    assert passed.phone == ""


def test_insert_null_fields_zeroed(mock_client, mock_service, sample_patient):
    mock_service.insert.return_value = sample_patient

    response = mock_client.post("/patients", json={"name": "Zopsmart", "phone": None, "discharge": None})

    assert response.status_code == 200
    passed = mock_service.insert.call_args.args[0]
    assert passed.phone == ""
    assert passed.discharge is False


def test_insert_discharge_must_be_boolean(mock_client, mock_service):
    for value in ("true", 1, "yes"):
        response = mock_client.post("/patients", json={**PATIENT_BODY, "discharge": value})

        body = _assert_error(response)
        assert "discharge" in body["Message"]
    mock_service.insert.assert_not_called()


def test_insert_malformed_json(mock_client, mock_service):
    response = mock_client.post(
        "/patients",
        content=b'{{"name": "ak"}',
        headers={"Content-Type": "application/json"},
    )

    body = _assert_error(response)
    assert body["Message"]
    mock_service.insert.assert_not_called()


def test_insert_wrong_field_type(mock_client, mock_service):
    response = mock_client.post("/patients", json={**PATIENT_BODY, "discharge": {"nested": 1}})

    body = _assert_error(response)
    assert "discharge" in body["Message"]
    mock_service.insert.assert_not_called()


# =============================================================================
# GET
# =============================================================================

def test_get_by_id_success(mock_client, mock_service, sample_patient):
    mock_service.get_by_id.return_value = sample_patient

    response = mock_client.get("/patients/5")

    assert response.status_code == 200
    assert response.json()["data"]["Patient"]["name"] == "ZopSmart"
    mock_service.get_by_id.assert_called_once_with(5)


def test_get_by_id_not_found(mock_client, mock_service):
    mock_service.get_by_id.side_effect = PatientNotFoundError(patient_id=999)

    response = mock_client.get("/patients/999")

    body = _assert_error(response)
    assert "999" in body["Message"]


def test_non_numeric_id_parsed_as_zero(mock_client, mock_service):
    mock_service.get_by_id.side_effect = ValidationError("invalid id")

    response = mock_client.get("/patients/abc")

    _assert_error(response, "invalid id")
    mock_service.get_by_id.assert_called_once_with(0)


def test_out_of_range_id_clamped(mock_client, mock_service):
    mock_service.get_by_id.side_effect = PatientNotFoundError(patient_id=2**63 - 1)

    response = mock_client.get("/patients/99999999999999999999")

    _assert_error(response)
    mock_service.get_by_id.assert_called_once_with(2**63 - 1)


def test_parse_id():
    assert parse_id("42") == 42
    assert parse_id("+7") == 7
    assert parse_id("0005") == 5
    assert parse_id("abc") == 0
    assert parse_id("1.5") == 0
    assert parse_id("9223372036854775807") == 2**63 - 1
    assert parse_id("9223372036854775808") == 2**63 - 1
    assert parse_id("-9223372036854775809") == -2**63
    assert parse_id("9" * 5000) == 2**63 - 1
    assert parse_id("0" * 5000 + "3") == 3


def test_get_all_success(mock_client, mock_service, sample_patient):
    mock_service.get_all.return_value = [sample_patient, sample_patient]

    response = mock_client.get("/patients")

    assert response.status_code == 200
    assert len(response.json()["data"]["Patient"]) == 2


def test_get_all_error(mock_client, mock_service):
    mock_service.get_all.side_effect = PersistenceError(operation="get_all", error="disk I/O error")

    response = mock_client.get("/patients")

    _assert_error(response, "database error during get_all: disk I/O error")


# =============================================================================
# UPDATE
# =============================================================================

def test_update_success(mock_client, mock_service, sample_patient):
    mock_service.update.return_value = sample_patient

    response = mock_client.put("/patients/5", json=PATIENT_BODY)

    assert response.status_code == 200
    assert response.json()["data"]["Patient"]["id"] == 5
    passed, patient_id = mock_service.update.call_args.args
    assert patient_id == 5
    assert passed.name == "Zopsmart"


def test_update_error(mock_client, mock_service):
    mock_service.update.side_effect = PatientNotFoundError(patient_id=5)

    response = mock_client.put("/patients/5", json=PATIENT_BODY)

    _assert_error(response)


def test_update_malformed_json(mock_client, mock_service):
    response = mock_client.put(
        "/patients/5",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    _assert_error(response)
    mock_service.update.assert_not_called()


# =============================================================================
# DELETE
# =============================================================================

def test_delete_success(mock_client, mock_service):
    mock_service.delete.return_value = None

    response = mock_client.delete("/patients/5")

    assert response.status_code == 200
    assert response.json() == {
        "code": 200,
        "status": "Success",
        "data": "Patient deleted Successfully",
    }
    mock_service.delete.assert_called_once_with(5)


def test_delete_error(mock_client, mock_service):
    mock_service.delete.side_effect = ValidationError("invalid id")

    response = mock_client.delete("/patients/-1")

    _assert_error(response, "invalid id")
    mock_service.delete.assert_called_once_with(-1)
