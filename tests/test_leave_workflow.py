from fastapi import status

from rota_engine.models.leave_request import LeaveRequest, LeaveStatus


def _create_leave_request(client, headers, employee, start="2025-07-01", end="2025-07-05", leave_type="annual"):
    return client.post(
        "/api/leave/requests",
        headers=headers,
        json={"employee_id": employee.id, "start_date": start, "end_date": end, "leave_type": leave_type}
    )


def _decide(client, headers, request_id, outcome):
    return client.post(f"/api/leave/requests/{request_id}/decision", headers=headers, json={"outcome": outcome})


def test_employee_requests_own_leave(client, employee_headers, employee):
    """An employee files a pending request for themselves."""
    response = _create_leave_request(client, employee_headers, employee)
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "pending"
    assert data["duration_days"] == 5
    assert data["created_by"] == employee.id


def test_employee_cannot_request_for_colleague(client, employee_headers, colleague):
    response = _create_leave_request(client, employee_headers, colleague)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_missing_company_context_is_rejected(client, employee):
    response = _create_leave_request(client, {}, employee)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_admin_approval(client, admin_headers, employee_headers, employee, db_session):
    req_id = _create_leave_request(client, employee_headers, employee).json()["id"]

    response = _decide(client, admin_headers, req_id, "approved")
    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    assert response.json()["decided_by"] == 900
    assert db_session.get(LeaveRequest, req_id).status == LeaveStatus.APPROVED.value


def test_employee_cannot_decide(client, employee_headers, employee):
    req_id = _create_leave_request(client, employee_headers, employee).json()["id"]
    assert _decide(client, employee_headers, req_id, "approved").status_code == 403


def test_second_decision_is_conflict(client, admin_headers, employee):
    req_id = _create_leave_request(client, admin_headers, employee).json()["id"]
    _decide(client, admin_headers, req_id, "approved")

    response = _decide(client, admin_headers, req_id, "declined")
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["errors"][0]["code"] == "InvalidTransition"


def test_conflict_detection(client, admin_headers, employee):
    """Overlapping requests of any type are refused with a typed reason."""
    assert _create_leave_request(client, admin_headers, employee).status_code == 200

    response = _create_leave_request(client, admin_headers, employee, "2025-07-03", "2025-07-04", "sick")
    assert response.status_code == status.HTTP_409_CONFLICT
    error = response.json()["errors"][0]
    assert error["code"] == "OverlappingLeave"
    assert error["details"]["employee_id"] == employee.id


def test_inverted_range_is_unprocessable(client, admin_headers, employee):
    response = _create_leave_request(client, admin_headers, employee, "2025-07-05", "2025-07-01")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["errors"][0]["code"] == "InvalidTimeRange"


def test_unknown_leave_type_fails_validation(client, admin_headers, employee):
    response = _create_leave_request(client, admin_headers, employee, leave_type="Vacation")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["errors"][0]["field"] == "leave_type"


def test_admin_edit_and_cancel(client, admin_headers, employee):
    req_id = _create_leave_request(client, admin_headers, employee).json()["id"]

    edited = client.put(f"/api/leave/requests/{req_id}", headers=admin_headers, json={"end_date": "2025-07-08"})
    assert edited.status_code == 200
    assert edited.json()["duration_days"] == 8

    cancelled = client.post(f"/api/leave/requests/{req_id}/cancel", headers=admin_headers)
    assert cancelled.json()["status"] == "cancelled"

    again = client.post(f"/api/leave/requests/{req_id}/cancel", headers=admin_headers)
    assert again.status_code == 409


def test_delete_then_not_found(client, admin_headers, employee):
    req_id = _create_leave_request(client, admin_headers, employee).json()["id"]
    assert client.delete(f"/api/leave/requests/{req_id}", headers=admin_headers).json()["deleted"] is True
    assert client.get(f"/api/leave/requests/{req_id}", headers=admin_headers).status_code == 404


def test_list_requests_for_employee_is_own_only(client, admin_headers, employee_headers, employee, colleague):
    _create_leave_request(client, admin_headers, employee)
    _create_leave_request(client, admin_headers, colleague)
    params = {"start": "2025-07-01", "end": "2025-07-31"}

    everyone = client.get("/api/leave/requests", headers=admin_headers, params=params)
    assert len(everyone.json()) == 2

    mine = client.get("/api/leave/requests", headers=employee_headers, params=params)
    assert [r["employee_id"] for r in mine.json()] == [employee.id]


def test_balance_after_entitlement(client, admin_headers, employee_headers, employee):
    entitlement = client.put(
        "/api/leave/entitlements",
        headers=admin_headers,
        json={
            "employee_id": employee.id,
            "leave_type": "annual",
            "period_start": "2025-01-01",
            "period_end": "2025-12-31",
            "entitled_days": 25,
        }
    )
    assert entitlement.status_code == 200

    req_id = _create_leave_request(client, employee_headers, employee).json()["id"]
    _decide(client, admin_headers, req_id, "approved")

    response = client.get(
        "/api/leave/balance",
        headers=employee_headers,
        params={"employee_id": employee.id, "period_start": "2025-01-01", "period_end": "2025-12-31"}
    )
    assert response.status_code == 200
    assert response.json()["entitled"] == 25
    assert response.json()["taken"] == 5
    assert response.json()["balance"] == 20

    balances = client.get(
        "/api/leave/balances",
        headers=employee_headers,
        params={"employee_id": employee.id, "period_start": "2025-01-01", "period_end": "2025-12-31"}
    )
    assert balances.json()["sick"]["taken"] == 0


def test_entitlement_period_is_validated(client, admin_headers, employee):
    response = client.put(
        "/api/leave/entitlements",
        headers=admin_headers,
        json={
            "employee_id": employee.id,
            "leave_type": "annual",
            "period_start": "2025-12-31",
            "period_end": "2025-01-01",
            "entitled_days": 25,
        }
    )
    assert response.status_code == 422


def test_balances_with_inverted_period_is_unprocessable(client, admin_headers, employee):
    response = client.get(
        "/api/leave/balances",
        headers=admin_headers,
        params={"employee_id": employee.id, "period_start": "2025-12-31", "period_end": "2025-01-01"}
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["errors"][0]["code"] == "InvalidTimeRange"


def test_balances_for_unknown_employee_is_not_found(client, admin_headers):
    response = client.get(
        "/api/leave/balances",
        headers=admin_headers,
        params={"employee_id": 9999, "period_start": "2025-01-01", "period_end": "2025-12-31"}
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["errors"][0]["code"] == "NotFound"
