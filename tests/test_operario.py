"""
Operario area: own services, requests and records.
"""

import pytest


@pytest.fixture
def operario(login_as):
    """Logged-in operario linked to employee 9."""
    return login_as(["OPERARIO"], id=21, empleadoId=9, nombre="Juan")


@pytest.fixture
def operario_backend(backend):
    backend.add("GET", "/api/employees/9", body={"id": 9, "nombre": "Juan", "apellido": "Paz"})
    backend.add(
        "GET",
        "/api/services/assigned/pendings/9",
        body=[{"id": 31, "tipoServicio": "LIMPIEZA", "estado": "PROGRAMADO"}],
    )
    backend.add("GET", "/api/services/assigned/inProgress/9", body=[])
    backend.add("GET", "/api/services/employee/9/last", body=[])
    return backend


@pytest.mark.usefixtures("operario")
class TestDashboard:
    def test_shows_assigned_services(self, client, operario_backend):
        response = client.get("/operario/dashboard")

        assert response.status_code == 200
        page = response.get_data(as_text=True)
        assert "LIMPIEZA" in page
        assert "Algunos datos pueden estar incompletos." not in page

    def test_failed_block_is_partial(self, client, operario_backend):
        operario_backend.add("GET", "/api/services/employee/9/last", status=500)

        response = client.get("/operario/dashboard")

        assert response.status_code == 200
        page = response.get_data(as_text=True)
        assert "Algunos datos pueden estar incompletos." in page
        assert "LIMPIEZA" in page


class TestWithoutEmployee:
    def test_pages_need_an_employee(self, client, backend, login_as):
        login_as(["OPERARIO"], id=22)

        response = client.get("/operario/licencia-conducir")

        assert response.headers["Location"].endswith("/operario/dashboard")
        assert backend.calls == []


@pytest.mark.usefixtures("operario")
class TestRequests:
    """Salary advance and leave requests."""

    def test_request_salary_advance(self, client, backend):
        backend.add("POST", "/api/salary-advances", status=201, body={"id": 4})

        response = client.post(
            "/operario/adelantos",
            data={"amount": "25000", "reason": "Gastos médicos de urgencia"},
        )

        assert response.status_code == 302
        sent = backend.json_body(backend.calls_to("POST", "/api/salary-advances")[-1])
        assert sent == {"amount": 25000.0, "reason": "Gastos médicos de urgencia", "employeeId": 9}

    def test_invalid_advance_is_not_sent(self, client, backend):
        backend.add("GET", "/api/salary-advances/employee", body={"advances": []})

        response = client.post("/operario/adelantos", data={"amount": "0", "reason": "x" * 20})

        assert response.status_code == 200
        assert "El monto debe ser mayor a 0" in response.get_data(as_text=True)
        assert backend.calls_to("POST", "/api/salary-advances") == []

    def test_lists_my_advances(self, client, backend):
        backend.add(
            "GET",
            "/api/salary-advances/employee",
            body={"advances": [{"amount": 1500, "reason": "Anticipo de aguinaldo", "status": "pending"}]},
        )

        response = client.get("/operario/adelantos")

        assert "Anticipo de aguinaldo" in response.get_data(as_text=True)

    def test_leave_request_is_for_own_employee(self, client, backend):
        backend.add("POST", "/api/employee-leaves", status=201, body={"id": 2})

        client.post(
            "/operario/licencias",
            data={
                "employeeId": "1",
                "fechaInicio": "2026-12-01",
                "fechaFin": "2026-12-10",
                "tipoLicencia": "VACACIONES",
            },
        )

        sent = backend.json_body(backend.calls_to("POST", "/api/employee-leaves")[-1])
        assert sent["employeeId"] == 9


@pytest.mark.usefixtures("operario")
class TestRecords:
    def test_missing_sizes_create_new_record(self, client, backend):
        backend.add("GET", "/api/clothing/9", status=404, body={"message": "Not found"})
        backend.add("POST", "/api/clothing/create/9", status=201, body={})
        sizes = {
            "calzado_talle": "42",
            "pantalon_talle": "44",
            "camisa_talle": "L",
            "campera_bigNort_talle": "L",
            "pielBigNort_talle": "L",
            "medias_talle": "42",
            "pantalon_termico_bigNort_talle": "44",
            "campera_polar_bigNort_talle": "L",
            "mameluco_talle": "L",
        }

        response = client.post("/operario/talles", data=sizes)

        assert response.status_code == 302
        assert backend.json_body(backend.calls_to("POST", "/api/clothing/create/9")[-1]) == sizes

    def test_driver_license_not_found_is_not_an_error(self, client, backend):
        backend.add("GET", "/api/employees/licencia/9", status=404)

        response = client.get("/operario/licencia-conducir")

        assert response.status_code == 200
        assert "toast-error" not in response.get_data(as_text=True)
