"""
Unit tests for form schemas and input validation.
"""

import pytest
from pydantic import ValidationError

from sanitarios_shared.schemas import (
    ChangePasswordRequest,
    ClientForm,
    ContractualConditionForm,
    LoginRequest,
    SalaryAdvanceForm,
    ServiceForm,
    UserForm,
    VehicleForm,
    first_error_message,
)
from sanitarios_shared.validation import (
    ValidationError as FormValidationError,
    validate_date_range,
    validate_pagination,
    validate_phone,
)

SERVICE_DATA = {
    "clienteId": "4",
    "fechaProgramada": "2026-11-02",
    "tipoServicio": "INSTALACION",
    "cantidadBanos": "2",
    "cantidadEmpleados": "1",
    "cantidadVehiculos": "1",
    "ubicacion": "Ruta 8 km 40",
}


def _message(model_cls, data) -> str:
    with pytest.raises(ValidationError) as exc_info:
        model_cls.model_validate(data)
    return first_error_message(exc_info.value)


class TestFormModel:
    """Blank inputs and payloads."""

    def test_blank_optional_fields_are_dropped(self):
        form = ServiceForm.model_validate({**SERVICE_DATA, "notas": "", "condicionContractualId": ""})

        payload = form.to_payload()

        assert "notas" not in payload
        assert "condicionContractualId" not in payload
        assert payload["clienteId"] == 4

    def test_missing_field_message(self):
        assert _message(LoginRequest, {"email": "admin@empresa.com"}) == (
            "El campo password es obligatorio"
        )

    def test_login_email_is_normalized(self):
        form = LoginRequest.model_validate({"email": " Admin@Empresa.com ", "password": "x"})

        assert form.email == "admin@empresa.com"


class TestServiceForm:
    def test_automatic_payload_has_no_assignment_keys(self):
        payload = ServiceForm.model_validate(SERVICE_DATA).to_payload()

        assert "asignacionAutomatica" not in payload
        assert "asignacionesManual" not in payload

    def test_manual_requires_assignments(self):
        data = {**SERVICE_DATA, "asignacionAutomatica": "false"}

        assert _message(ServiceForm, data) == (
            "Se requiere al menos una asignación manual de recursos"
        )

    def test_manual_payload_keeps_assignments(self):
        data = {
            **SERVICE_DATA,
            "asignacionAutomatica": "false",
            "asignacionesManual": [{"empleadoId": 3, "vehiculoId": None, "banosIds": [1, 2]}],
        }

        payload = ServiceForm.model_validate(data).to_payload()

        assert payload["asignacionesManual"] == [{"empleadoId": 3, "banosIds": [1, 2]}]

    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("clienteId", "0", "Debe seleccionar un cliente"),
            ("ubicacion", "ab", "La ubicación debe tener al menos 3 caracteres"),
            ("cantidadEmpleados", "0", "Debe especificar al menos 1 empleado"),
            ("fechaProgramada", "02/11/2026", "Formato de fecha de servicio inválido"),
        ],
    )
    def test_field_rules(self, field, value, message):
        assert _message(ServiceForm, {**SERVICE_DATA, field: value}) == message


class TestOtherForms:
    def test_client_cuit_format(self):
        data = {
            "nombre": "Obras SA",
            "email": "obras@empresa.com",
            "cuit": "20-123",
            "direccion": "Calle 1",
            "telefono": "011-4444-5555",
            "contacto_principal": "Ana",
        }

        assert _message(ClientForm, data).startswith("Formato de CUIT inválido")

    def test_vehicle_year_range(self):
        data = {"placa": "AB123CD", "marca": "Ford", "modelo": "F-4000", "capacidadCarga": "10"}

        assert _message(VehicleForm, {**data, "anio": "1850"}) == "El año debe ser mayor a 1900"

    def test_temporary_contract_needs_end_date(self):
        data = {
            "clientId": "1",
            "tipo_de_contrato": "Temporal",
            "fecha_inicio": "2026-01-01",
            "tarifa": "1500",
            "periodicidad": "Mensual",
        }

        assert _message(ContractualConditionForm, data) == (
            "La fecha de fin es obligatoria para contratos temporales"
        )

    def test_salary_advance_reason_length(self):
        assert _message(SalaryAdvanceForm, {"amount": "100", "reason": "corto"}) == (
            "El motivo debe tener al menos 10 caracteres"
        )

    def test_change_password_confirmation(self):
        data = {"oldPassword": "vieja1", "newPassword": "nueva123", "confirmPassword": "otra123"}

        assert _message(ChangePasswordRequest, data) == "Las contraseñas no coinciden"

    def test_user_roles_are_required(self):
        data = {"nombre": "Laura", "email": "laura@empresa.com", "roles": []}

        assert _message(UserForm, data) == "Debe seleccionar al menos un rol"

    def test_user_password_is_optional_but_checked(self):
        data = {"nombre": "Laura", "email": "laura@empresa.com", "roles": ["admin"]}

        assert UserForm.model_validate(data).password is None
        assert _message(UserForm, {**data, "password": "abc"}) == (
            "La contraseña debe tener al menos 6 caracteres"
        )


class TestValidation:
    @pytest.mark.parametrize("phone", ["011-4444-5555", "1144445555", "01144445555"])
    def test_valid_phones(self, phone):
        validate_phone(phone)

    def test_invalid_phone(self):
        with pytest.raises(FormValidationError):
            validate_phone("44-55")

    def test_end_before_start(self):
        with pytest.raises(FormValidationError) as exc_info:
            validate_date_range("2026-05-10", "2026-05-01")

        assert str(exc_info.value) == "La fecha de fin no puede ser anterior a la fecha de inicio"

    def test_pagination_defaults_and_caps(self):
        assert validate_pagination(None, None) == (1, 15)
        assert validate_pagination(0, 1000) == (1, 100)
