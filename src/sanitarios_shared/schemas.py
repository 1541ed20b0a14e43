"""
Pydantic schemas for form validation.

HTML forms post every field as a string; ``FormModel`` turns blank inputs
into ``None`` so optional fields stay optional and numeric fields are
coerced by pydantic.
"""

import re
from datetime import date

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator, model_validator

from sanitarios_shared.constants import (
    ClientState,
    ConditionState,
    EmployeeState,
    Periodicity,
    Roles,
    ToiletState,
    VehicleState,
)
from sanitarios_shared.validation import (
    ValidationError as FormValidationError,
    validate_date_range,
    validate_iso_date,
    validate_password,
    validate_phone,
)


def _check(func, *args):
    # pydantic only collects ValueError from validators
    try:
        func(*args)
    except FormValidationError as e:
        raise ValueError(str(e)) from None


def first_error_message(error: ValidationError) -> str:
    """Human readable message of the first failing field."""
    errors = error.errors()
    if not errors:
        return "Datos inválidos"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    if first.get("type") == "missing":
        return f"El campo {field} es obligatorio"
    message = first.get("msg", "Datos inválidos")
    if message.startswith("Value error, "):
        return message.removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


class FormModel(BaseModel):
    model_config = {"str_strip_whitespace": True, "extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def blank_to_none(cls, data):
        if isinstance(data, dict):
            return {k: (None if v == "" else v) for k, v in data.items()}
        return data

    def to_payload(self) -> dict:
        """JSON body for the backend, without unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class LoginRequest(FormModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase to ensure consistent authentication."""
        return v.strip().lower()


class ForgotPasswordRequest(FormModel):
    email: EmailStr


class ChangePasswordRequest(FormModel):
    oldPassword: str = Field(..., min_length=1)
    newPassword: str
    confirmPassword: str | None = None

    @field_validator("newPassword")
    @classmethod
    def validate_password_strength(cls, v):
        _check(validate_password, v)
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirmPassword is not None and self.confirmPassword != self.newPassword:
            raise ValueError("Las contraseñas no coinciden")
        return self

    def to_payload(self) -> dict:
        return {"oldPassword": self.oldPassword, "newPassword": self.newPassword}


class ClientForm(FormModel):
    nombre: str = Field(..., min_length=1)
    email: EmailStr
    cuit: str
    direccion: str = Field(..., min_length=1)
    telefono: str
    contacto_principal: str = Field(..., min_length=1)
    contacto_principal_telefono: str | None = None
    contactoObra1: str | None = None
    contacto_obra1_telefono: str | None = None
    contactoObra2: str | None = None
    contacto_obra2_telefono: str | None = None
    estado: ClientState = ClientState.ACTIVO

    @field_validator("cuit")
    @classmethod
    def validate_cuit(cls, v):
        if not re.match(r"^(\d{2}-\d{8}-\d{1}|\d{11})$", v):
            raise ValueError("Formato de CUIT inválido. Use XX-XXXXXXXX-X o 11 dígitos seguidos")
        return v

    @field_validator("telefono")
    @classmethod
    def validate_telefono(cls, v):
        _check(validate_phone, v)
        return v


class EmployeeForm(FormModel):
    nombre: str = Field(..., min_length=1)
    apellido: str = Field(..., min_length=1)
    documento: str = Field(..., min_length=1)
    fecha_nacimiento: date
    direccion: str = Field(..., min_length=1)
    telefono: str
    email: EmailStr
    cargo: str = Field(..., min_length=1)
    estado: EmployeeState = EmployeeState.ACTIVO

    @field_validator("telefono")
    @classmethod
    def validate_telefono(cls, v):
        _check(validate_phone, v)
        return v


class VehicleForm(FormModel):
    placa: str = Field(..., min_length=1)
    marca: str = Field(..., min_length=1)
    modelo: str = Field(..., min_length=1)
    anio: int
    capacidadCarga: int
    estado: VehicleState = VehicleState.DISPONIBLE

    @field_validator("anio")
    @classmethod
    def validate_anio(cls, v):
        if v < 1900:
            raise ValueError("El año debe ser mayor a 1900")
        if v > date.today().year + 1:
            raise ValueError("El año no puede ser futuro")
        return v

    @field_validator("capacidadCarga")
    @classmethod
    def validate_capacidad(cls, v):
        if v < 1:
            raise ValueError("La capacidad de carga debe ser mayor a 0")
        return v


class ToiletForm(FormModel):
    codigo_interno: str = Field(..., min_length=1)
    modelo: str = Field(..., min_length=1)
    fecha_adquisicion: str
    estado: ToiletState = ToiletState.DISPONIBLE

    @field_validator("fecha_adquisicion")
    @classmethod
    def validate_fecha(cls, v):
        _check(validate_iso_date, v, "fecha de adquisición")
        return v


class ContractualConditionForm(FormModel):
    clientId: int
    tipo_de_contrato: str = "Permanente"
    tipo_servicio: str | None = None
    fecha_inicio: str
    fecha_fin: str | None = None
    condiciones_especificas: str | None = None
    tarifa: float
    periodicidad: Periodicity
    estado: ConditionState = ConditionState.ACTIVO

    @field_validator("clientId")
    @classmethod
    def validate_client(cls, v):
        if v < 1:
            raise ValueError("Debe seleccionar un cliente")
        return v

    @field_validator("tipo_de_contrato")
    @classmethod
    def validate_tipo(cls, v):
        if v not in ("Temporal", "Permanente", "Por Evento"):
            raise ValueError("Tipo de contrato inválido")
        return v

    @field_validator("tarifa")
    @classmethod
    def validate_tarifa(cls, v):
        if v <= 0:
            raise ValueError("La tarifa debe ser mayor a 0")
        return v

    @model_validator(mode="after")
    def validate_dates(self):
        if self.tipo_de_contrato == "Temporal" and not self.fecha_fin:
            raise ValueError("La fecha de fin es obligatoria para contratos temporales")
        if self.fecha_fin:
            _check(validate_date_range, self.fecha_inicio, self.fecha_fin)
        else:
            _check(validate_iso_date, self.fecha_inicio, "fecha de inicio")
        return self


class ManualAssignment(BaseModel):
    empleadoId: int
    vehiculoId: int | None = None
    banosIds: list[int] | None = None


class ServiceForm(FormModel):
    clienteId: int
    fechaProgramada: str
    tipoServicio: str = Field(..., min_length=1)
    cantidadBanos: int = 0
    cantidadEmpleados: int = 1
    cantidadVehiculos: int = 1
    ubicacion: str
    notas: str | None = None
    condicionContractualId: int | None = None
    banosInstalados: list[int] | None = None
    asignacionAutomatica: bool = True
    asignacionesManual: list[ManualAssignment] | None = None

    @field_validator("clienteId")
    @classmethod
    def validate_cliente(cls, v):
        if v < 1:
            raise ValueError("Debe seleccionar un cliente")
        return v

    @field_validator("ubicacion")
    @classmethod
    def validate_ubicacion(cls, v):
        if len(v) < 3:
            raise ValueError("La ubicación debe tener al menos 3 caracteres")
        if len(v) > 500:
            raise ValueError("La ubicación no puede exceder los 500 caracteres")
        return v

    @field_validator("cantidadBanos")
    @classmethod
    def validate_banos(cls, v):
        if v < 0:
            raise ValueError("La cantidad de baños no puede ser negativa")
        return v

    @field_validator("cantidadEmpleados")
    @classmethod
    def validate_empleados(cls, v):
        if v < 1:
            raise ValueError("Debe especificar al menos 1 empleado")
        return v

    @field_validator("cantidadVehiculos")
    @classmethod
    def validate_vehiculos(cls, v):
        if v < 1:
            raise ValueError("Debe especificar al menos 1 vehículo")
        return v

    @field_validator("fechaProgramada")
    @classmethod
    def validate_fecha(cls, v):
        _check(validate_iso_date, v, "fecha de servicio")
        return v

    @model_validator(mode="after")
    def validate_assignments(self):
        if not self.asignacionAutomatica and not self.asignacionesManual:
            raise ValueError("Se requiere al menos una asignación manual de recursos")
        return self

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload.pop("asignacionAutomatica", None)
        if self.asignacionAutomatica:
            payload.pop("asignacionesManual", None)
        return payload


class SalaryAdvanceForm(FormModel):
    amount: float
    reason: str

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError("El monto debe ser mayor a 0")
        if v > 1000000:
            raise ValueError("El monto máximo permitido es 1.000.000")
        return v

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        if len(v) < 10:
            raise ValueError("El motivo debe tener al menos 10 caracteres")
        if len(v) > 500:
            raise ValueError("El motivo no puede tener más de 500 caracteres")
        return v


class UserForm(FormModel):
    nombre: str
    email: EmailStr
    password: str | None = None
    roles: list[Roles]
    empleadoId: int | None = None

    @field_validator("nombre")
    @classmethod
    def validate_nombre(cls, v):
        if len(v) < 3:
            raise ValueError("El nombre debe tener al menos 3 caracteres")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v):
        # blank keeps the current password on update
        if v:
            _check(validate_password, v)
        return v

    @field_validator("roles", mode="before")
    @classmethod
    def validate_roles(cls, v):
        if isinstance(v, str):
            v = [v]
        if not v:
            raise ValueError("Debe seleccionar al menos un rol")
        return [str(r).upper() for r in v]


class LeaveForm(FormModel):
    employeeId: int
    fechaInicio: str
    fechaFin: str
    tipoLicencia: str = Field(..., min_length=1)
    notas: str | None = None

    @model_validator(mode="after")
    def validate_dates(self):
        _check(validate_date_range, self.fechaInicio, self.fechaFin)
        return self


class DriverLicenseForm(FormModel):
    categoria: str = Field(..., min_length=1)
    fecha_expedicion: str
    fecha_vencimiento: str

    @model_validator(mode="after")
    def validate_dates(self):
        _check(validate_date_range, self.fecha_expedicion, self.fecha_vencimiento)
        return self


class EmergencyContactForm(FormModel):
    nombre: str = Field(..., min_length=1)
    apellido: str = Field(..., min_length=1)
    parentesco: str = Field(..., min_length=1)
    telefono: str

    @field_validator("telefono")
    @classmethod
    def validate_telefono(cls, v):
        if len(v) < 7:
            raise ValueError("El teléfono debe tener al menos 7 caracteres")
        if len(v) > 20:
            raise ValueError("El teléfono no puede tener más de 20 caracteres")
        return v


class ClothingForm(FormModel):
    calzado_talle: str = Field(..., min_length=1)
    pantalon_talle: str = Field(..., min_length=1)
    camisa_talle: str = Field(..., min_length=1)
    campera_bigNort_talle: str = Field(..., min_length=1)
    pielBigNort_talle: str = Field(..., min_length=1)
    medias_talle: str = Field(..., min_length=1)
    pantalon_termico_bigNort_talle: str = Field(..., min_length=1)
    campera_polar_bigNort_talle: str = Field(..., min_length=1)
    mameluco_talle: str = Field(..., min_length=1)


class VehicleMaintenanceForm(FormModel):
    vehiculoId: int
    fechaMantenimiento: str
    tipoMantenimiento: str
    descripcion: str = Field(..., min_length=1)
    costo: float = 0
    proximoMantenimiento: str | None = None

    @field_validator("tipoMantenimiento")
    @classmethod
    def validate_tipo(cls, v):
        if v not in ("Preventivo", "Correctivo"):
            raise ValueError("El tipo de mantenimiento debe ser Preventivo o Correctivo")
        return v

    @field_validator("costo")
    @classmethod
    def validate_costo(cls, v):
        if v < 0:
            raise ValueError("El costo no puede ser negativo")
        return v

    @field_validator("fechaMantenimiento")
    @classmethod
    def validate_fecha(cls, v):
        _check(validate_iso_date, v, "fecha de mantenimiento")
        return v


class ToiletMaintenanceForm(FormModel):
    baño_id: int
    fecha_mantenimiento: str
    tipo_mantenimiento: str
    descripcion: str = Field(..., min_length=1)
    empleado_id: int
    costo: float = 0

    @field_validator("tipo_mantenimiento")
    @classmethod
    def validate_tipo(cls, v):
        if v not in ("Preventivo", "Correctivo"):
            raise ValueError("El tipo de mantenimiento debe ser Preventivo o Correctivo")
        return v

    @field_validator("costo")
    @classmethod
    def validate_costo(cls, v):
        if v < 0:
            raise ValueError("El costo no puede ser negativo")
        return v

    @field_validator("fecha_mantenimiento")
    @classmethod
    def validate_fecha(cls, v):
        _check(validate_iso_date, v, "fecha de mantenimiento")
        return v
