"""
Application constants and enums.
"""

from enum import Enum

TOKEN_COOKIE = "token"
USER_COOKIE = "user"

DEFAULT_PAGE_SIZE = 15
MAX_PAGE_SIZE = 100

LOGIN_EXPIRED_URL = "/login?expired=true"


class Roles(str, Enum):
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    OPERARIO = "OPERARIO"

    @classmethod
    def is_admin(cls, roles) -> bool:
        return bool({cls.ADMIN.value, cls.SUPERVISOR.value} & set(roles or []))


# Role-gated path prefixes and the roles allowed behind each one
ROUTE_ROLES = {
    "/admin": {Roles.ADMIN.value, Roles.SUPERVISOR.value},
    "/supervisor": {Roles.SUPERVISOR.value, Roles.ADMIN.value},
    "/operario": {Roles.OPERARIO.value},
}


class ServiceType(str, Enum):
    INSTALACION = "INSTALACION"
    RETIRO = "RETIRO"
    LIMPIEZA = "LIMPIEZA"
    REEMPLAZO = "REEMPLAZO"
    TRASLADO = "TRASLADO"
    MANTENIMIENTO_IN_SITU = "MANTENIMIENTO_IN_SITU"
    REPARACION = "REPARACION"


class ServiceState(str, Enum):
    PROGRAMADO = "PROGRAMADO"
    EN_PROGRESO = "EN_PROGRESO"
    COMPLETADO = "COMPLETADO"
    CANCELADO = "CANCELADO"
    SUSPENDIDO = "SUSPENDIDO"


class EmployeeState(str, Enum):
    ACTIVO = "ACTIVO"
    INACTIVO = "INACTIVO"
    SUSPENDIDO = "SUSPENDIDO"


class VehicleState(str, Enum):
    DISPONIBLE = "DISPONIBLE"
    ASIGNADO = "ASIGNADO"
    MANTENIMIENTO = "MANTENIMIENTO"
    INACTIVO = "INACTIVO"
    BAJA = "BAJA"


class ToiletState(str, Enum):
    DISPONIBLE = "DISPONIBLE"
    ASIGNADO = "ASIGNADO"
    MANTENIMIENTO = "MANTENIMIENTO"
    FUERA_DE_SERVICIO = "FUERA_DE_SERVICIO"
    BAJA = "BAJA"


class ClientState(str, Enum):
    ACTIVO = "ACTIVO"
    INACTIVO = "INACTIVO"


class AdvanceStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Periodicity(str, Enum):
    DIARIA = "Diaria"
    SEMANAL = "Semanal"
    MENSUAL = "Mensual"
    ANUAL = "Anual"


class ConditionState(str, Enum):
    ACTIVO = "Activo"
    INACTIVO = "Inactivo"
    TERMINADO = "Terminado"
