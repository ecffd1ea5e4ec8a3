from __future__ import annotations

from datetime import date

from faucet_guard.errors import UnknownFaucetError
from faucet_guard.models import Faucet, Location
from faucet_guard.utils.rounding import rate_percent

# Sampling points across the campus
LOCATIONS: tuple[Location, ...] = (
    Location(id="loc-001", name="Edificio de Ingeniería - Piso 1", latitude=4.6097, longitude=-74.0817,
             building="Ingeniería", floor="1", description="Pasillo principal, cerca de laboratorios"),
    Location(id="loc-002", name="Edificio de Ingeniería - Piso 2", latitude=4.6098, longitude=-74.0818,
             building="Ingeniería", floor="2", description="Zona de aulas, pasillo central"),
    Location(id="loc-003", name="Biblioteca Central - Piso 1", latitude=4.6095, longitude=-74.0815,
             building="Biblioteca", floor="1", description="Área de consulta, zona de descanso"),
    Location(id="loc-004", name="Biblioteca Central - Piso 3", latitude=4.6096, longitude=-74.0816,
             building="Biblioteca", floor="3", description="Salas de estudio grupal"),
    Location(id="loc-005", name="Cafetería Principal", latitude=4.6093, longitude=-74.0820,
             building="Cafetería", floor="1", description="Área de comidas, zona de mesas"),
    Location(id="loc-006", name="Edificio Administrativo - Piso 1", latitude=4.6100, longitude=-74.0812,
             building="Administrativo", floor="1", description="Recepción y oficinas administrativas"),
    Location(id="loc-007", name="Laboratorio de Química", latitude=4.6099, longitude=-74.0819,
             building="Ciencias", floor="2", description="Laboratorios de química analítica"),
    Location(id="loc-008", name="Gimnasio Universitario", latitude=4.6092, longitude=-74.0822,
             building="Deportes", floor="1", description="Área de ejercicios y vestuarios"),
    Location(id="loc-009", name="Residencias Estudiantiles - Bloque A", latitude=4.6105, longitude=-74.0810,
             building="Residencias A", floor="1", description="Área común de residencias"),
    Location(id="loc-010", name="Auditorio Principal", latitude=4.6094, longitude=-74.0814,
             building="Auditorio", floor="1", description="Lobby del auditorio principal"),
)


def _faucet(id, code, name, loc_idx, type, status, installed, last, nxt) -> Faucet:
    return Faucet(
        id=id,
        code=code,
        name=name,
        location=LOCATIONS[loc_idx],
        type=type,
        status=status,
        installation_date=date.fromisoformat(installed),
        last_maintenance=date.fromisoformat(last),
        next_maintenance=date.fromisoformat(nxt),
    )


FAUCETS: tuple[Faucet, ...] = (
    _faucet("faucet-001", "ING-P1-001", "Bebedero Ingeniería P1-A", 0, "drinking_fountain", "active",
            "2023-01-15", "2024-08-15", "2024-11-15"),
    _faucet("faucet-002", "ING-P1-002", "Grifo Laboratorio Ing. P1", 0, "tap", "active",
            "2023-02-10", "2024-09-01", "2024-12-01"),
    _faucet("faucet-003", "ING-P2-001", "Bebedero Ingeniería P2-A", 1, "drinking_fountain", "active",
            "2023-01-20", "2024-08-20", "2024-11-20"),
    _faucet("faucet-004", "BIB-P1-001", "Dispensador Biblioteca P1", 2, "water_cooler", "active",
            "2023-03-05", "2024-09-05", "2024-12-05"),
    _faucet("faucet-005", "BIB-P3-001", "Bebedero Biblioteca P3", 3, "drinking_fountain", "maintenance",
            "2023-03-10", "2024-07-10", "2024-10-10"),
    _faucet("faucet-006", "CAF-P1-001", "Dispensador Cafetería", 4, "water_cooler", "active",
            "2023-02-28", "2024-08-28", "2024-11-28"),
    _faucet("faucet-007", "ADM-P1-001", "Bebedero Administrativo", 5, "drinking_fountain", "active",
            "2023-04-12", "2024-09-12", "2024-12-12"),
    _faucet("faucet-008", "LAB-QUI-001", "Grifo Laboratorio Química", 6, "tap", "active",
            "2023-01-30", "2024-08-30", "2024-11-30"),
    _faucet("faucet-009", "GYM-P1-001", "Bebedero Gimnasio", 7, "drinking_fountain", "active",
            "2023-05-15", "2024-09-15", "2024-12-15"),
    _faucet("faucet-010", "RES-A-001", "Dispensador Residencias A", 8, "water_cooler", "out_of_service",
            "2023-06-01", "2024-06-01", "2024-09-01"),
    _faucet("faucet-011", "AUD-P1-001", "Bebedero Auditorio", 9, "drinking_fountain", "active",
            "2023-04-20", "2024-09-20", "2024-12-20"),
    _faucet("faucet-012", "ING-P2-002", "Grifo Aula Ing. P2", 1, "tap", "active",
            "2023-07-10", "2024-09-10", "2024-12-10"),
)

_FAUCETS_BY_ID = {f.id: f for f in FAUCETS}


def get_faucet(faucet_id: str) -> Faucet:
    try:
        return _FAUCETS_BY_ID[faucet_id]
    except KeyError:
        raise UnknownFaucetError(faucet_id) from None


def faucets_by_status(status: str, faucets=FAUCETS) -> list[Faucet]:
    return [f for f in faucets if f.status == status]


def faucets_by_building(building: str, faucets=FAUCETS) -> list[Faucet]:
    return [f for f in faucets if f.location.building == building]


def faucets_by_type(faucet_type: str, faucets=FAUCETS) -> list[Faucet]:
    return [f for f in faucets if f.type == faucet_type]


def faucet_stats(faucets=FAUCETS) -> dict[str, int]:
    total = len(faucets)
    active = len(faucets_by_status("active", faucets))
    return {
        "total": total,
        "active": active,
        "maintenance": len(faucets_by_status("maintenance", faucets)),
        "out_of_service": len(faucets_by_status("out_of_service", faucets)),
        "active_percentage": rate_percent(active, total),
    }
